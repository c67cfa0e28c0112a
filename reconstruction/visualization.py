"""Plan status card rendering"""

import io
import base64
import logging
from pathlib import Path
from typing import Union

from PIL import Image, ImageDraw, ImageFont

from reconstruction.plan import Plan

logger = logging.getLogger(__name__)

WIDTH = 480
HEADER_HEIGHT = 60
BAR_ROW_HEIGHT = 28
FACILITY_ROW_HEIGHT = 18
PADDING = 10
LABEL_WIDTH = 110

SCORE_COLORS = {
    "Life quality": 'mediumpurple',
    "Economy": 'goldenrod',
    "Environment": 'forestgreen',
}

STATUS_COLORS = {
    "OPERATIONAL": 'seagreen',
    "UNDER_CONSTRUCTION": 'darkorange',
}


class PlanRenderer:
    """Draws a plan's scores and facilities as a PNG card"""

    def __init__(self, width: int = WIDTH):
        self.width = width
        try:
            self.font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 12)
        except OSError:
            self.font = ImageFont.load_default()

    def render(self, plan: Plan) -> Image.Image:
        facilities = ([(f, "UNDER_CONSTRUCTION") for f in plan.under_construction] +
                      [(f, "OPERATIONAL") for f in plan.facilities])
        height = (HEADER_HEIGHT + len(SCORE_COLORS) * BAR_ROW_HEIGHT +
                  max(1, len(facilities)) * FACILITY_ROW_HEIGHT + 2 * PADDING)
        img = Image.new('RGB', (self.width, height), color='white')
        draw = ImageDraw.Draw(img)

        # Header
        draw.text((PADDING, PADDING), f"Plan {plan.plan_id} - {plan.settlement.name}",
                  fill='black', font=self.font)
        draw.text((PADDING, PADDING + 18),
                  f"Policy: {plan.selection_policy.describe()}   Status: {plan.status.value}",
                  fill='dimgray', font=self.font)

        # Score bars, the axis sits in the middle so negative scores fit
        scores = dict(zip(SCORE_COLORS, plan.scores))
        largest = max([abs(score) for score in scores.values()] + [1])
        bar_area = self.width - LABEL_WIDTH - 2 * PADDING
        axis_x = LABEL_WIDTH + PADDING + bar_area // 2
        half = bar_area // 2

        y = HEADER_HEIGHT
        for label, score in scores.items():
            draw.text((PADDING, y + 6), f"{label}: {score}", fill='black', font=self.font)
            length = int(half * abs(score) / largest)
            if score >= 0:
                box = [axis_x, y + 4, axis_x + length, y + BAR_ROW_HEIGHT - 6]
            else:
                box = [axis_x - length, y + 4, axis_x, y + BAR_ROW_HEIGHT - 6]
            draw.rectangle(box, fill=SCORE_COLORS[label], outline='black')
            y += BAR_ROW_HEIGHT
        draw.line([axis_x, HEADER_HEIGHT, axis_x, y], fill='black')

        # Facilities
        if not facilities:
            draw.text((PADDING, y + 2), "No facilities yet", fill='gray', font=self.font)
        for facility, status in facilities:
            draw.rectangle([PADDING, y + 4, PADDING + 10, y + 14], fill=STATUS_COLORS[status])
            text = facility.name if status == "OPERATIONAL" else f"{facility.name} ({facility.time_left} left)"
            draw.text((PADDING + 16, y + 2), text, fill='black', font=self.font)
            y += FACILITY_ROW_HEIGHT

        return img

    def to_base64(self, plan: Plan) -> str:
        buffer = io.BytesIO()
        self.render(plan).save(buffer, format='PNG')
        return f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode()}"

    def save(self, plan: Plan, directory: Union[str, Path]) -> Path:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"plan_{plan.plan_id}.png"
        self.render(plan).save(path)
        logger.info(f"Saved plan {plan.plan_id} status card to {path}")
        return path
