"""Construction plan for a single settlement"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from reconstruction.types import FacilityType, PlanStatus, Settlement
from reconstruction.facility import Facility
from reconstruction.selection import SelectionPolicy, SelectionError

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """What one plan tick did"""
    plan_id: int
    started: List[Facility] = field(default_factory=list)
    completed: List[Facility] = field(default_factory=list)
    selection_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.selection_error is None


class Plan:
    """Builds facilities for one settlement, a few at a time.

    The settlement and the facility catalog are shared with the simulation and
    never modified here. Facilities and the selection policy belong to the plan.
    """

    def __init__(self, plan_id: int, settlement: Settlement, selection_policy: SelectionPolicy,
                 facility_options: Sequence[FacilityType]):
        self.plan_id = plan_id
        self.settlement = settlement
        self.selection_policy = selection_policy
        self.facility_options = facility_options
        self.facilities: List[Facility] = []
        self.under_construction: List[Facility] = []
        self.life_quality_score = 0
        self.economy_score = 0
        self.environment_score = 0

    @property
    def capacity(self) -> int:
        return self.settlement.capacity

    @property
    def status(self) -> PlanStatus:
        if len(self.under_construction) == self.capacity:
            return PlanStatus.BUSY
        return PlanStatus.AVAILABLE

    @property
    def scores(self) -> Tuple[int, int, int]:
        return (self.life_quality_score, self.economy_score, self.environment_score)

    def projected_scores(self) -> Tuple[int, int, int]:
        """Current totals plus everything still under construction"""
        life_quality, economy, environment = self.scores
        for facility in self.under_construction:
            life_quality += facility.life_quality_score
            economy += facility.economy_score
            environment += facility.environment_score
        return (life_quality, economy, environment)

    def set_selection_policy(self, selection_policy: SelectionPolicy):
        self.selection_policy = selection_policy

    def add_facility(self, facility: Facility):
        """File a facility under operational or under-construction by its status"""
        if facility.is_operational():
            self.facilities.append(facility)
        else:
            self.under_construction.append(facility)

    def step(self) -> StepResult:
        """Run one tick: fill free construction slots, then advance construction.

        Slots are filled before progress is made, so a slot freed this tick is
        only refilled on the next one.
        """
        result = StepResult(plan_id=self.plan_id)

        while len(self.under_construction) < self.capacity and len(self.facility_options) > 0:
            try:
                facility_type = self.selection_policy.select_facility(self.facility_options)
            except SelectionError as e:
                logger.warning(f"Plan {self.plan_id}: selection failed: {e}")
                result.selection_error = str(e)
                break
            facility = Facility(facility_type, self.settlement.name)
            self.add_facility(facility)
            result.started.append(facility)
            logger.debug(f"Plan {self.plan_id}: started {facility.name} ({facility.time_left} ticks)")

        still_building: List[Facility] = []
        for facility in self.under_construction:
            facility.advance()
            if facility.is_operational():
                self._complete(facility)
                result.completed.append(facility)
            else:
                still_building.append(facility)
        self.under_construction = still_building

        return result

    def _complete(self, facility: Facility):
        self.facilities.append(facility)
        self.life_quality_score += facility.life_quality_score
        self.economy_score += facility.economy_score
        self.environment_score += facility.environment_score
        logger.debug(f"Plan {self.plan_id}: {facility.name} is operational, scores now {self.scores}")

    def clone(self, facility_options: Optional[Sequence[FacilityType]] = None) -> 'Plan':
        """Deep copy of facilities and policy.

        The copy shares the settlement, and shares the catalog unless another
        one is given.
        """
        copy = Plan(
            self.plan_id,
            self.settlement,
            self.selection_policy.clone(),
            self.facility_options if facility_options is None else facility_options,
        )
        copy.facilities = [facility.clone() for facility in self.facilities]
        copy.under_construction = [facility.clone() for facility in self.under_construction]
        copy.life_quality_score = self.life_quality_score
        copy.economy_score = self.economy_score
        copy.environment_score = self.environment_score
        return copy

    def __str__(self):
        lines = [
            f"PlanID: {self.plan_id}",
            f"SettlementName: {self.settlement.name}",
            f"PlanStatus: {self.status.value}",
            f"SelectionPolicy: {self.selection_policy.describe()}",
            f"LifeQualityScore: {self.life_quality_score}",
            f"EconomyScore: {self.economy_score}",
            f"EnvironmentScore: {self.environment_score}",
        ]
        for facility in self.under_construction:
            lines.append(f"FacilityName: {facility.name}")
            lines.append("FacilityStatus: UNDER_CONSTRUCTION")
        for facility in self.facilities:
            lines.append(f"FacilityName: {facility.name}")
            lines.append("FacilityStatus: OPERATIONAL")
        return "\n".join(lines) + "\n"
