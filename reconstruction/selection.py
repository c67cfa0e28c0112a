"""Selection policies deciding which facility type a plan builds next"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from reconstruction.types import FacilityType, FacilityCategory


class SelectionError(ValueError):
    """Raised when a policy cannot pick any facility type from the catalog"""


class SelectionPolicy(ABC):
    """Base class for all selection policies.

    Policies are stateful: each selection moves a cursor or accumulates scores,
    so every plan needs its own instance (use ``clone``).
    """

    code: str = ""

    @abstractmethod
    def select_facility(self, catalog: Sequence[FacilityType]) -> FacilityType:
        """Pick the next facility type and update internal state"""

    @abstractmethod
    def clone(self) -> 'SelectionPolicy':
        """Return an independent copy carrying the same state"""

    def describe(self) -> str:
        """Short policy code used in commands and reports"""
        return self.code

    def __str__(self):
        return self.describe()


class _RotatingSelection(SelectionPolicy):
    """Walks the catalog round-robin, optionally keeping one category only"""

    category: Optional[FacilityCategory] = None

    def __init__(self, last_selected_index: int = -1):
        self.last_selected_index = last_selected_index

    def select_facility(self, catalog: Sequence[FacilityType]) -> FacilityType:
        if not catalog:
            raise SelectionError(f"No facilities available to select ({self.code})")

        size = len(catalog)
        for offset in range(1, size + 1):
            index = (self.last_selected_index + offset) % size
            if self.category is None or catalog[index].category == self.category:
                self.last_selected_index = index
                return catalog[index]

        raise SelectionError(
            f"No {self.category.name} facility found for {type(self).__name__}"
        )

    def clone(self) -> '_RotatingSelection':
        return type(self)(self.last_selected_index)

    def __repr__(self):
        return f"{type(self).__name__}(last_selected_index={self.last_selected_index})"


class NaiveSelection(_RotatingSelection):
    """Every catalog entry in order, then start over"""
    code = "nve"


class EconomySelection(_RotatingSelection):
    code = "eco"
    category = FacilityCategory.ECONOMY


class SustainabilitySelection(_RotatingSelection):
    code = "sus"
    category = FacilityCategory.ENVIRONMENT


class BalancedSelection(SelectionPolicy):
    """Keeps the three score dimensions as close together as possible.

    Each selection scans the whole catalog and takes the entry whose
    contribution, added to the running totals, gives the smallest spread
    (max - min) between the dimensions. Ties go to the earliest entry.
    """

    code = "bal"

    def __init__(self, life_quality_score: int = 0, economy_score: int = 0, environment_score: int = 0):
        self.life_quality_score = life_quality_score
        self.economy_score = economy_score
        self.environment_score = environment_score

    @property
    def totals(self) -> Tuple[int, int, int]:
        return (self.life_quality_score, self.economy_score, self.environment_score)

    def select_facility(self, catalog: Sequence[FacilityType]) -> FacilityType:
        if not catalog:
            raise SelectionError("No facilities available to select (bal)")

        # Object dtype keeps Python int arithmetic, so large totals never wrap
        candidates = np.array([facility.scores for facility in catalog], dtype=object)
        candidates = candidates + np.array(self.totals, dtype=object)
        spreads = candidates.max(axis=1) - candidates.min(axis=1)
        # argmin returns the first minimum, which keeps catalog order on ties
        best = catalog[int(np.argmin(spreads))]

        self.life_quality_score += best.life_quality_score
        self.economy_score += best.economy_score
        self.environment_score += best.environment_score
        return best

    def clone(self) -> 'BalancedSelection':
        return BalancedSelection(*self.totals)

    def __repr__(self):
        return f"BalancedSelection{self.totals}"


POLICY_ALIASES = {
    "env": "sus",
}

POLICY_CODES = ("nve", "bal", "eco", "sus")


def normalize_policy_code(code: str) -> str:
    return POLICY_ALIASES.get(code, code)


def create_policy(code: str, scores: Tuple[int, int, int] = (0, 0, 0)) -> SelectionPolicy:
    """Build a fresh policy from its code.

    ``scores`` seeds the running totals of a balanced policy and is ignored by
    the others.
    """
    code = normalize_policy_code(code)
    if code == "nve":
        return NaiveSelection()
    if code == "bal":
        return BalancedSelection(*scores)
    if code == "eco":
        return EconomySelection()
    if code == "sus":
        return SustainabilitySelection()
    raise ValueError(f"Unknown selection policy: {code}")
