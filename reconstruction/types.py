"""Type definitions for the Reconstruction simulation"""

from enum import Enum
from dataclasses import dataclass


class FacilityCategory(Enum):
    """Facility categories, values match the config/command integer codes"""
    LIFE_QUALITY = 0
    ECONOMY = 1
    ENVIRONMENT = 2


class SettlementType(Enum):
    """Settlement types, values match the config/command integer codes"""
    VILLAGE = 0
    CITY = 1
    METROPOLIS = 2


class FacilityStatus(Enum):
    UNDER_CONSTRUCTION = "UNDER_CONSTRUCTION"
    OPERATIONAL = "OPERATIONAL"


class PlanStatus(Enum):
    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"


# Facilities a settlement can have under construction at once
CONSTRUCTION_CAPACITY = {
    SettlementType.VILLAGE: 1,
    SettlementType.CITY: 2,
    SettlementType.METROPOLIS: 3,
}


@dataclass(frozen=True)
class FacilityType:
    """Catalog entry describing a buildable facility"""
    name: str
    category: FacilityCategory
    cost: int
    life_quality_score: int
    economy_score: int
    environment_score: int

    def __post_init__(self):
        if self.cost <= 0:
            raise ValueError(f"Facility cost must be positive, got {self.cost}")

    @property
    def scores(self):
        """(life quality, economy, environment) contribution"""
        return (self.life_quality_score, self.economy_score, self.environment_score)


@dataclass(frozen=True)
class Settlement:
    """A named settlement, its type fixes the construction capacity"""
    name: str
    type: SettlementType

    @property
    def capacity(self) -> int:
        return CONSTRUCTION_CAPACITY[self.type]

    def __str__(self):
        return f"Name: {self.name}, Type: {self.type.name.capitalize()}"
