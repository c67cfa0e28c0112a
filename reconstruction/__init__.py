"""Settlement reconstruction simulation"""

from .types import FacilityCategory, FacilityStatus, FacilityType, PlanStatus, Settlement, SettlementType
from .facility import Facility
from .selection import (
    SelectionPolicy, SelectionError, NaiveSelection, BalancedSelection,
    EconomySelection, SustainabilitySelection, create_policy
)
from .plan import Plan, StepResult
from .simulation import Simulation, SimulationSnapshot
