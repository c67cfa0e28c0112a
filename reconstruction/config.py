"""Configuration file loading for the Reconstruction simulation

A config file is a list of whitespace separated records::

    # name      type
    settlement  KfarSPL 0
    # name      category price life_quality economy environment
    facility    hospital 0 5 5 3 1
    # settlement policy
    plan        KfarSPL eco
"""

import logging
from pathlib import Path
from typing import List, Union

from reconstruction.types import FacilityCategory, FacilityType, Settlement, SettlementType
from reconstruction.simulation import Simulation

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for a malformed or inconsistent configuration file"""


def parse_arguments(line: str) -> List[str]:
    return line.split()


INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def parse_int(value: str, field_name: str) -> int:
    """Parse a 32-bit signed integer field"""
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"{field_name} must be an integer, got '{value}'")
    if not INT_MIN <= number <= INT_MAX:
        raise ValueError(f"{field_name} is out of range: {value}")
    return number


def parse_settlement_type(value: str) -> SettlementType:
    code = parse_int(value, "Settlement type")
    try:
        return SettlementType(code)
    except ValueError:
        raise ValueError(f"Unknown settlement type: {code}")


def parse_facility_category(value: str) -> FacilityCategory:
    code = parse_int(value, "Facility category")
    try:
        return FacilityCategory(code)
    except ValueError:
        raise ValueError(f"Unknown facility category: {code}")


def parse_facility_type(args: List[str]) -> FacilityType:
    """Build a facility type from ``name category price lq eco env``"""
    name, category, price, life_quality, economy, environment = args
    return FacilityType(
        name=name,
        category=parse_facility_category(category),
        cost=parse_int(price, "Price"),
        life_quality_score=parse_int(life_quality, "Life quality score"),
        economy_score=parse_int(economy, "Economy score"),
        environment_score=parse_int(environment, "Environment score"),
    )


def apply_config_line(simulation: Simulation, args: List[str]):
    """Apply one parsed config record to the simulation"""
    kind = args[0]

    if kind == "settlement":
        if len(args) != 3:
            raise ValueError("Invalid settlement configuration")
        settlement = Settlement(args[1], parse_settlement_type(args[2]))
        added, message = simulation.add_settlement(settlement)
        if not added:
            logger.warning(f"Skipping settlement {settlement.name}: {message}")

    elif kind == "facility":
        if len(args) != 7:
            raise ValueError("Invalid facility configuration")
        facility_type = parse_facility_type(args[1:])
        added, message = simulation.add_facility(facility_type)
        if not added:
            logger.warning(f"Skipping facility {facility_type.name}: {message}")

    elif kind == "plan":
        if len(args) != 3:
            raise ValueError("Invalid plan configuration")
        if not simulation.has_settlement(args[1]):
            raise ValueError(f"Settlement not found for plan: {args[1]}")
        added, message = simulation.add_plan(args[1], args[2])
        if not added:
            raise ValueError(f"Unknown selection policy: {args[2]}")

    else:
        logger.warning(f"Skipping unknown configuration record: {kind}")


def load_config(path: Union[str, Path], simulation: Simulation) -> Simulation:
    """Populate ``simulation`` from the config file at ``path``"""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Unable to open configuration file: {path}")

    with open(path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            args = parse_arguments(line)
            if not args or args[0].startswith("#"):
                continue
            try:
                apply_config_line(simulation, args)
            except ValueError as e:
                raise ConfigError(f"{path}:{line_number}: {e}") from e

    logger.info(
        f"Loaded {len(simulation.settlements)} settlements, "
        f"{len(simulation.facility_options)} facility types and {len(simulation.plans)} plans from {path}"
    )
    return simulation
