"""User commands acting on the simulation, and their textual log"""

import copy
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

from reconstruction.types import FacilityCategory, FacilityType, Settlement, SettlementType
from reconstruction.simulation import Simulation
from reconstruction.config import (
    parse_arguments, parse_int, parse_settlement_type, parse_facility_category
)


class ActionStatus(Enum):
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class CommandError(ValueError):
    """Raised for a command line that does not form a valid action"""


class BaseAction(ABC):
    """A single user command.

    Subclasses implement ``execute`` returning ``(success, message)``; ``act``
    records the outcome and reports failures to the user.
    """

    def __init__(self):
        self.status = ActionStatus.ERROR
        self.error_msg = ""

    def act(self, simulation: Simulation):
        success, message = self.execute(simulation)
        if success:
            self.complete()
        else:
            self.error(message)
            simulation.emit(f"Error: {message}")

    @abstractmethod
    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        """Carry out the command, returns (success, message)"""

    def complete(self):
        self.status = ActionStatus.COMPLETED

    def error(self, error_msg: str):
        self.status = ActionStatus.ERROR
        self.error_msg = error_msg

    def clone(self) -> 'BaseAction':
        return copy.copy(self)

    @abstractmethod
    def describe(self) -> str:
        """Command text without the status"""

    def __str__(self):
        return f"{self.describe()} {self.status.value}"


class SimulateStep(BaseAction):
    def __init__(self, num_of_steps: int):
        super().__init__()
        self.num_of_steps = num_of_steps

    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        for _ in range(self.num_of_steps):
            simulation.step()
        return True, f"Simulated {self.num_of_steps} steps"

    def describe(self) -> str:
        return f"step {self.num_of_steps}"


class AddPlan(BaseAction):
    def __init__(self, settlement_name: str, selection_policy: str):
        super().__init__()
        self.settlement_name = settlement_name
        self.selection_policy = selection_policy

    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        return simulation.add_plan(self.settlement_name, self.selection_policy)

    def describe(self) -> str:
        return f"plan {self.settlement_name} {self.selection_policy}"


class AddSettlement(BaseAction):
    def __init__(self, settlement_name: str, settlement_type: SettlementType):
        super().__init__()
        self.settlement_name = settlement_name
        self.settlement_type = settlement_type

    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        return simulation.add_settlement(Settlement(self.settlement_name, self.settlement_type))

    def describe(self) -> str:
        return f"settlement {self.settlement_name} {self.settlement_type.value}"


class AddFacility(BaseAction):
    def __init__(self, facility_name: str, facility_category: FacilityCategory, price: int,
                 life_quality_score: int, economy_score: int, environment_score: int):
        super().__init__()
        self.facility_name = facility_name
        self.facility_category = facility_category
        self.price = price
        self.life_quality_score = life_quality_score
        self.economy_score = economy_score
        self.environment_score = environment_score

    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        if self.price <= 0:
            return False, "Facility price must be positive"
        return simulation.add_facility(FacilityType(
            name=self.facility_name,
            category=self.facility_category,
            cost=self.price,
            life_quality_score=self.life_quality_score,
            economy_score=self.economy_score,
            environment_score=self.environment_score,
        ))

    def describe(self) -> str:
        return (f"facility {self.facility_name} {self.facility_category.value} {self.price} "
                f"{self.life_quality_score} {self.economy_score} {self.environment_score}")


class PrintPlanStatus(BaseAction):
    def __init__(self, plan_id: int):
        super().__init__()
        self.plan_id = plan_id

    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        plan = simulation.get_plan(self.plan_id)
        if plan is None:
            return False, "Plan doesn't exist"
        simulation.emit(str(plan).rstrip("\n"))
        return True, "Printed plan status"

    def describe(self) -> str:
        return f"planStatus {self.plan_id}"


class ChangePlanPolicy(BaseAction):
    def __init__(self, plan_id: int, new_policy: str):
        super().__init__()
        self.plan_id = plan_id
        self.new_policy = new_policy

    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        return simulation.change_policy(self.plan_id, self.new_policy)

    def describe(self) -> str:
        return f"changePolicy {self.plan_id} {self.new_policy}"


class PrintActionsLog(BaseAction):
    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        for action in simulation.actions_log:
            simulation.emit(str(action))
        return True, "Printed actions log"

    def describe(self) -> str:
        return "log"


class Close(BaseAction):
    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        simulation.close()
        return True, "Simulation closed"

    def describe(self) -> str:
        return "close"


class BackupSimulation(BaseAction):
    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        simulation.backup()
        return True, "Simulation backed up"

    def describe(self) -> str:
        return "backup"


class RestoreSimulation(BaseAction):
    def execute(self, simulation: Simulation) -> Tuple[bool, str]:
        return simulation.restore_backup()

    def describe(self) -> str:
        return "restore"


# command -> number of arguments after the command word
COMMAND_ARITY = {
    "settlement": 2,
    "facility": 6,
    "plan": 2,
    "step": 1,
    "planStatus": 1,
    "changePolicy": 2,
    "log": 0,
    "close": 0,
    "backup": 0,
    "restore": 0,
}


def parse_command(line: str) -> Optional[BaseAction]:
    """Turn a command line into an action, None for a blank line"""
    args = parse_arguments(line)
    if not args:
        return None

    command, params = args[0], args[1:]
    if command not in COMMAND_ARITY:
        raise CommandError(f"Unknown command: {command}")
    if len(params) != COMMAND_ARITY[command]:
        raise CommandError(f"Invalid {command} command")

    try:
        if command == "settlement":
            return AddSettlement(params[0], parse_settlement_type(params[1]))
        if command == "facility":
            return AddFacility(
                params[0],
                parse_facility_category(params[1]),
                parse_int(params[2], "Price"),
                parse_int(params[3], "Life quality score"),
                parse_int(params[4], "Economy score"),
                parse_int(params[5], "Environment score"),
            )
        if command == "plan":
            return AddPlan(params[0], params[1])
        if command == "step":
            return SimulateStep(parse_int(params[0], "Number of steps"))
        if command == "planStatus":
            return PrintPlanStatus(parse_int(params[0], "Plan ID"))
        if command == "changePolicy":
            return ChangePlanPolicy(parse_int(params[0], "Plan ID"), params[1])
    except ValueError as e:
        raise CommandError(str(e)) from e

    return {
        "log": PrintActionsLog,
        "close": Close,
        "backup": BackupSimulation,
        "restore": RestoreSimulation,
    }[command]()


def run_command(simulation: Simulation, line: str) -> Optional[BaseAction]:
    """Parse, act and log one command line"""
    action = parse_command(line)
    if action is None:
        return None
    action.act(simulation)
    simulation.add_action(action)
    return action
