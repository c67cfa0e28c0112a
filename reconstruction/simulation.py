"""Simulation orchestrator owning settlements, the facility catalog and plans"""

import sys
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO, Tuple

from reconstruction.types import FacilityType, Settlement
from reconstruction.plan import Plan, StepResult
from reconstruction.selection import create_policy, normalize_policy_code, POLICY_CODES

logger = logging.getLogger(__name__)


@dataclass
class SimulationSnapshot:
    """Deep copy of everything a restore needs to bring back"""
    facility_options: List[FacilityType] = field(default_factory=list)
    settlements: Dict[str, Settlement] = field(default_factory=dict)
    plans: List[Plan] = field(default_factory=list)
    plan_counter: int = 0
    actions_log: List[Any] = field(default_factory=list)

    def copy(self) -> 'SimulationSnapshot':
        # Plans must point at the copied catalog, not the one they came from
        facility_options = list(self.facility_options)
        return SimulationSnapshot(
            facility_options=facility_options,
            settlements=dict(self.settlements),
            plans=[plan.clone(facility_options) for plan in self.plans],
            plan_counter=self.plan_counter,
            actions_log=[action.clone() for action in self.actions_log],
        )


class Simulation:
    """Owns all plans and steps them together, one tick at a time"""

    def __init__(self, output: Optional[TextIO] = None):
        self.output = output if output is not None else sys.stdout
        self.is_running = False
        self.plan_counter = 0
        self.actions_log: List[Any] = []
        self.plans: List[Plan] = []
        self.settlements: Dict[str, Settlement] = {}
        self.facility_options: List[FacilityType] = []
        self._backup: Optional[SimulationSnapshot] = None

    def emit(self, text: str):
        """Write console output for the user"""
        print(text, file=self.output)

    # Settlements and facility types

    def has_settlement(self, name: str) -> bool:
        return name in self.settlements

    def get_settlement(self, name: str) -> Optional[Settlement]:
        return self.settlements.get(name)

    def add_settlement(self, settlement: Settlement) -> Tuple[bool, str]:
        if self.has_settlement(settlement.name):
            return False, "Settlement already exists"
        self.settlements[settlement.name] = settlement
        logger.info(f"Added settlement {settlement.name} ({settlement.type.name})")
        return True, "Settlement added"

    def has_facility(self, name: str) -> bool:
        return any(facility.name == name for facility in self.facility_options)

    def add_facility(self, facility_type: FacilityType) -> Tuple[bool, str]:
        if self.has_facility(facility_type.name):
            return False, "Facility already exists"
        # Plans hold this very list, so extend it in place
        self.facility_options.append(facility_type)
        logger.info(f"Added facility type {facility_type.name} ({facility_type.category.name})")
        return True, "Facility added"

    # Plans

    def has_plan(self, plan_id: int) -> bool:
        return self.get_plan(plan_id) is not None

    def get_plan(self, plan_id: int) -> Optional[Plan]:
        for plan in self.plans:
            if plan.plan_id == plan_id:
                return plan
        return None

    def add_plan(self, settlement_name: str, policy_code: str) -> Tuple[bool, str]:
        settlement = self.get_settlement(settlement_name)
        if settlement is None:
            return False, "Cannot create this plan"
        try:
            policy = create_policy(policy_code)
        except ValueError:
            return False, "Cannot create this plan"

        plan = Plan(self.plan_counter, settlement, policy, self.facility_options)
        self.plan_counter += 1
        self.plans.append(plan)
        logger.info(f"Added plan {plan.plan_id} for {settlement_name} with policy {policy.describe()}")
        return True, f"Plan {plan.plan_id} created"

    def change_policy(self, plan_id: int, policy_code: str) -> Tuple[bool, str]:
        """Swap a plan's selection policy.

        A switch to the balanced policy starts from the plan's totals plus the
        facilities it is still building.
        """
        plan = self.get_plan(plan_id)
        policy_code = normalize_policy_code(policy_code)
        if plan is None or policy_code not in POLICY_CODES:
            return False, "Cannot change selection policy"
        previous = plan.selection_policy.describe()
        if previous == policy_code:
            return False, "Cannot change selection policy"

        policy = create_policy(policy_code, plan.projected_scores())
        self.emit(f"planID: {plan_id}\npreviousPolicy: {previous}\nnewPolicy: {policy.describe()}")
        plan.set_selection_policy(policy)
        logger.info(f"Plan {plan_id} policy changed from {previous} to {policy.describe()}")
        return True, "Policy changed"

    # Ticks

    def step(self) -> Dict[int, StepResult]:
        """Advance every plan by one tick"""
        results = {}
        for plan in self.plans:
            result = plan.step()
            if not result.ok:
                logger.debug(f"Plan {plan.plan_id} could not fill its slots: {result.selection_error}")
            results[plan.plan_id] = result
        logger.info(f"Stepped {len(self.plans)} plans")
        return results

    # Action log

    def add_action(self, action):
        self.actions_log.append(action)

    # Backup and restore

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            facility_options=self.facility_options,
            settlements=self.settlements,
            plans=self.plans,
            plan_counter=self.plan_counter,
            actions_log=self.actions_log,
        ).copy()

    def restore(self, snapshot: SimulationSnapshot):
        """Replace the current state with a copy of ``snapshot``"""
        state = snapshot.copy()
        self.facility_options = state.facility_options
        self.settlements = state.settlements
        self.plans = state.plans
        self.plan_counter = state.plan_counter
        self.actions_log = state.actions_log

    def backup(self):
        self._backup = self.snapshot()
        logger.info("Simulation backed up")

    def has_backup(self) -> bool:
        return self._backup is not None

    def restore_backup(self) -> Tuple[bool, str]:
        if self._backup is None:
            return False, "No backup available"
        self.restore(self._backup)
        logger.info("Simulation restored from backup")
        return True, "Simulation restored"

    # Lifecycle

    def open(self):
        self.is_running = True
        self.emit("The simulation has started")

    def close(self):
        """Print the final scores of every plan and stop running"""
        for plan in self.plans:
            self.emit(
                f"PlanID: {plan.plan_id}\n"
                f"SettlementName: {plan.settlement.name}\n"
                f"LifeQuality_Score: {plan.life_quality_score}\n"
                f"Economy_Score: {plan.economy_score}\n"
                f"Environment_Score: {plan.environment_score}\n"
                "----------------------------------------"
            )
        self.is_running = False
        self.emit("Simulation closed successfully.")
