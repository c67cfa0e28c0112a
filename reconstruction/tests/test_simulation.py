"""Unit tests for the Simulation orchestrator"""

import io
import unittest
from ..types import FacilityCategory, FacilityType, Settlement, SettlementType
from ..selection import BalancedSelection, EconomySelection, NaiveSelection
from ..simulation import Simulation


class TestSimulation(unittest.TestCase):
    def setUp(self):
        self.output = io.StringIO()
        self.simulation = Simulation(self.output)
        self.simulation.add_settlement(Settlement("KfarSPL", SettlementType.VILLAGE))
        self.simulation.add_settlement(Settlement("Haifa", SettlementType.CITY))
        self.simulation.add_facility(FacilityType("hospital", FacilityCategory.LIFE_QUALITY, 3, 5, 3, 1))
        self.simulation.add_facility(FacilityType("factory", FacilityCategory.ECONOMY, 2, 1, 5, 0))
        self.simulation.add_facility(FacilityType("park", FacilityCategory.ENVIRONMENT, 1, 2, 0, 4))

    def test_duplicate_settlement(self):
        success, message = self.simulation.add_settlement(Settlement("KfarSPL", SettlementType.CITY))
        self.assertFalse(success)
        self.assertEqual(message, "Settlement already exists")
        self.assertEqual(self.simulation.get_settlement("KfarSPL").type, SettlementType.VILLAGE)

    def test_duplicate_facility(self):
        success, _ = self.simulation.add_facility(
            FacilityType("park", FacilityCategory.ECONOMY, 9, 0, 0, 0))
        self.assertFalse(success)
        self.assertEqual(len(self.simulation.facility_options), 3)

    def test_plan_ids_are_sequential(self):
        self.simulation.add_plan("KfarSPL", "nve")
        self.simulation.add_plan("Haifa", "bal")
        self.simulation.add_plan("KfarSPL", "eco")
        self.assertEqual([p.plan_id for p in self.simulation.plans], [0, 1, 2])
        self.assertIsInstance(self.simulation.get_plan(1).selection_policy, BalancedSelection)

    def test_add_plan_failures(self):
        self.assertFalse(self.simulation.add_plan("Nowhere", "nve")[0])
        self.assertFalse(self.simulation.add_plan("KfarSPL", "xyz")[0])
        self.assertEqual(self.simulation.plans, [])
        self.assertEqual(self.simulation.plan_counter, 0)

    def test_lookups(self):
        self.simulation.add_plan("KfarSPL", "nve")
        self.assertTrue(self.simulation.has_plan(0))
        self.assertFalse(self.simulation.has_plan(1))
        self.assertIsNone(self.simulation.get_plan(5))
        self.assertTrue(self.simulation.has_facility("park"))
        self.assertFalse(self.simulation.has_facility("zoo"))

    def test_plans_see_catalog_growth(self):
        self.simulation.add_plan("KfarSPL", "nve")
        plan = self.simulation.get_plan(0)
        self.simulation.add_facility(FacilityType("school", FacilityCategory.LIFE_QUALITY, 1, 1, 1, 1))
        self.assertIs(plan.facility_options, self.simulation.facility_options)
        self.assertEqual(len(plan.facility_options), 4)

    def test_step_advances_every_plan(self):
        self.simulation.add_plan("KfarSPL", "nve")
        self.simulation.add_plan("Haifa", "nve")
        results = self.simulation.step()
        self.assertEqual(set(results), {0, 1})
        self.assertEqual(len(self.simulation.get_plan(0).under_construction), 1)
        self.assertEqual(len(self.simulation.get_plan(1).under_construction), 2)

    def test_step_reports_selection_failure(self):
        simulation = Simulation(self.output)
        simulation.add_settlement(Settlement("KfarSPL", SettlementType.VILLAGE))
        simulation.add_facility(FacilityType("park", FacilityCategory.ENVIRONMENT, 1, 2, 0, 4))
        simulation.add_plan("KfarSPL", "eco")
        simulation.add_plan("KfarSPL", "nve")
        results = simulation.step()
        self.assertFalse(results[0].ok)
        # The failing plan does not stop the others
        self.assertTrue(results[1].ok)
        self.assertEqual(simulation.get_plan(1).scores, (2, 0, 4))

    def test_selection_failure_warns_once(self):
        simulation = Simulation(self.output)
        simulation.add_settlement(Settlement("KfarSPL", SettlementType.VILLAGE))
        simulation.add_facility(FacilityType("park", FacilityCategory.ENVIRONMENT, 1, 2, 0, 4))
        simulation.add_plan("KfarSPL", "eco")
        with self.assertLogs("reconstruction", level="WARNING") as logs:
            simulation.step()
        self.assertEqual(len(logs.records), 1)
        self.assertIn("Plan 0", logs.output[0])

    def test_change_policy(self):
        self.simulation.add_plan("KfarSPL", "nve")
        success, _ = self.simulation.change_policy(0, "eco")
        self.assertTrue(success)
        self.assertIsInstance(self.simulation.get_plan(0).selection_policy, EconomySelection)
        self.assertIn("planID: 0\npreviousPolicy: nve\nnewPolicy: eco", self.output.getvalue())

    def test_change_policy_failures(self):
        self.simulation.add_plan("KfarSPL", "nve")
        self.assertFalse(self.simulation.change_policy(0, "nve")[0])
        self.assertFalse(self.simulation.change_policy(0, "xyz")[0])
        self.assertFalse(self.simulation.change_policy(7, "eco")[0])
        self.assertIsInstance(self.simulation.get_plan(0).selection_policy, NaiveSelection)

    def test_change_to_balanced_seeds_from_projected_scores(self):
        self.simulation.add_plan("Haifa", "nve")
        self.simulation.step()
        self.simulation.step()
        plan = self.simulation.get_plan(0)
        # factory done (1,5,0), hospital still building (5,3,1)
        self.assertEqual(plan.scores, (1, 5, 0))
        self.simulation.change_policy(0, "bal")
        self.assertEqual(plan.selection_policy.totals, (6, 8, 1))

    def test_open_and_close(self):
        self.simulation.add_plan("KfarSPL", "nve")
        self.simulation.open()
        self.assertTrue(self.simulation.is_running)
        self.simulation.step()
        self.simulation.close()
        self.assertFalse(self.simulation.is_running)
        output = self.output.getvalue()
        self.assertTrue(output.startswith("The simulation has started\n"))
        self.assertIn("PlanID: 0\nSettlementName: KfarSPL\nLifeQuality_Score: 0\n", output)
        self.assertTrue(output.endswith("Simulation closed successfully.\n"))


class TestSnapshot(unittest.TestCase):
    def setUp(self):
        self.simulation = Simulation(io.StringIO())
        self.simulation.add_settlement(Settlement("Haifa", SettlementType.CITY))
        self.simulation.add_facility(FacilityType("hospital", FacilityCategory.LIFE_QUALITY, 3, 5, 3, 1))
        self.simulation.add_facility(FacilityType("factory", FacilityCategory.ECONOMY, 2, 1, 5, 0))
        self.simulation.add_plan("Haifa", "bal")
        self.simulation.step()

    def test_restore_brings_back_state(self):
        snapshot = self.simulation.snapshot()
        before = str(self.simulation.get_plan(0))

        for _ in range(5):
            self.simulation.step()
        self.simulation.add_facility(FacilityType("park", FacilityCategory.ENVIRONMENT, 1, 2, 0, 4))
        self.simulation.add_plan("Haifa", "nve")

        self.simulation.restore(snapshot)
        self.assertEqual(str(self.simulation.get_plan(0)), before)
        self.assertEqual(len(self.simulation.plans), 1)
        self.assertEqual(self.simulation.plan_counter, 1)
        self.assertFalse(self.simulation.has_facility("park"))

    def test_restored_plans_use_restored_catalog(self):
        snapshot = self.simulation.snapshot()
        self.simulation.restore(snapshot)
        plan = self.simulation.get_plan(0)
        self.assertIs(plan.facility_options, self.simulation.facility_options)
        self.simulation.add_facility(FacilityType("park", FacilityCategory.ENVIRONMENT, 1, 2, 0, 4))
        self.assertEqual(len(plan.facility_options), 3)
        self.assertEqual(len(snapshot.facility_options), 2)

    def test_snapshot_is_not_affected_by_later_steps(self):
        snapshot = self.simulation.snapshot()
        self.simulation.step()
        self.simulation.step()
        self.assertEqual(snapshot.plans[0].scores, (0, 0, 0))
        self.assertEqual(snapshot.plans[0].selection_policy.totals,
                         (6, 8, 1))

    def test_restore_twice_from_same_snapshot(self):
        snapshot = self.simulation.snapshot()
        self.simulation.restore(snapshot)
        for _ in range(4):
            self.simulation.step()
        self.simulation.restore(snapshot)
        self.assertEqual(self.simulation.get_plan(0).scores, (0, 0, 0))

    def test_restored_simulation_matches_original_run(self):
        snapshot = self.simulation.snapshot()
        for _ in range(6):
            self.simulation.step()
        expected = str(self.simulation.get_plan(0))

        self.simulation.restore(snapshot)
        for _ in range(6):
            self.simulation.step()
        self.assertEqual(str(self.simulation.get_plan(0)), expected)

    def test_backup_and_restore_backup(self):
        self.assertFalse(self.simulation.has_backup())
        self.assertEqual(self.simulation.restore_backup(), (False, "No backup available"))
        self.simulation.backup()
        self.simulation.step()
        success, _ = self.simulation.restore_backup()
        self.assertTrue(success)
        self.assertEqual(self.simulation.get_plan(0).under_construction[0].time_left, 2)


if __name__ == '__main__':
    unittest.main()
