"""
Tests for the investment threshold search, sweeps, scenario loading and CLI.
"""

import contextlib
import importlib.util
import io
import json
import os
import tempfile
import unittest
from unittest.mock import patch

import numpy as np

from adoption_threshold import (
    DomainError,
    ExpectedDecision,
    JointDecision,
    JointDecisionSolver,
    ModelInfeasibleError,
    Scenario,
    ThresholdNotFoundError,
    ThresholdSearch,
    UncertaintyMode,
    find_threshold,
    load_scenario,
    parametrization,
    run_sweep,
    scenario_from_dict,
)
from adoption_threshold.__main__ import main


class TestNoUncertainty(unittest.TestCase):

    def test_baseline_threshold(self):
        result = ThresholdSearch(Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2400)).run()
        self.assertEqual(result.interval, (2374, 2375))
        self.assertAlmostEqual(result.old_tech_decision.violation, 18.9926, delta=1e-4)
        self.assertAlmostEqual(result.new_tech_decision.violation, 18.9924, delta=1e-4)
        self.assertEqual(result.iterations, 27)

    def test_full_compliance_threshold(self):
        # Do = 3600^2 and Dn = (1225 + i)^2
        result = find_threshold(Scenario(parametrization(3), UncertaintyMode.NONE, i_max=2400))
        self.assertEqual(result.interval, (2374, 2375))
        self.assertEqual(result.old_tech_decision.violation, 0.0)
        self.assertEqual(result.new_tech_decision.violation, 0.0)

    def test_fixed_investment(self):
        search = ThresholdSearch(Scenario(parametrization(1), UncertaintyMode.NONE))
        comparison = search.evaluate(1000.0)
        self.assertAlmostEqual(comparison.new.violation, 18.4502, delta=1e-4)
        self.assertTrue(comparison.prefers_new)
        self.assertFalse(search.evaluate(2375.0).prefers_new)

    def test_idempotent(self):
        scenario = Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2400)
        self.assertEqual(find_threshold(scenario), find_threshold(scenario))

    def test_threshold_not_found(self):
        # A new technology with a looser cap is never worth buying
        scenario = Scenario(parametrization(1), UncertaintyMode.NONE, i_max=50, new_cap=150)
        with self.assertRaises(ThresholdNotFoundError) as ctx:
            ThresholdSearch(scenario).run()
        self.assertEqual(ctx.exception.i_max, 50)
        self.assertEqual(ctx.exception.i_min, 0)

    def test_warns_when_predicate_holds_at_i_max(self):
        scenario = Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2000)
        with self.assertLogs("adoption_threshold.threshold", level="WARNING"):
            result = ThresholdSearch(scenario).run()
        self.assertEqual(result.interval, (2000, 2001))

    def test_summary(self):
        result = find_threshold(Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2400))
        lines = result.summary()
        self.assertIn("[2374,2375)", lines[0])
        self.assertTrue(any("Violation level with the old technology = 18.9926" in l for l in lines))


class TestPartialUncertainty(unittest.TestCase):

    def test_baseline_threshold(self):
        result = ThresholdSearch(Scenario(parametrization(1), UncertaintyMode.PARTIAL, i_max=2200)).run()
        self.assertEqual(result.interval, (2104, 2105))
        new = result.new_tech_decision
        self.assertIsInstance(new, ExpectedDecision)
        self.assertAlmostEqual(new.high_cost.violation, 19.1553, delta=1e-3)
        self.assertAlmostEqual(new.low_cost.violation, 18.6540, delta=1e-3)
        self.assertAlmostEqual(new.optimal_emissions, 35.0)

    def test_certain_high_cost(self):
        scenario = Scenario(parametrization(1, efficiency_likelihood=0.0),
                            UncertaintyMode.PARTIAL, i_max=3200)
        result = find_threshold(scenario)
        self.assertEqual(result.interval, (3093, 3094))
        self.assertAlmostEqual(result.new_tech_decision.high_cost.violation, 19.3018, delta=1e-3)
        self.assertAlmostEqual(result.new_tech_decision.low_cost.violation, 18.9925, delta=1e-3)


class TestFullUncertainty(unittest.TestCase):

    def setUp(self):
        self.scenario = Scenario(parametrization(1), UncertaintyMode.FULL, i_max=2100)
        self.search = ThresholdSearch(self.scenario)

    def test_threshold_brackets_indifference(self):
        result = self.search.run()
        lower, upper = result.interval
        self.assertEqual(result.interval, (1905, 1906))
        self.assertEqual(upper, lower + 1)
        self.assertIsInstance(result.new_tech_decision, JointDecision)
        self.assertTrue(self.search.evaluate(float(lower)).prefers_new)
        self.assertFalse(self.search.evaluate(float(upper)).prefers_new)

    def test_joint_declaration_below_old(self):
        comparison = self.search.evaluate(1900.0)
        self.assertLessEqual(comparison.new.declared_emissions, comparison.old.declared_emissions)

    def test_solver_failure_propagates(self):
        with patch.object(JointDecisionSolver, "solve", side_effect=ModelInfeasibleError("no root")):
            with self.assertRaises(ModelInfeasibleError):
                self.search.run()


class TestScenarios(unittest.TestCase):

    def test_parametrizations(self):
        p2 = parametrization(2)
        self.assertEqual(p2.monitoring_probability, 0.1)
        self.assertEqual(p2.fine_multiplier, 5.0)
        self.assertEqual(p2.tax_rate, 20.0)
        self.assertEqual(p2.risk_aversion, 1.0)
        self.assertEqual(parametrization(3).fixed_fine_component, 40.0)
        self.assertEqual(parametrization(1, risk_aversion=4).risk_aversion, 4)

    def test_invalid_parametrization(self):
        with self.assertRaises(DomainError):
            parametrization(4)
        with self.assertRaises(DomainError):
            parametrization(1, bogus=1.0)

    def test_mode_from_string(self):
        self.assertIs(Scenario(parametrization(1), "partial").mode, UncertaintyMode.PARTIAL)
        with self.assertRaises(DomainError):
            Scenario(parametrization(1), "sometimes")

    def test_invalid_scenario(self):
        with self.assertRaises(DomainError):
            Scenario(parametrization(1), i_max=-1)
        with self.assertRaises(DomainError):
            Scenario(parametrization(1), low_cap=80)

    def test_with_parameters(self):
        scenario = Scenario(parametrization(1)).with_parameters(risk_aversion=2)
        self.assertEqual(scenario.parameters.risk_aversion, 2)
        with self.assertRaises(DomainError):
            scenario.with_parameters(bogus=1)

    def test_from_dict_with_preset(self):
        scenario = scenario_from_dict({
            "parameters": 3, "mode": "full", "i_max": 2000, "overrides": {"risk_aversion": 2},
        })
        self.assertEqual(scenario.mode, UncertaintyMode.FULL)
        self.assertEqual(scenario.parameters.fixed_fine_component, 40.0)
        self.assertEqual(scenario.parameters.risk_aversion, 2)

    def test_from_dict_errors(self):
        with self.assertRaises(DomainError):
            scenario_from_dict({"parameters": 1, "colour": "green"})
        with self.assertRaises(DomainError):
            scenario_from_dict({"mode": "none"})
        with self.assertRaises(DomainError):
            scenario_from_dict({"parameters": {"tax_rate": 20}})

    def test_load_scenario(self):
        data = {
            "name": "baseline",
            "mode": "partial",
            "i_max": 2200,
            "parameters": {"monitoring_probability": 0.5, "tax_rate": 20, "risk_aversion": 1},
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "scenario.json")
            with open(path, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            scenario = load_scenario(path)
        self.assertEqual(scenario.name, "baseline")
        self.assertEqual(scenario.i_max, 2200)
        self.assertEqual(scenario.parameters.efficiency_likelihood, 0.5)


class TestSweep(unittest.TestCase):

    def test_risk_aversion_sweep(self):
        base = Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2400)
        df = run_sweep(base, "risk_aversion", [1, 2])
        self.assertEqual(df.index.name, "risk_aversion")
        self.assertEqual(df["threshold_lower"].tolist(), [2374, 2374])
        self.assertAlmostEqual(df.loc[2, "old_violation"], 18.2247, delta=1e-4)
        self.assertAlmostEqual(df.loc[2, "new_violation"], 18.2243, delta=1e-4)

    def test_likelihood_sweep(self):
        base = Scenario(parametrization(1), UncertaintyMode.PARTIAL, i_max=3200)
        df = run_sweep(base, "efficiency_likelihood", [0.0, 0.25])
        self.assertEqual(df["threshold_lower"].tolist(), [3093, 2570])
        self.assertIn("high_cost_violation", df.columns)

    def test_failed_rows_are_kept(self):
        base = Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2400)
        with self.assertLogs("adoption_threshold.sweep", level="WARNING"):
            df = run_sweep(base, "new_cap", [50.0, 150.0])
        self.assertEqual(df.loc[50.0, "threshold_lower"], 2374)
        self.assertTrue(np.isnan(df.loc[150.0, "threshold_lower"]))
        self.assertIn("ThresholdNotFoundError", df.loc[150.0, "error"])

    def test_unknown_parameter(self):
        with self.assertRaises(DomainError):
            run_sweep(Scenario(parametrization(1)), "colour", [1])

    def test_parallel_matches_sequential(self):
        base = Scenario(parametrization(3), UncertaintyMode.NONE, i_max=2400)
        sequential = run_sweep(base, "risk_aversion", [1, 2])
        parallel = run_sweep(base, "risk_aversion", [1, 2], n_jobs=2)
        self.assertEqual(sequential["threshold_lower"].tolist(), parallel["threshold_lower"].tolist())


class TestCommandLine(unittest.TestCase):

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_preset(self):
        code, out, _ = self._run(["--parametrization", "1", "--mode", "none", "--i-max", "2400"])
        self.assertEqual(code, 0)
        self.assertIn("[2374,2375)", out)

    def test_invalid_override(self):
        code, _, err = self._run(["--set", "bogus=1"])
        self.assertEqual(code, 2)
        self.assertIn("Invalid scenario", err)

    def test_threshold_not_found(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "scenario.json")
            with open(path, "w", encoding="utf-8") as fh:
                json.dump({"parameters": 1, "i_max": 10, "new_cap": 150}, fh)
            code, _, err = self._run([path])
        self.assertEqual(code, 1)
        self.assertIn("ThresholdNotFoundError", err)


class TestFigureScript(unittest.TestCase):

    def test_import_runs_no_sweeps(self):
        # Process-pool workers re-import the script; only main() may start sweeps
        path = os.path.join(os.path.dirname(__file__), os.pardir, "generate_paper_figures.py")
        spec = importlib.util.spec_from_file_location("generate_paper_figures", path)
        module = importlib.util.module_from_spec(spec)
        with patch("adoption_threshold.run_sweep") as sweep:
            spec.loader.exec_module(module)
        sweep.assert_not_called()
        self.assertTrue(callable(module.main))


if __name__ == "__main__":
    unittest.main()
