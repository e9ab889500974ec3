"""
Tests for the known-technology declaration decision.
"""

import unittest
from unittest.mock import patch

from adoption_threshold import (
    AmbiguousRootError,
    ComplianceSolver,
    DomainError,
    ModelInfeasibleError,
    ModelParameters,
    expected_disutility,
    parametrization,
)
from adoption_threshold.costs import new_technology, old_technology


class TestComplianceSolver(unittest.TestCase):
    """Tests for ComplianceSolver."""

    def setUp(self):
        self.params = parametrization(1)
        self.solver = ComplianceSolver(self.params)
        self.old = old_technology()
        self.new = new_technology()

    def test_baseline_old_technology(self):
        decision = self.solver.solve(self.old)
        self.assertAlmostEqual(decision.optimal_emissions, 60.0)
        self.assertAlmostEqual(decision.violation, 18.992644823671112, delta=1e-6)

    def test_higher_risk_aversion(self):
        solver = ComplianceSolver(parametrization(1, risk_aversion=2))
        decision = solver.solve(self.old)
        self.assertAlmostEqual(decision.violation, 18.224714777552266, delta=1e-6)

    def test_new_technology_with_investment(self):
        decision = self.solver.solve(self.new, 1000.0)
        self.assertAlmostEqual(decision.optimal_emissions, 35.0)
        self.assertAlmostEqual(decision.violation, 18.450157086167419, delta=1e-6)
        self.assertEqual(decision.investment_cost, 1000.0)

    def test_risk_neutral_closed_form(self):
        # rho = 0: pi * 2v = tau, so v = tau / (2 pi)
        solver = ComplianceSolver(parametrization(1, risk_aversion=0))
        decision = solver.solve(self.old)
        self.assertAlmostEqual(decision.violation, 20.0, places=6)

    def test_declared_within_bounds(self):
        for pi in [0.2, 0.5, 0.9]:
            for rho in [0, 1, 3]:
                for ff in [0.0, 5.0, 10.0]:
                    params = ModelParameters(pi, 20, rho, fixed_fine_component=ff)
                    decision = ComplianceSolver(params).solve(self.old)
                    with self.subTest(pi=pi, rho=rho, ff=ff):
                        self.assertGreaterEqual(decision.declared_emissions, 0.0)
                        self.assertLessEqual(decision.declared_emissions, decision.optimal_emissions)

    def test_violation_decreases_with_monitoring(self):
        violations = [
            ComplianceSolver(parametrization(1, monitoring_probability=pi)).solve(self.old).violation
            for pi in [0.2, 0.4, 0.5, 0.6, 0.8, 1.0]
        ]
        for before, after in zip(violations, violations[1:]):
            self.assertGreaterEqual(before, after)

    def test_full_compliance_when_fixed_fine_covers_tax(self):
        for ff in [40.0, 60.0]:
            solver = ComplianceSolver(parametrization(3, fixed_fine_component=ff))
            old = solver.solve(self.old)
            new = solver.solve(self.new, 500.0)
            self.assertEqual(old.violation, 0.0)
            self.assertEqual(new.violation, 0.0)
            self.assertEqual(old.fine_paid, 0.0)

    def test_residual_vanishes_at_solution(self):
        declared = self.solver.declared_emissions(self.old)
        residual = self.solver.residual(self.old)
        self.assertAlmostEqual(residual(declared), 0.0, places=8)

    def test_decision_components(self):
        decision = self.solver.solve(self.old)
        r = decision.declared_emissions
        self.assertAlmostEqual(decision.abatement_cost, 2400.0)
        self.assertAlmostEqual(decision.tax_paid, 20.0 * r)
        self.assertAlmostEqual(decision.fine_paid, decision.violation ** 2)
        self.assertAlmostEqual(
            decision.total_disutility,
            expected_disutility(2400.0, 20.0 * r, 0.0, decision.violation ** 2, self.params),
        )

    def test_solve_is_deterministic(self):
        self.assertEqual(self.solver.solve(self.new, 1500.0), self.solver.solve(self.new, 1500.0))

    def test_declares_nothing_when_fine_stays_below_tax(self):
        # rho = 0, pi = 0.1: the interior violation tau / (2 pi) = 100 exceeds e* = 60
        solver = ComplianceSolver(parametrization(1, risk_aversion=0, monitoring_probability=0.1))
        decision = solver.solve(self.old)
        self.assertEqual(decision.declared_emissions, 0.0)
        self.assertAlmostEqual(decision.violation, 60.0)
        self.assertEqual(decision.tax_paid, 0.0)
        self.assertAlmostEqual(decision.fine_paid, 3600.0)
        self.assertLess(solver.residual(self.old)(0.0), 0.0)

    def test_no_root_with_positive_residual_raises(self):
        # Residual at r = 0 is positive in the baseline, so an empty root list is infeasible
        with patch("adoption_threshold.compliance.find_roots", return_value=[]):
            with self.assertRaises(ModelInfeasibleError):
                self.solver.solve(self.old)

    def test_ambiguous_root_is_domain_error(self):
        with patch("adoption_threshold.compliance.find_roots", return_value=[10.0, 30.0]):
            with self.assertRaises(DomainError):
                self.solver.solve(self.old)

    def test_several_roots_raise(self):
        with patch("adoption_threshold.compliance.find_roots", return_value=[10.0, 30.0]):
            with self.assertRaises(AmbiguousRootError) as ctx:
                self.solver.solve(self.old)
        self.assertEqual(ctx.exception.candidates, [10.0, 30.0])


if __name__ == "__main__":
    unittest.main()
