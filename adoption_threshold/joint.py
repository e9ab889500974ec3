"""
Joint emissions/declaration decision under full technological uncertainty.

The firm commits to a single pair (e, r) before learning whether the new
technology is the high-cost (probability alpha) or the low-cost one. The
branch is fixed by the sign of pi * F'(v=0) - tau:

* >= 0: full compliance, r = e, and e solves the expected marginal condition
  alpha (rho+1)(C_h+tau e+i)^rho (C_h'+tau) + (1-alpha)(rho+1)(C_l+tau e+i)^rho (C_l'+tau) = 0
* < 0: possible non-compliance, (e, r) solves foc_e = foc_r = 0.

If the resulting e exceeds the low-cost technology's cap its cost would turn
negative, so the branch is re-solved with the low-cost cost and marginal cost
set to zero. The same fallback applies when the first pass has no admissible
root.
"""

import logging
from typing import List, Tuple

import numpy as np

from .compliance import build_decision
from .costs import SanctionFunction, TechnologyProfile
from .disutility import marginal_disutility
from .errors import AmbiguousRootError, ModelInfeasibleError
from .solver import DEFAULT_SETTINGS, SolverSettings, find_roots, find_roots_system
from .types import (
    ComplianceBranch,
    ExceedsLowCostCap,
    JointDecision,
    ModelParameters,
    WithinLowCostCap,
)

logger = logging.getLogger(__name__)


class JointDecisionSolver:
    def __init__(
        self,
        parameters: ModelParameters,
        high_cost: TechnologyProfile,
        low_cost: TechnologyProfile,
        settings: SolverSettings = DEFAULT_SETTINGS,
    ):
        self.parameters = parameters
        self.high_cost = high_cost
        self.low_cost = low_cost
        self.settings = settings
        # No rational firm emits beyond the high-cost technology's cap
        self.upper_bound = high_cost.cap

    def compliance_condition(self) -> float:
        """pi * F'(v=0) - tau"""
        p = self.parameters
        return p.monitoring_probability * p.fine_multiplier * p.fixed_fine_component - p.tax_rate

    def branch(self) -> ComplianceBranch:
        if self.compliance_condition() >= 0.0:
            return ComplianceBranch.FULL_COMPLIANCE
        return ComplianceBranch.IMPERFECT_COMPLIANCE

    def _low_cost_terms(self, emissions: float, within_cap: bool) -> Tuple[float, float]:
        if within_cap:
            return (self.low_cost.abatement_cost(emissions),
                    self.low_cost.marginal_abatement_cost(emissions))
        return 0.0, 0.0

    def _sanction(self, emissions: float) -> SanctionFunction:
        return SanctionFunction.for_emissions(emissions, self.parameters)

    # ------------------------------------------------------------------
    # First-order conditions
    # ------------------------------------------------------------------

    def full_compliance_condition(self, emissions: float, investment_cost: float,
                                  within_cap: bool = True) -> float:
        p = self.parameters
        alpha, tau, rho = p.efficiency_likelihood, p.tax_rate, p.risk_aversion
        c_h = self.high_cost.abatement_cost(emissions)
        c_h_d = self.high_cost.marginal_abatement_cost(emissions)
        c_l, c_l_d = self._low_cost_terms(emissions, within_cap)
        tax = tau * emissions
        return (alpha * marginal_disutility(c_h + tax + investment_cost, rho) * (c_h_d + tau)
                + (1.0 - alpha) * marginal_disutility(c_l + tax + investment_cost, rho) * (c_l_d + tau))

    def first_order_conditions(self, x, investment_cost: float, within_cap: bool = True) -> np.ndarray:
        """[foc_e, foc_r] at (e, r) = x."""
        emissions, declared = float(x[0]), float(x[1])
        p = self.parameters
        pi, tau, rho, alpha = (p.monitoring_probability, p.tax_rate,
                               p.risk_aversion, p.efficiency_likelihood)
        sanction = self._sanction(emissions)
        fine = sanction.fine(declared)
        fine_d = sanction.fine_derivative(declared)

        c_h = self.high_cost.abatement_cost(emissions)
        c_h_d = self.high_cost.marginal_abatement_cost(emissions)
        c_l, c_l_d = self._low_cost_terms(emissions, within_cap)
        common = tau * declared + investment_cost

        dia_h = marginal_disutility(c_h + common, rho)
        dib_h = marginal_disutility(c_h + common + fine, rho)
        dia_l = marginal_disutility(c_l + common, rho)
        dib_l = marginal_disutility(c_l + common + fine, rho)

        a_h = (1.0 - pi) * dia_h + pi * dib_h
        a_l = (1.0 - pi) * dia_l + pi * dib_l
        audited = alpha * dib_h + (1.0 - alpha) * dib_l

        foc_e = alpha * a_h * c_h_d + (1.0 - alpha) * a_l * c_l_d + audited * pi * fine_d
        foc_r = alpha * a_h * tau + (1.0 - alpha) * a_l * tau - audited * pi * fine_d
        return np.array([foc_e, foc_r])

    # ------------------------------------------------------------------
    # Branch solvers
    # ------------------------------------------------------------------

    def _admissible(self, value: float, upper: float) -> bool:
        # (0, 0) is a degenerate root at i = 0: every cost base vanishes there.
        # Values within the merge tolerance of zero count as zero.
        return np.isfinite(value) and self.settings.merge_tolerance < value <= upper

    def _full_compliance_candidates(self, investment_cost: float,
                                    within_cap: bool) -> List[Tuple[float, float]]:
        roots = find_roots(
            lambda e: self.full_compliance_condition(e, investment_cost, within_cap),
            0.0, self.upper_bound, self.settings,
        )
        return [(e, e) for e in roots if self._admissible(e, self.upper_bound)]

    def _imperfect_compliance_candidates(self, investment_cost: float, old_declared: float,
                                         within_cap: bool) -> List[Tuple[float, float]]:
        bounds = [(0.0, self.upper_bound), (0.0, self.upper_bound)]
        roots = find_roots_system(
            lambda x: self.first_order_conditions(x, investment_cost, within_cap),
            bounds, self.settings,
        )
        # Declared emissions under the new technology must not exceed the old one's
        return [
            (float(e), float(r)) for e, r in roots
            if self._admissible(e, self.upper_bound) and self._admissible(r, old_declared)
        ]

    def _candidates(self, branch: ComplianceBranch, investment_cost: float,
                    old_declared: float, within_cap: bool) -> List[Tuple[float, float]]:
        if branch is ComplianceBranch.FULL_COMPLIANCE:
            return self._full_compliance_candidates(investment_cost, within_cap)
        return self._imperfect_compliance_candidates(investment_cost, old_declared, within_cap)

    def _unique(self, candidates, investment_cost, within_cap, branch):
        label = branch.value.replace("_", " ")
        if not candidates:
            raise ModelInfeasibleError(
                f"No real positive solution in [0, {self.upper_bound}] for the {label} branch "
                f"at investment cost {investment_cost} "
                f"({'within' if within_cap else 'beyond'} the low-cost cap)"
            )
        if len(candidates) > 1:
            raise AmbiguousRootError(
                f"The {label} branch has several admissible solutions at investment cost {investment_cost}",
                candidates=candidates,
            )
        return candidates[0]

    def solve(self, investment_cost: float, old_declared: float) -> JointDecision:
        """
        Joint decision at one investment cost.

        The first pass uses both cost realizations. If it has no admissible
        root, or its emissions exceed the low-cost cap, the branch is solved
        again with the low-cost terms set to zero.

        Args:
            investment_cost: Fixed cost i of the new technology
            old_declared: Optimal declared emissions with the old technology,
                upper bound for accepted declarations

        Raises:
            ModelInfeasibleError: no admissible root in the final pass
            AmbiguousRootError: several admissible roots
        """
        branch = self.branch()
        candidates = self._candidates(branch, investment_cost, old_declared, True)
        if candidates:
            emissions, declared = self._unique(candidates, investment_cost, True, branch)
            first_pass = emissions
        else:
            first_pass = None

        if first_pass is not None and first_pass <= self.low_cost.cap:
            variant = WithinLowCostCap(first_pass)
        else:
            variant = ExceedsLowCostCap(first_pass)
            candidates = self._candidates(branch, investment_cost, old_declared, False)
            emissions, declared = self._unique(candidates, investment_cost, False, branch)

        decision = self._decision(emissions, declared, investment_cost, branch, variant)
        logger.debug(
            "Joint decision at I=%s: %s/%s e=%.6f r=%.6f EDn=%.6g",
            investment_cost, branch.value, type(variant).__name__,
            emissions, declared, decision.total_disutility,
        )
        return decision

    def _decision(self, emissions, declared, investment_cost, branch, variant) -> JointDecision:
        sanction = self._sanction(emissions)
        within_cap = isinstance(variant, WithinLowCostCap)
        low_cost, _ = self._low_cost_terms(emissions, within_cap)
        high = build_decision(
            self.high_cost.name, emissions, declared,
            self.high_cost.abatement_cost(emissions),
            sanction, investment_cost, self.parameters,
        )
        low = build_decision(
            self.low_cost.name, emissions, declared, low_cost,
            sanction, investment_cost, self.parameters,
        )
        return JointDecision(
            emissions=emissions,
            declared_emissions=declared,
            branch=branch,
            cap_variant=variant,
            high_cost=high,
            low_cost=low,
            likelihood=self.parameters.efficiency_likelihood,
        )
