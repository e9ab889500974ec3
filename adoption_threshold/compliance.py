import logging
from typing import Callable

import numpy as np

from .costs import SanctionFunction, TechnologyProfile
from .disutility import expected_disutility, marginal_disutility
from .errors import AmbiguousRootError, ModelInfeasibleError
from .solver import DEFAULT_SETTINGS, SolverSettings, find_roots
from .types import ComplianceDecision, ModelParameters

logger = logging.getLogger(__name__)


def build_decision(
    technology: str,
    emissions: float,
    declared: float,
    abatement_cost: float,
    sanction: SanctionFunction,
    investment_cost: float,
    parameters: ModelParameters,
) -> ComplianceDecision:
    """Cost components and expected disutility implied by an (e, r) pair."""
    tax_paid = declared * parameters.tax_rate
    fine_paid = sanction.fine(declared)
    return ComplianceDecision(
        technology=technology,
        optimal_emissions=emissions,
        declared_emissions=declared,
        abatement_cost=abatement_cost,
        tax_paid=tax_paid,
        fine_paid=fine_paid,
        investment_cost=investment_cost,
        total_disutility=expected_disutility(
            abatement_cost, tax_paid, investment_cost, fine_paid, parameters
        ),
    )


class ComplianceSolver:
    """
    Optimal declared emissions for a firm that knows its technology.

    With actual emissions fixed at the technology optimum e*, the firm picks
    r in [0, e*] so that the expected marginal fine equals the tax saved:

        dib'(r) * pi * F'(r)
        ----------------------------------  = tau
        (1 - pi) * dia'(r) + pi * dib'(r)

    with dia = (C + tau*r + i)^(rho+1) and dib = (C + tau*r + i + F(r))^(rho+1).

    When the marginal fine at zero violation already covers the tax
    (pi * F'(e*) >= tau) the firm complies fully and r* = e*. When the
    marginal fine at full violation (r = 0) is still below the tax, r* = 0.
    """

    def __init__(self, parameters: ModelParameters, settings: SolverSettings = DEFAULT_SETTINGS):
        self.parameters = parameters
        self.settings = settings

    def sanction_for(self, technology: TechnologyProfile) -> SanctionFunction:
        e_star = technology.optimal_emissions(self.parameters.tax_rate)
        return SanctionFunction.for_emissions(e_star, self.parameters)

    def compliance_condition(self, sanction: SanctionFunction) -> float:
        """pi * F'(v=0) - tau; non-negative means full compliance is optimal."""
        return (self.parameters.monitoring_probability * sanction.marginal_fine_at_compliance
                - self.parameters.tax_rate)

    def residual(
        self, technology: TechnologyProfile, investment_cost: float = 0.0
    ) -> Callable[[float], float]:
        """Left-hand side minus right-hand side of the declaration condition, as a function of r."""
        params = self.parameters
        pi = params.monitoring_probability
        tau = params.tax_rate
        rho = params.risk_aversion
        sanction = self.sanction_for(technology)
        cost = technology.abatement_cost(sanction.actual_emissions)

        def condition(declared: float) -> float:
            base = cost + tau * declared + investment_cost
            dia_d = marginal_disutility(base, rho)
            dib_d = marginal_disutility(base + sanction.fine(declared), rho)
            return (dib_d * pi * sanction.fine_derivative(declared)
                    / ((1.0 - pi) * dia_d + pi * dib_d)) - tau

        return condition

    def declared_emissions(self, technology: TechnologyProfile, investment_cost: float = 0.0) -> float:
        """
        Solve for r*.

        Raises:
            ModelInfeasibleError: no root in [0, e*] and neither corner is optimal
            AmbiguousRootError: more than one root in [0, e*]
        """
        sanction = self.sanction_for(technology)
        e_star = sanction.actual_emissions
        if self.compliance_condition(sanction) >= 0.0:
            return e_star

        residual = self.residual(technology, investment_cost)
        roots = find_roots(residual, 0.0, e_star, self.settings)
        if not roots:
            at_zero = residual(0.0)
            if np.isfinite(at_zero) and at_zero < 0.0:
                # Even a full violation keeps the marginal fine below the tax
                logger.debug("%s at I=%s: declaring nothing", technology.name, investment_cost)
                return 0.0
            raise ModelInfeasibleError(
                f"No declared emissions in [0, {e_star:.6g}] satisfy the declaration "
                f"condition for technology '{technology.name}' at investment cost {investment_cost}"
            )
        if len(roots) > 1:
            raise AmbiguousRootError(
                f"Declaration condition for technology '{technology.name}' has several roots "
                f"in [0, {e_star:.6g}]",
                candidates=roots,
            )
        return roots[0]

    def solve(self, technology: TechnologyProfile, investment_cost: float = 0.0) -> ComplianceDecision:
        sanction = self.sanction_for(technology)
        e_star = sanction.actual_emissions
        declared = self.declared_emissions(technology, investment_cost)
        decision = build_decision(
            technology.name,
            e_star,
            declared,
            technology.abatement_cost(e_star),
            sanction,
            investment_cost,
            self.parameters,
        )
        logger.debug(
            "%s at I=%s: e*=%.6f r*=%.6f violation=%.6f D=%.6g",
            technology.name, investment_cost, e_star, declared,
            decision.violation, decision.total_disutility,
        )
        return decision
