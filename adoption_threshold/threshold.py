import logging

from .compliance import ComplianceSolver
from .errors import ThresholdNotFoundError
from .joint import JointDecisionSolver
from .scenarios import Scenario
from .solver import DEFAULT_SETTINGS, SolverSettings
from .types import (
    ComplianceDecision,
    ExpectedDecision,
    InvestmentComparison,
    NewTechnologyDecision,
    ThresholdResult,
    UncertaintyMode,
)

logger = logging.getLogger(__name__)


class ThresholdSearch:
    """
    Locates the investment threshold of a scenario.

    The investment cost i is scanned downwards in unit steps from i_max. At
    each i the old technology's disutility Do (no investment) is compared
    with the new technology's (expected) disutility Dn(i); the scan stops at
    the first i with Do - Dn > 0, and the firm is indifferent somewhere in
    [i, i + 1).

    A linear scan is used rather than bisection because Do - Dn is only
    piecewise smooth in i under full uncertainty.

    Example:
        >>> scenario = Scenario(parametrization(1), UncertaintyMode.NONE, i_max=2400)
        >>> result = ThresholdSearch(scenario).run()
        >>> result.interval
        (2374, 2375)
    """

    def __init__(self, scenario: Scenario, settings: SolverSettings = DEFAULT_SETTINGS):
        self.scenario = scenario
        self.parameters = scenario.parameters
        self.mode = scenario.mode
        self.compliance_solver = ComplianceSolver(self.parameters, settings)
        self.joint_solver = None
        if self.mode is UncertaintyMode.FULL:
            self.joint_solver = JointDecisionSolver(
                self.parameters,
                scenario.high_cost_technology,
                scenario.low_cost_technology,
                settings,
            )

    def old_decision(self) -> ComplianceDecision:
        return self.compliance_solver.solve(self.scenario.old_technology, 0.0)

    def new_decision(self, investment_cost: float, old: ComplianceDecision) -> NewTechnologyDecision:
        """
        New technology decision at investment cost i.

        Args:
            investment_cost: i
            old: Old technology decision; its declared emissions bound the
                joint declaration under full uncertainty
        """
        if self.mode is UncertaintyMode.NONE:
            return self.compliance_solver.solve(self.scenario.new_technology, investment_cost)

        if self.mode is UncertaintyMode.PARTIAL:
            return ExpectedDecision(
                high_cost=self.compliance_solver.solve(
                    self.scenario.high_cost_technology, investment_cost),
                low_cost=self.compliance_solver.solve(
                    self.scenario.low_cost_technology, investment_cost),
                likelihood=self.parameters.efficiency_likelihood,
            )

        return self.joint_solver.solve(investment_cost, old.declared_emissions)

    def evaluate(self, investment_cost: float) -> InvestmentComparison:
        """Compare both technologies at a fixed investment cost."""
        old = self.old_decision()
        return InvestmentComparison(
            investment_cost=investment_cost,
            old=old,
            new=self.new_decision(investment_cost, old),
        )

    def run(self) -> ThresholdResult:
        """
        Raises:
            ThresholdNotFoundError: Do - Dn > 0 never holds for i in [0, i_max]
            ModelInfeasibleError, AmbiguousRootError, SolverDidNotConvergeError:
                propagated from the decision at the failing investment cost
        """
        i_max = self.scenario.i_max
        old = self.old_decision()
        logger.info(
            "Scanning investment cost from %d down to 0 (%s uncertainty, Do=%.6g)",
            i_max, self.mode.value, old.total_disutility,
        )

        iterations = 0
        for i in range(i_max, -1, -1):
            iterations += 1
            new = self.new_decision(float(i), old)
            gap = old.total_disutility - new.total_disutility
            logger.debug("I=%d: Do-Dn=%.6g", i, gap)
            if gap > 0.0:
                if i == i_max:
                    logger.warning(
                        "Old technology already worse at i_max=%d; the threshold may lie "
                        "above the scanned range", i_max,
                    )
                logger.info("Indifference interval [%d, %d)", i, i + 1)
                return ThresholdResult(
                    investment_cost_lower_bound=i,
                    investment_cost_upper_bound=i + 1,
                    old_tech_decision=old,
                    new_tech_decision=new,
                    mode=self.mode,
                    parameters=self.parameters,
                    iterations=iterations,
                    scenario_name=self.scenario.name,
                )

        raise ThresholdNotFoundError(i_max=i_max, i_min=0)


def find_threshold(scenario: Scenario, settings: SolverSettings = DEFAULT_SETTINGS) -> ThresholdResult:
    """Convenience wrapper around ThresholdSearch(scenario).run()."""
    return ThresholdSearch(scenario, settings).run()
