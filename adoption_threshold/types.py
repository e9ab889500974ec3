from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .errors import DomainError


class UncertaintyMode(str, Enum):
    """How much the firm knows about the new technology's abatement efficiency."""
    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"


class ComplianceBranch(str, Enum):
    """Branch taken by the joint decision under full uncertainty."""
    FULL_COMPLIANCE = "full_compliance"
    IMPERFECT_COMPLIANCE = "imperfect_compliance"


@dataclass(frozen=True)
class ModelParameters:
    """
    Regulatory and behavioural parameters of one scenario.

    Attributes:
        monitoring_probability: Audit probability pi, in (0, 1]
        tax_rate: Tax tau per unit of declared emissions (> 0)
        risk_aversion: Degree of risk aversion rho (>= 0); rho = 0 is the
            risk-neutral, expected-cost baseline
        fixed_fine_component: Fixed part ff of the marginal fine (>= 0)
        efficiency_likelihood: Probability alpha that the new technology turns
            out to be the high abatement cost (least efficient) one
        fine_multiplier: Scale m applied to the whole fine, m * (ff*v + v^2);
            1 in Parametrizations 1 and 3, 5 in Parametrization 2
    """
    monitoring_probability: float
    tax_rate: float
    risk_aversion: float
    fixed_fine_component: float = 0.0
    efficiency_likelihood: float = 0.5
    fine_multiplier: float = 1.0

    def __post_init__(self):
        if not 0.0 < self.monitoring_probability <= 1.0:
            raise DomainError(
                f"monitoring_probability must be in (0, 1], got {self.monitoring_probability}"
            )
        if not self.tax_rate > 0.0:
            raise DomainError(f"tax_rate must be positive, got {self.tax_rate}")
        if not self.risk_aversion >= 0.0:
            raise DomainError(f"risk_aversion must be non-negative, got {self.risk_aversion}")
        if not self.fixed_fine_component >= 0.0:
            raise DomainError(
                f"fixed_fine_component must be non-negative, got {self.fixed_fine_component}"
            )
        if not 0.0 <= self.efficiency_likelihood <= 1.0:
            raise DomainError(
                f"efficiency_likelihood must be in [0, 1], got {self.efficiency_likelihood}"
            )
        if not self.fine_multiplier > 0.0:
            raise DomainError(f"fine_multiplier must be positive, got {self.fine_multiplier}")

    @property
    def exponent(self) -> float:
        """Power rho + 1 of the disutility function."""
        return self.risk_aversion + 1.0


@dataclass(frozen=True)
class ComplianceDecision:
    """
    Optimal actual/declared emissions of a firm using one technology at a
    given investment cost, with the cost components they imply.
    """
    technology: str
    optimal_emissions: float
    declared_emissions: float
    abatement_cost: float
    tax_paid: float
    fine_paid: float
    investment_cost: float
    total_disutility: float

    @property
    def violation(self) -> float:
        return self.optimal_emissions - self.declared_emissions

    @property
    def total_cost(self) -> float:
        """Costs borne when audited (abatement + tax + investment + fine)."""
        return self.abatement_cost + self.tax_paid + self.investment_cost + self.fine_paid


@dataclass(frozen=True)
class ExpectedDecision:
    """
    Partial uncertainty: the firm learns the efficiency after investing and
    optimizes separately for each realization.
    """
    high_cost: ComplianceDecision
    low_cost: ComplianceDecision
    likelihood: float  # alpha, weight of the high-cost realization

    def _expect(self, high: float, low: float) -> float:
        return self.likelihood * high + (1.0 - self.likelihood) * low

    @property
    def optimal_emissions(self) -> float:
        return self._expect(self.high_cost.optimal_emissions, self.low_cost.optimal_emissions)

    @property
    def declared_emissions(self) -> float:
        return self._expect(self.high_cost.declared_emissions, self.low_cost.declared_emissions)

    @property
    def violation(self) -> float:
        return self._expect(self.high_cost.violation, self.low_cost.violation)

    @property
    def total_disutility(self) -> float:
        return self._expect(self.high_cost.total_disutility, self.low_cost.total_disutility)


@dataclass(frozen=True)
class WithinLowCostCap:
    """Joint emissions lie within the low-cost technology's cap; both cost realizations apply."""
    emissions: float


@dataclass(frozen=True)
class ExceedsLowCostCap:
    """
    Joint emissions exceeded the low-cost cap; the low-cost realization abates
    at zero cost and the decision was re-solved with its cost terms set to zero.

    emissions holds the first-pass value, or None when the first pass had no
    admissible root.
    """
    emissions: Optional[float]


CapVariant = Union[WithinLowCostCap, ExceedsLowCostCap]


@dataclass(frozen=True)
class JointDecision:
    """
    Full uncertainty: one (e, r) pair chosen before the efficiency is known.

    Attributes:
        emissions: Jointly optimal actual emissions e
        declared_emissions: Jointly optimal declared emissions r
        branch: Compliance branch selected by pi * f'(0) - tau
        cap_variant: Whether the first-pass emissions fitted the low-cost cap
        high_cost: Realized costs if the technology is the high-cost one
        low_cost: Realized costs if the technology is the low-cost one
        likelihood: alpha, weight of the high-cost realization
    """
    emissions: float
    declared_emissions: float
    branch: ComplianceBranch
    cap_variant: CapVariant
    high_cost: ComplianceDecision
    low_cost: ComplianceDecision
    likelihood: float

    @property
    def optimal_emissions(self) -> float:
        return self.emissions

    @property
    def violation(self) -> float:
        return self.emissions - self.declared_emissions

    @property
    def total_disutility(self) -> float:
        return (self.likelihood * self.high_cost.total_disutility
                + (1.0 - self.likelihood) * self.low_cost.total_disutility)


NewTechnologyDecision = Union[ComplianceDecision, ExpectedDecision, JointDecision]


@dataclass(frozen=True)
class InvestmentComparison:
    """Old vs new technology at one investment cost."""
    investment_cost: float
    old: ComplianceDecision
    new: NewTechnologyDecision

    @property
    def disutility_gap(self) -> float:
        """Do - Dn; positive when the old technology is strictly worse."""
        return self.old.total_disutility - self.new.total_disutility

    @property
    def prefers_new(self) -> bool:
        return self.disutility_gap > 0.0


@dataclass(frozen=True)
class ThresholdResult:
    """
    Terminal output of the threshold search: the firm is indifferent between
    technologies for an investment cost in [lower, upper).
    """
    investment_cost_lower_bound: int
    investment_cost_upper_bound: int
    old_tech_decision: ComplianceDecision
    new_tech_decision: NewTechnologyDecision
    mode: UncertaintyMode
    parameters: ModelParameters
    iterations: int
    scenario_name: Optional[str] = None

    @property
    def interval(self):
        return self.investment_cost_lower_bound, self.investment_cost_upper_bound

    def summary(self) -> List[str]:
        """Report lines for console output."""
        lower, upper = self.interval
        new = self.new_tech_decision
        lines = [
            f"Indifferent if the investment cost of the new technology (Ii) is "
            f"approximately between [{lower},{upper})",
            f"Optimal emissions with the old technology = {self.old_tech_decision.optimal_emissions:.4f}",
        ]
        if isinstance(new, ExpectedDecision):
            lines += [
                f"Expected optimal emissions with the new technology = {new.optimal_emissions:.4f}",
                f"Optimal emissions with the least efficient new technology = {new.high_cost.optimal_emissions:.4f}",
                f"Optimal emissions with the most efficient new technology = {new.low_cost.optimal_emissions:.4f}",
                f"Violation level with the old technology = {self.old_tech_decision.violation:.4f}",
                f"Expected violation level with the new technology = {new.violation:.4f}",
                f"Violation level with the least efficient new technology = {new.high_cost.violation:.4f}",
                f"Violation level with the most efficient new technology = {new.low_cost.violation:.4f}",
            ]
        else:
            lines += [
                f"Optimal emissions with the new technology = {new.optimal_emissions:.4f}",
                f"Violation level with the old technology = {self.old_tech_decision.violation:.4f}",
                f"Violation level with the new technology = {new.violation:.4f}",
            ]
            if isinstance(new, JointDecision):
                lines.append(
                    f"Compliance branch: {new.branch.value} "
                    f"({type(new.cap_variant).__name__})"
                )
        return lines
