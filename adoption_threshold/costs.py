from dataclasses import dataclass

from .errors import DomainError
from .types import ModelParameters

# Efficiency caps used throughout the study (Table 1)
OLD_TECHNOLOGY_CAP = 100.0
NEW_TECHNOLOGY_CAP = 50.0
HIGH_COST_TECHNOLOGY_CAP = 75.0
LOW_COST_TECHNOLOGY_CAP = 25.0


@dataclass(frozen=True)
class TechnologyProfile:
    """
    Abatement technology with cost C(e) = (cap - e) * e.

    A lower cap means a more efficient (cheaper to abate) technology.

    Attributes:
        name: Label used in reports
        cap: Efficiency cap of the cost function
    """
    name: str
    cap: float

    def __post_init__(self):
        if not self.cap > 0.0:
            raise DomainError(f"Technology cap must be positive, got {self.cap}")

    def abatement_cost(self, emissions: float) -> float:
        """C(e) = (cap - e) * e"""
        return (self.cap - emissions) * emissions

    def marginal_abatement_cost(self, emissions: float) -> float:
        """C'(e) = cap - 2e"""
        return self.cap - 2.0 * emissions

    def optimal_emissions(self, tax_rate: float) -> float:
        """
        Unconstrained emissions optimum e* solving C'(e*) + tau = 0,
        i.e. e* = (cap + tau) / 2. Independent of investment and compliance.
        """
        if not tax_rate > 0.0:
            raise DomainError(f"tax_rate must be positive, got {tax_rate}")
        return (self.cap + tax_rate) / 2.0


def old_technology(cap: float = OLD_TECHNOLOGY_CAP) -> TechnologyProfile:
    return TechnologyProfile(name="old", cap=cap)


def new_technology(cap: float = NEW_TECHNOLOGY_CAP) -> TechnologyProfile:
    return TechnologyProfile(name="new", cap=cap)


def high_cost_technology(cap: float = HIGH_COST_TECHNOLOGY_CAP) -> TechnologyProfile:
    return TechnologyProfile(name="new-high-cost", cap=cap)


def low_cost_technology(cap: float = LOW_COST_TECHNOLOGY_CAP) -> TechnologyProfile:
    return TechnologyProfile(name="new-low-cost", cap=cap)


@dataclass(frozen=True)
class SanctionFunction:
    """
    Fine applied when audited, convex and increasing in the violation
    v = e - r:

        F(r)  = m * (ff * v + v^2)
        F'(r) = m * (ff + 2v)

    F' is the derivative with respect to the violation level, not with
    respect to r; the first-order conditions are written with that sign.

    Attributes:
        actual_emissions: Actual emissions e the violation is measured from
            (the technology optimum e* outside the full-uncertainty case)
        fixed_component: ff
        multiplier: m
    """
    actual_emissions: float
    fixed_component: float = 0.0
    multiplier: float = 1.0

    @classmethod
    def for_emissions(cls, emissions: float, parameters: ModelParameters) -> "SanctionFunction":
        return cls(
            actual_emissions=emissions,
            fixed_component=parameters.fixed_fine_component,
            multiplier=parameters.fine_multiplier,
        )

    def violation(self, declared: float) -> float:
        return self.actual_emissions - declared

    def fine(self, declared: float) -> float:
        v = self.violation(declared)
        return self.multiplier * (self.fixed_component * v + v * v)

    def fine_derivative(self, declared: float) -> float:
        v = self.violation(declared)
        return self.multiplier * (self.fixed_component + 2.0 * v)

    @property
    def marginal_fine_at_compliance(self) -> float:
        """F' at zero violation, m * ff."""
        return self.multiplier * self.fixed_component
