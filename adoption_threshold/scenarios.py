"""
Scenario configuration.

A scenario bundles the model parameters, the technology caps, the upper
bound of the investment-cost scan and the uncertainty mode. Scenarios are
built in code, from the three parametrizations of the study (Table 1), or
from a JSON file such as

    {
        "name": "baseline",
        "mode": "partial",
        "i_max": 2200,
        "parameters": {"monitoring_probability": 0.5, "tax_rate": 20,
                       "risk_aversion": 1, "efficiency_likelihood": 0.5},
        "high_cap": 75,
        "low_cap": 25
    }
"""

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from .costs import (
    HIGH_COST_TECHNOLOGY_CAP,
    LOW_COST_TECHNOLOGY_CAP,
    NEW_TECHNOLOGY_CAP,
    OLD_TECHNOLOGY_CAP,
    TechnologyProfile,
    high_cost_technology,
    low_cost_technology,
    new_technology,
    old_technology,
)
from .errors import DomainError
from .types import ModelParameters, UncertaintyMode

DEFAULT_TAX_RATE = 20.0
DEFAULT_RISK_AVERSION = 1.0

# Table 1: inspection probability and fine schedule
PARAMETRIZATIONS: Dict[int, Dict[str, float]] = {
    1: {"monitoring_probability": 0.5, "fine_multiplier": 1.0, "fixed_fine_component": 0.0},
    2: {"monitoring_probability": 0.1, "fine_multiplier": 5.0, "fixed_fine_component": 0.0},
    3: {"monitoring_probability": 0.5, "fine_multiplier": 1.0, "fixed_fine_component": 40.0},
}


@dataclass(frozen=True)
class Scenario:
    """
    One threshold computation.

    Attributes:
        parameters: Model parameters, fixed for the whole scan
        mode: Uncertainty about the new technology's efficiency
        i_max: First (largest) investment cost of the backward scan; must be
            large enough for the old technology to be preferred there
        old_cap: Efficiency cap of the old technology
        new_cap: Cap of the new technology when there is no uncertainty
        high_cap: Cap of the high abatement cost realization
        low_cap: Cap of the low abatement cost realization
        name: Optional label for reports and sweeps
    """
    parameters: ModelParameters
    mode: UncertaintyMode = UncertaintyMode.NONE
    i_max: int = 2500
    old_cap: float = OLD_TECHNOLOGY_CAP
    new_cap: float = NEW_TECHNOLOGY_CAP
    high_cap: float = HIGH_COST_TECHNOLOGY_CAP
    low_cap: float = LOW_COST_TECHNOLOGY_CAP
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.mode, UncertaintyMode):
            object.__setattr__(self, "mode", _parse_mode(self.mode))
        if int(self.i_max) != self.i_max or self.i_max < 0:
            raise DomainError(f"i_max must be a non-negative integer, got {self.i_max}")
        object.__setattr__(self, "i_max", int(self.i_max))
        if self.low_cap >= self.high_cap:
            raise DomainError(
                f"low_cap ({self.low_cap}) must be below high_cap ({self.high_cap})"
            )

    @property
    def old_technology(self) -> TechnologyProfile:
        return old_technology(self.old_cap)

    @property
    def new_technology(self) -> TechnologyProfile:
        return new_technology(self.new_cap)

    @property
    def high_cost_technology(self) -> TechnologyProfile:
        return high_cost_technology(self.high_cap)

    @property
    def low_cost_technology(self) -> TechnologyProfile:
        return low_cost_technology(self.low_cap)

    def with_parameters(self, **changes) -> "Scenario":
        """Copy with some ModelParameters fields replaced."""
        unknown = set(changes) - {f.name for f in fields(ModelParameters)}
        if unknown:
            raise DomainError(f"Unknown model parameters: {sorted(unknown)}")
        return replace(self, parameters=replace(self.parameters, **changes))


def _parse_mode(value) -> UncertaintyMode:
    try:
        return UncertaintyMode(value)
    except ValueError:
        valid = ", ".join(m.value for m in UncertaintyMode)
        raise DomainError(f"Unknown uncertainty mode '{value}'; expected one of: {valid}") from None


def parametrization(number: int, **overrides) -> ModelParameters:
    """
    Model parameters of one of the study's parametrizations (Table 1),
    with tau = 20 and rho = 1 unless overridden.
    """
    if number not in PARAMETRIZATIONS:
        raise DomainError(
            f"Unknown parametrization {number}; expected one of {sorted(PARAMETRIZATIONS)}"
        )
    values: Dict[str, Any] = {
        "tax_rate": DEFAULT_TAX_RATE,
        "risk_aversion": DEFAULT_RISK_AVERSION,
        **PARAMETRIZATIONS[number],
    }
    unknown = set(overrides) - {f.name for f in fields(ModelParameters)}
    if unknown:
        raise DomainError(f"Unknown model parameters: {sorted(unknown)}")
    values.update(overrides)
    return ModelParameters(**values)


def scenario_from_dict(data: Dict[str, Any]) -> Scenario:
    """
    Build a Scenario from plain data. "parameters" may be a dict of
    ModelParameters fields or an int naming a parametrization; in the latter
    case "overrides" may adjust individual fields.
    """
    data = dict(data)
    scenario_keys = {f.name for f in fields(Scenario)}
    unknown = set(data) - scenario_keys - {"overrides"}
    if unknown:
        raise DomainError(f"Unknown scenario keys: {sorted(unknown)}")
    if "parameters" not in data:
        raise DomainError("Scenario requires 'parameters'")

    raw = data.pop("parameters")
    overrides = data.pop("overrides", {})
    if isinstance(raw, int):
        parameters = parametrization(raw, **overrides)
    else:
        param_keys = {f.name for f in fields(ModelParameters)}
        unknown = set(raw) - param_keys
        if unknown:
            raise DomainError(f"Unknown model parameters: {sorted(unknown)}")
        try:
            parameters = ModelParameters(**{**raw, **overrides})
        except TypeError as e:
            raise DomainError(f"Incomplete model parameters: {e}") from e
    return Scenario(parameters=parameters, **data)


def load_scenario(path: str) -> Scenario:
    """Read a scenario from a JSON file."""
    with open(path, "r", encoding="utf-8") as fh:
        return scenario_from_dict(json.load(fh))
