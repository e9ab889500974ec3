"""
Expected disutility of a risk-averse firm.

    D = (1 - pi) * (C + T + I)^(rho+1) + pi * (C + T + I + F)^(rho+1)

With probability 1 - pi the firm is not audited and bears abatement cost C,
tax T and investment I; with probability pi it is audited and also pays the
fine F. rho = 0 reduces D to expected total cost (risk neutrality).
"""

import numpy as np

from .errors import DomainError
from .types import ModelParameters


def power(base: float, exponent: float) -> float:
    """
    Real power used inside residual functions. Negative bases with a
    non-integer exponent give nan rather than a complex number.
    """
    with np.errstate(invalid="ignore"):
        return float(np.power(base, exponent))


def marginal_disutility(base: float, risk_aversion: float) -> float:
    """Power-rule derivative of base^(rho+1) with respect to the base: (rho+1) * base^rho."""
    return (risk_aversion + 1.0) * power(base, risk_aversion)


def expected_disutility(
    abatement_cost: float,
    tax_paid: float,
    investment_cost: float,
    fine: float,
    parameters: ModelParameters,
) -> float:
    """
    Expected disutility for realized costs.

    Args:
        abatement_cost: C
        tax_paid: T = r * tau
        investment_cost: I (0 for the old technology)
        fine: F, 0 under full compliance
        parameters: supplies pi and rho

    Raises:
        DomainError: if either cost base is negative, which signals an
            inconsistent parametrization upstream
    """
    unaudited = abatement_cost + tax_paid + investment_cost
    audited = unaudited + fine
    if unaudited < 0.0 or audited < 0.0:
        raise DomainError(
            f"Cost base must be non-negative, got C+T+I={unaudited:.6g}, C+T+I+F={audited:.6g}"
        )

    pi = parameters.monitoring_probability
    exponent = parameters.exponent
    return (1.0 - pi) * unaudited ** exponent + pi * audited ** exponent
