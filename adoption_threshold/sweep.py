"""
Parameter sweeps over independent scenarios.

Each value of the swept parameter gives a separate scenario and a full
threshold search; results are collected in a DataFrame with one row per
value. Scenarios share no state, so they may run in a process pool.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import fields, replace
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd

from .errors import DomainError, ThresholdModelError
from .scenarios import Scenario
from .threshold import ThresholdSearch
from .types import ExpectedDecision, JointDecision, ModelParameters

logger = logging.getLogger(__name__)

PARAMETER_FIELDS = {f.name for f in fields(ModelParameters)}
SCENARIO_FIELDS = {f.name for f in fields(Scenario)} - {"parameters", "name"}


def vary(base: Scenario, parameter: str, value: Any) -> Scenario:
    """Copy of base with one ModelParameters or Scenario field replaced."""
    if parameter in PARAMETER_FIELDS:
        return base.with_parameters(**{parameter: value})
    if parameter in SCENARIO_FIELDS:
        return replace(base, **{parameter: value})
    raise DomainError(
        f"Cannot sweep '{parameter}'; expected one of {sorted(PARAMETER_FIELDS | SCENARIO_FIELDS)}"
    )


def _row(scenario: Scenario) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "threshold_lower": np.nan,
        "threshold_upper": np.nan,
        "old_emissions": np.nan,
        "old_violation": np.nan,
        "new_emissions": np.nan,
        "new_violation": np.nan,
        "error": None,
    }
    try:
        result = ThresholdSearch(scenario).run()
    except ThresholdModelError as e:
        # Keep the sweep going past infeasible points
        logger.warning("Could not solve scenario %s: %s", scenario.name or scenario.parameters, e)
        row["error"] = f"{type(e).__name__}: {e}"
        return row

    old = result.old_tech_decision
    new = result.new_tech_decision
    row.update(
        threshold_lower=result.investment_cost_lower_bound,
        threshold_upper=result.investment_cost_upper_bound,
        old_emissions=old.optimal_emissions,
        old_violation=old.violation,
        new_emissions=new.optimal_emissions,
        new_violation=new.violation,
    )
    if isinstance(new, ExpectedDecision):
        row.update(
            high_cost_violation=new.high_cost.violation,
            low_cost_violation=new.low_cost.violation,
        )
    elif isinstance(new, JointDecision):
        row.update(
            new_declared=new.declared_emissions,
            branch=new.branch.value,
            cap_variant=type(new.cap_variant).__name__,
        )
    return row


def run_sweep(base: Scenario, parameter: str, values: Iterable[Any], n_jobs: int = 1) -> pd.DataFrame:
    """
    Threshold search for each value of one parameter.

    Args:
        base: Scenario providing every other setting
        parameter: ModelParameters field (e.g. "risk_aversion") or Scenario
            field (e.g. "i_max", "low_cap")
        values: Values to try
        n_jobs: Worker processes; 1 runs sequentially

    Returns:
        DataFrame indexed by the parameter value. Rows that failed carry NaN
        results and the error message in the "error" column.

    Example:
        >>> base = Scenario(parametrization(1), UncertaintyMode.PARTIAL, i_max=3200)
        >>> df = run_sweep(base, "efficiency_likelihood", [0.0, 0.25, 0.5])
        >>> df["threshold_lower"].tolist()
        [3093, 2570, 2104]
    """
    values = list(values)
    scenarios: List[Scenario] = [vary(base, parameter, v) for v in values]

    if n_jobs > 1:
        with ProcessPoolExecutor(max_workers=n_jobs) as pool:
            rows = list(pool.map(_row, scenarios))
    else:
        rows = [_row(s) for s in scenarios]

    df = pd.DataFrame(rows, index=pd.Index(values, name=parameter))
    return df
