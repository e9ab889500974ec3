"""
Numerical root-finding over bounded intervals.

Scalar equations are bracketed by scanning a uniform grid for sign changes
and refining each bracket with Brent's method. Two-equation systems use
Powell's hybrid method started from an interior grid of points. Both return
every distinct root found inside the bounds; candidate filtering and
uniqueness checks are left to the caller.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np
from scipy.optimize import brentq, root

from .errors import DomainError, SolverDidNotConvergeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverSettings:
    """
    Precision and iteration budget of the root-finder.

    Attributes:
        grid_points: Number of sub-intervals scanned for sign changes
        xtol: Absolute tolerance on scalar roots (Brent)
        ftol: Residual magnitude below which a grid point counts as a root
        maxiter: Brent iteration budget per bracket
        starts_per_dimension: Interior starting points per variable for systems
        system_xtol: Relative step tolerance of the hybrid method
        system_ftol: Residual tolerance of accepted system roots, relative to
            the residual norm at the starting point
        maxfev: Function evaluation budget per start of the hybrid method
        merge_tolerance: Relative distance under which two roots are the same
    """
    grid_points: int = 400
    xtol: float = 1e-12
    ftol: float = 1e-10
    maxiter: int = 200
    starts_per_dimension: int = 3
    system_xtol: float = 1e-12
    system_ftol: float = 1e-8
    maxfev: int = 2000
    merge_tolerance: float = 1e-6


DEFAULT_SETTINGS = SolverSettings()


def _evaluate(residual: Callable[[float], float], x: float) -> float:
    with np.errstate(all="ignore"):
        try:
            value = float(residual(x))
        except (ZeroDivisionError, OverflowError):
            return float("nan")
    return value


def _same_root(a, b, tolerance: float) -> bool:
    a = np.atleast_1d(a)
    b = np.atleast_1d(b)
    scale = 1.0 + np.maximum(np.abs(a), np.abs(b))
    return bool(np.all(np.abs(a - b) <= tolerance * scale))


def _merge(candidates: Sequence, tolerance: float) -> list:
    distinct = []
    for candidate in candidates:
        if not any(_same_root(candidate, kept, tolerance) for kept in distinct):
            distinct.append(candidate)
    return distinct


def find_roots(
    residual: Callable[[float], float],
    lower: float,
    upper: float,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> List[float]:
    """
    Find all distinct roots of a continuous scalar residual on [lower, upper].

    Non-finite residual values (e.g. a negative base raised to a fractional
    power) are treated as outside the real domain and never bracket a root.

    Returns:
        Sorted list of roots; empty if no sign change or zero was found.

    Raises:
        DomainError: if the interval is empty
        SolverDidNotConvergeError: if Brent's method exhausts its budget
    """
    if not upper >= lower:
        raise DomainError(f"Empty search interval [{lower}, {upper}]")
    if upper == lower:
        value = _evaluate(residual, lower)
        return [lower] if np.isfinite(value) and abs(value) <= settings.ftol else []

    grid = np.linspace(lower, upper, settings.grid_points + 1)
    values = [_evaluate(residual, x) for x in grid]

    roots = []
    for k, (x, fx) in enumerate(zip(grid, values)):
        if np.isfinite(fx) and abs(fx) <= settings.ftol:
            roots.append(float(x))
        if k == len(grid) - 1:
            break
        fb = values[k + 1]
        if not (np.isfinite(fx) and np.isfinite(fb)) or fx * fb >= 0.0:
            continue

        with np.errstate(all="ignore"):
            x0, info = brentq(
                residual, x, grid[k + 1],
                xtol=settings.xtol, maxiter=settings.maxiter,
                full_output=True, disp=False,
            )
        if not info.converged:
            raise SolverDidNotConvergeError(
                f"Brent's method did not converge on [{x:.6g}, {grid[k + 1]:.6g}] "
                f"after {info.iterations} iterations: {info.flag}"
            )
        roots.append(float(x0))

    return sorted(_merge(roots, settings.merge_tolerance))


def find_roots_system(
    residuals: Callable[[np.ndarray], Sequence[float]],
    bounds: Sequence[Tuple[float, float]],
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> List[np.ndarray]:
    """
    Find distinct roots of a square nonlinear system inside a box.

    Powell's hybrid method is started from an evenly spaced interior grid
    (starts_per_dimension points per variable). Converged points outside the
    box or whose residual does not satisfy system_ftol are discarded.

    Returns:
        List of root vectors, in the order they were found.

    Raises:
        SolverDidNotConvergeError: if no start converged and at least one
            of them ran out of function evaluations
    """
    bounds = [(float(lo), float(hi)) for lo, hi in bounds]
    for lo, hi in bounds:
        if not hi > lo:
            raise DomainError(f"Empty search box side [{lo}, {hi}]")

    def safe_residuals(x):
        with np.errstate(all="ignore"):
            try:
                return np.asarray(residuals(x), dtype=float)
            except (ZeroDivisionError, OverflowError):
                return np.full(len(bounds), np.nan)

    axes = [
        np.linspace(lo, hi, settings.starts_per_dimension + 2)[1:-1]
        for lo, hi in bounds
    ]
    lows = np.array([lo for lo, _ in bounds])
    highs = np.array([hi for _, hi in bounds])

    found = []
    exhausted = 0
    converged = 0
    for start in itertools.product(*axes):
        x0 = np.array(start)
        initial = safe_residuals(x0)
        if not np.all(np.isfinite(initial)):
            continue

        with np.errstate(all="ignore"):
            sol = root(
                safe_residuals, x0, method="hybr",
                options={"xtol": settings.system_xtol, "maxfev": settings.maxfev},
            )
        if not sol.success:
            # status 2: maxfev reached
            if sol.status == 2:
                exhausted += 1
            continue
        converged += 1

        x = sol.x
        value = safe_residuals(x)
        if not np.all(np.isfinite(x)) or not np.all(np.isfinite(value)):
            continue
        scale = max(1.0, float(np.max(np.abs(initial))))
        if np.max(np.abs(value)) > settings.system_ftol * scale:
            continue
        span = settings.merge_tolerance * (1.0 + np.abs(x))
        if np.any(x < lows - span) or np.any(x > highs + span):
            continue
        found.append(np.clip(x, lows, highs))

    if converged == 0 and exhausted > 0:
        raise SolverDidNotConvergeError(
            f"Hybrid method exhausted {settings.maxfev} evaluations from every start in {bounds}"
        )

    roots = _merge(found, settings.merge_tolerance)
    logger.debug("System roots in %s: %s", bounds, [r.tolist() for r in roots])
    return roots
