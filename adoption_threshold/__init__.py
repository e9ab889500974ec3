"""
Adoption Threshold: Green Technology Adoption under Compliance Risk

Computes the investment threshold below which a risk-averse, possibly
non-compliant firm adopts a cleaner technology, together with its optimal
actual and declared emissions, with and without uncertainty about the new
technology's abatement efficiency.
"""

__version__ = "0.1.0"

try:
    from .types import (
        ModelParameters,
        ComplianceDecision,
        ExpectedDecision,
        JointDecision,
        WithinLowCostCap,
        ExceedsLowCostCap,
        InvestmentComparison,
        ThresholdResult,
        UncertaintyMode,
        ComplianceBranch,
    )
    from .errors import (
        ThresholdModelError,
        DomainError,
        AmbiguousRootError,
        ModelInfeasibleError,
        SolverDidNotConvergeError,
        ThresholdNotFoundError,
    )
    from .costs import TechnologyProfile, SanctionFunction
    from .disutility import expected_disutility
    from .solver import SolverSettings, find_roots, find_roots_system
    from .compliance import ComplianceSolver
    from .joint import JointDecisionSolver
    from .scenarios import Scenario, parametrization, load_scenario, scenario_from_dict
    from .threshold import ThresholdSearch, find_threshold
    from .sweep import run_sweep
except ImportError as e:
    print(f"Error importing adoption_threshold components: {e}")
    print("Please ensure all dependencies are installed: pip install -e .")
    raise

__all__ = [
    # Version info
    "__version__",
    # Core types
    "ModelParameters",
    "ComplianceDecision",
    "ExpectedDecision",
    "JointDecision",
    "WithinLowCostCap",
    "ExceedsLowCostCap",
    "InvestmentComparison",
    "ThresholdResult",
    "UncertaintyMode",
    "ComplianceBranch",
    # Errors
    "ThresholdModelError",
    "DomainError",
    "AmbiguousRootError",
    "ModelInfeasibleError",
    "SolverDidNotConvergeError",
    "ThresholdNotFoundError",
    # Cost and sanction models
    "TechnologyProfile",
    "SanctionFunction",
    "expected_disutility",
    # Solvers
    "SolverSettings",
    "find_roots",
    "find_roots_system",
    "ComplianceSolver",
    "JointDecisionSolver",
    # Scenarios and search
    "Scenario",
    "parametrization",
    "load_scenario",
    "scenario_from_dict",
    "ThresholdSearch",
    "find_threshold",
    "run_sweep",
]
