from typing import Optional, Sequence


class ThresholdModelError(Exception):
    """Base class for every failure raised while evaluating a scenario."""


class DomainError(ThresholdModelError, ValueError):
    """A closed-form input violates its precondition (e.g. tau <= 0, negative cost base)."""


class AmbiguousRootError(DomainError):
    """
    More than one admissible root survived candidate filtering where the model
    assumes a unique solution. The parameters lie outside the region where
    the model's convexity conditions guarantee uniqueness.
    """

    def __init__(self, message: str, candidates: Sequence = ()):
        super().__init__(f"{message} (candidates: {list(candidates)})")
        self.candidates = list(candidates)


class ModelInfeasibleError(ThresholdModelError):
    """No real, positive, in-range root exists for a required equation."""


class SolverDidNotConvergeError(ThresholdModelError, RuntimeError):
    """The root-finder exhausted its iteration budget."""


class ThresholdNotFoundError(ThresholdModelError):
    """
    The backward scan reached i = 0 without the old technology becoming
    strictly worse than the new one.
    """

    def __init__(self, i_max: int, i_min: int = 0, message: Optional[str] = None):
        if message is None:
            message = (
                f"Old technology is never strictly worse than the new one for "
                f"investment costs in [{i_min}, {i_max}]; increase i_max or check the parameters"
            )
        super().__init__(message)
        self.i_max = i_max
        self.i_min = i_min
