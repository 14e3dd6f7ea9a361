"""
Numeric tolerances and scalar helpers.

All equality, distance and convergence tests in the kernel compare against
a Tolerance value. Operations accept it as an explicit argument and fall
back to DEFAULT_TOLERANCE when none is given, so a caller (or a test) can
tighten or loosen the comparisons without touching module state.

Constants:
- EPSILON: smallest meaningful difference between two reals
- MAX_TOLERANCE: geometric coincidence / distance tolerance
- MIN_TOLERANCE: coarse tolerance for user-facing checks
- ANGLE_TOLERANCE: tolerance on angles in radians
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

from .errors import InputValidationError

EPSILON = 1e-10
MAX_TOLERANCE = 1e-6
MIN_TOLERANCE = 1e-3
ANGLE_TOLERANCE = 1e-7
MAX_ITERATIONS = 200


@dataclass(frozen=True)
class Tolerance:
    """
    Bundle of tolerances threaded through fitting and closest-point calls.

    Attributes:
        epsilon: Smallest meaningful difference (guards divisions, knot spans)
        max_tolerance: Distance under which two points are coincident
        min_tolerance: Coarse tolerance for loose checks
        angle_tolerance: Angular tolerance in radians
        max_iterations: Iteration bound for iterative refinement
    """
    epsilon: float = EPSILON
    max_tolerance: float = MAX_TOLERANCE
    min_tolerance: float = MIN_TOLERANCE
    angle_tolerance: float = ANGLE_TOLERANCE
    max_iterations: int = MAX_ITERATIONS

    def __post_init__(self):
        for name in ("epsilon", "max_tolerance", "min_tolerance", "angle_tolerance"):
            if not getattr(self, name) > 0.0:
                raise InputValidationError(f"Tolerance '{name}' must be positive.")
        if self.max_iterations < 1:
            raise InputValidationError("Tolerance 'max_iterations' must be at least 1.")

    def with_overrides(self, **kwargs) -> "Tolerance":
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)


DEFAULT_TOLERANCE = Tolerance()


def resolve_tolerance(tol: Optional[Tolerance]) -> Tolerance:
    """Return tol, or the default tolerance when tol is None."""
    return DEFAULT_TOLERANCE if tol is None else tol


def to_radians(degrees: float) -> float:
    """Convert an angle from degrees to radians."""
    return degrees * math.pi / 180.0


def to_degrees(radians: float) -> float:
    """Convert an angle from radians to degrees."""
    return radians * 180.0 / math.pi
