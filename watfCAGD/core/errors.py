"""
Exception types raised by the kernel.

- InputValidationError: a precondition on the arguments is violated
  (too few points, coincident points, zero-length vectors, parameters
  outside the domain). Subclasses ValueError.
- SingularSystemError: a fitting linear system is singular or too badly
  conditioned to be solved. Subclasses RuntimeError.

Closest-point refinement never raises on non-convergence; it logs and
returns the best candidate found.
"""


class CAGDError(Exception):
    """Base class for all kernel errors."""


class InputValidationError(CAGDError, ValueError):
    """Raised when an input violates a precondition of an operation."""


class SingularSystemError(CAGDError, RuntimeError):
    """Raised when a fitting system cannot be solved reliably."""
