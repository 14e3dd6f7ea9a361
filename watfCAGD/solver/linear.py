"""
Dense linear solves for the fitting engine.

Interpolation and approximation both solve one coefficient matrix A against
several right-hand sides (one per coordinate axis). The matrix is factored
once with LU and the factorization is reused for every column of the
right-hand side, so the x, y and z control-point coordinates come from the
same elimination.

Singular or badly conditioned systems are reported as SingularSystemError
instead of returning garbage control points.
"""

import logging
import numpy as np
from scipy.linalg import lu_factor, lu_solve

from ..core.errors import SingularSystemError

logger = logging.getLogger(__name__)

# Reciprocal condition number below which a system is treated as singular
RCOND_LIMIT = 1e3 * np.finfo(np.float64).eps


class FactoredSystem:
    """
    LU factorization of a square coefficient matrix.

    Usage:
        system = FactoredSystem(A)
        X = system.solve(B)   # B of shape (n,) or (n, k)
    """

    def __init__(self, matrix: np.ndarray):
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise SingularSystemError(
                f"Coefficient matrix must be square, got shape {matrix.shape}."
            )
        if not np.all(np.isfinite(matrix)):
            raise SingularSystemError("Coefficient matrix contains non-finite entries.")

        rcond = 1.0 / np.linalg.cond(matrix) if matrix.size else 0.0
        if not rcond > RCOND_LIMIT:
            raise SingularSystemError(
                f"Coefficient matrix of size {matrix.shape[0]} is singular or "
                f"ill-conditioned (rcond={rcond:.3e})."
            )

        self._lu, self._piv = lu_factor(matrix, check_finite=False)
        self.size = matrix.shape[0]
        logger.debug("Factored %dx%d system (rcond=%.3e)", self.size, self.size, rcond)

    def solve(self, rhs: np.ndarray) -> np.ndarray:
        """Solve A X = rhs for one or several right-hand sides."""
        rhs = np.asarray(rhs, dtype=np.float64)
        if rhs.shape[0] != self.size:
            raise SingularSystemError(
                f"Right-hand side has {rhs.shape[0]} rows, expected {self.size}."
            )
        return lu_solve((self._lu, self._piv), rhs, check_finite=False)


def solve_shared(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Factor matrix once and solve for every column of rhs."""
    return FactoredSystem(matrix).solve(rhs)
