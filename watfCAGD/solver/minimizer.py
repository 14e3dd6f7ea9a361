"""
Gradient-based minimization of scalar objectives.

The closest-point solver describes its problem as an ObjectiveFunction
(value and gradient) and hands it to minimize, which runs a bounded
quasi-Newton descent (scipy L-BFGS-B) from a starting guess.

Failure to converge within the iteration bound is not an error: the
result carries converged=False and the best iterate found, and the caller
decides what to do with it.
"""

import logging
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from scipy.optimize import minimize as scipy_minimize

from ..core.tolerance import Tolerance, resolve_tolerance

logger = logging.getLogger(__name__)


class ObjectiveFunction(ABC):
    """Minimum interface of an objective consumed by minimize."""

    @abstractmethod
    def value(self, x: np.ndarray) -> float:
        """Objective value at x."""

    @abstractmethod
    def gradient(self, x: np.ndarray) -> np.ndarray:
        """Gradient of the objective at x."""


@dataclass(frozen=True)
class MinimizerResult:
    """
    Outcome of a minimization.

    Attributes:
        x: Best point found
        value: Objective value at x
        converged: Whether the convergence criteria were met
        iterations: Number of iterations performed
        message: Solver status message
    """
    x: np.ndarray
    value: float
    converged: bool
    iterations: int
    message: str


def minimize(objective: ObjectiveFunction,
             x0: Sequence[float],
             bounds: Optional[Sequence[Tuple[float, float]]] = None,
             tol: Optional[Tolerance] = None,
             max_iterations: Optional[int] = None) -> MinimizerResult:
    """
    Minimize objective starting from x0.

    Iteration stops when the projected gradient norm drops below
    tol.max_tolerance or the change of the objective drops below
    tol.epsilon squared, or after max_iterations (default tol.max_iterations).
    scipy measures the objective change against max(|f|, 1), so the
    squared epsilon keeps small distances from stopping the descent early.

    Parameters:
        objective: Function to minimize
        x0: Starting point
        bounds: Optional (low, high) bounds per variable
        tol: Tolerances
        max_iterations: Iteration bound

    Returns:
        MinimizerResult
    """
    tol = resolve_tolerance(tol)
    if max_iterations is None:
        max_iterations = tol.max_iterations

    x0 = np.atleast_1d(np.asarray(x0, dtype=np.float64))
    res = scipy_minimize(
        objective.value,
        x0,
        jac=objective.gradient,
        method="L-BFGS-B",
        bounds=bounds,
        options={
            "gtol": tol.max_tolerance,
            "ftol": tol.epsilon * tol.epsilon,
            "maxiter": max_iterations,
        },
    )

    x = np.atleast_1d(np.asarray(res.x, dtype=np.float64))
    value = float(res.fun)
    if not res.success:
        logger.debug("Minimizer stopped without convergence after %d iterations: %s",
                     res.nit, res.message)

    return MinimizerResult(x=x, value=value, converged=bool(res.success),
                           iterations=int(res.nit), message=str(res.message))
