"""
Parameter assignment for fitting.

Before a curve can be fitted through (or near) points Q_0 .. Q_{N-1},
each point gets a parameter t_k in [0, 1]:

- chord length:  t_k - t_{k-1} proportional to |Q_k - Q_{k-1}|
- centripetal:   t_k - t_{k-1} proportional to sqrt(|Q_k - Q_{k-1}|)

The centripetal variant gives better results when the data turns sharply.
"""

import numpy as np
from typing import Optional

from ..core.errors import InputValidationError
from ..core.tolerance import Tolerance, resolve_tolerance


def curve_parameters(points: np.ndarray, centripetal: bool = False,
                     tol: Optional[Tolerance] = None) -> np.ndarray:
    """
    Compute fitting parameters for an ordered point sequence.

    Parameters:
        points: Array of shape (N, 3), N >= 2
        centripetal: Use the centripetal instead of the chord-length scheme
        tol: Tolerances; consecutive points closer than tol.max_tolerance
             are rejected

    Returns:
        Array of N parameters with t_0 = 0 and t_{N-1} = 1
    """
    tol = resolve_tolerance(tol)
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        raise InputValidationError("At least two points are needed to assign parameters.")

    chords = np.linalg.norm(np.diff(points, axis=0), axis=1)
    coincident = np.nonzero(chords <= tol.max_tolerance)[0]
    if len(coincident) > 0:
        i = int(coincident[0])
        raise InputValidationError(
            f"Points {i} and {i + 1} are coincident; fitting needs distinct consecutive points."
        )

    if centripetal:
        chords = np.sqrt(chords)

    cumulative = np.concatenate([[0.0], np.cumsum(chords)])
    params = cumulative / cumulative[-1]
    params[-1] = 1.0
    return params
