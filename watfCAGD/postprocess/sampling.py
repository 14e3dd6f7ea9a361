"""
Curve sampling.

Evaluates a curve on a uniform grid in parametric space. Used to seed the
closest-point search and for quick tessellation of curves.

Key functions:
- sample_curve: parameters and points on a uniform grid
- nearest_sample: the sample closest to a query point
"""

import numpy as np
from typing import Tuple

from ..core.errors import InputValidationError
from ..geometry.curve import Curve


def sample_curve(curve: Curve, n_samples: int = 50) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample a curve uniformly in parametric space.

    Parameters:
        curve: Any curve variant
        n_samples: Number of samples (at least 2)

    Returns:
        (params, points) where:
        - params: Array of shape (n_samples,)
        - points: Array of shape (n_samples, 3)
    """
    if n_samples < 2:
        raise InputValidationError("Need at least 2 samples")

    lo, hi = curve.domain
    params = np.linspace(lo, hi, n_samples)
    points = np.array([curve.eval_point(t) for t in params])
    return params, points


def nearest_sample(curve: Curve, point: np.ndarray,
                   n_samples: int = 50) -> Tuple[float, np.ndarray]:
    """
    Find the uniform sample of the curve nearest to a point.

    Parameters:
        curve: Any curve variant
        point: Query point, shape (3,)
        n_samples: Number of samples

    Returns:
        (param, sample_point)
    """
    params, points = sample_curve(curve, n_samples)
    distances = np.linalg.norm(points - np.asarray(point, dtype=np.float64), axis=1)
    k = int(np.argmin(distances))
    return float(params[k]), points[k]
