"""
Gauss-Legendre quadrature for numerical integration.

Gauss quadrature provides optimal polynomial integration:
n points integrate exactly polynomials up to degree 2n-1.

Arc length of a NURBS curve integrates |C'(u)|, which is not a polynomial,
so curves use a few more points than the degree alone would suggest and
integrate span by span (the integrand is smooth inside each knot span).

The reference domain is [0, 1]. Standard Gauss points on [-1, 1] are
mapped accordingly.

Usage:
    points, weights = gauss_legendre_1d(n)  # 1D quadrature on [0,1]
    value = integrate_over_spans(f, [(0.0, 0.5), (0.5, 1.0)], n)
"""

import numpy as np
from typing import Callable, Iterable, Tuple
from functools import lru_cache


@lru_cache(maxsize=16)
def gauss_legendre_1d(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gauss-Legendre quadrature points and weights on [0, 1].

    Parameters:
        n: Number of quadrature points

    Returns:
        (points, weights) where:
        - points: Array of n quadrature points in [0, 1]
        - weights: Array of n quadrature weights (sum to 1)
    """
    if n < 1:
        raise ValueError("Need at least 1 quadrature point")

    points_std, weights_std = np.polynomial.legendre.leggauss(n)

    # Map to [0, 1]: x = (xi + 1) / 2, dx = 1/2 * dxi
    points = 0.5 * (points_std + 1.0)
    weights = 0.5 * weights_std

    points.setflags(write=False)
    weights.setflags(write=False)
    return points, weights


def integrate_over_spans(f: Callable[[float], float],
                         spans: Iterable[Tuple[float, float]],
                         n: int) -> float:
    """
    Integrate a scalar function piecewise over a sequence of intervals.

    Parameters:
        f: Integrand
        spans: (start, end) intervals, e.g. KnotVector.elements
        n: Gauss points per interval

    Returns:
        Sum of the n-point Gauss-Legendre integrals over all spans
    """
    points, weights = gauss_legendre_1d(n)
    total = 0.0
    for start, end in spans:
        h = end - start
        for xi, w in zip(points, weights):
            total += w * h * f(start + h * xi)
    return float(total)
