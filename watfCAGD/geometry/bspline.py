"""
B-spline basis function evaluation.

B-splines are piecewise polynomial functions defined by:
1. A knot vector (non-decreasing sequence of parametric values)
2. A polynomial degree p

The i-th B-spline basis function of degree p is defined recursively:

    N_{i,0}(u) = 1 if u_i <= u < u_{i+1}, else 0

    N_{i,p}(u) = (u - u_i)/(u_{i+p} - u_i) * N_{i,p-1}(u)
               + (u_{i+p+1} - u)/(u_{i+p+1} - u_{i+1}) * N_{i+1,p-1}(u)

with the convention 0/0 = 0: a term whose knot difference vanishes
contributes nothing. This is what keeps evaluation exact at knots of
multiplicity m > 1.

Properties:
- Partition of unity: sum of all basis functions = 1
- Non-negativity: N_{i,p}(u) >= 0
- Local support: N_{i,p} is non-zero only on [u_i, u_{i+p+1})
- Smoothness: C^{p-k} at a knot of multiplicity k

Rational basis functions multiply by the control-point weights and
renormalise:

    R_i(u) = N_i(u) * w_i / sum_j N_j(u) * w_j
"""

import numpy as np
from typing import Optional
from ..discretization.knot_vector import KnotVector


def _safe_div(num: float, den: float) -> float:
    """num / den, or 0 for a zero-width knot span."""
    return 0.0 if den == 0.0 else num / den


def eval_basis_1d(kv: KnotVector, u: float,
                  span: Optional[int] = None) -> np.ndarray:
    """
    Evaluate all non-zero B-spline basis functions at a parameter value.

    Uses the Cox-de Boor algorithm optimized for evaluating only
    the p+1 non-zero basis functions at a given parameter value
    (Piegl & Tiller, Algorithm A2.2).

    Parameters:
        kv: Knot vector
        u: Parameter value
        span: Optional pre-computed span index

    Returns:
        Array of shape (p+1,) containing N_{span-p,p}(u) to N_{span,p}(u)
    """
    p = kv.degree
    knots = kv.knots

    if span is None:
        span = kv.find_span(u)

    N = np.zeros(p + 1)
    N[0] = 1.0

    left = np.zeros(p + 1)
    right = np.zeros(p + 1)

    for j in range(1, p + 1):
        left[j] = u - knots[span + 1 - j]
        right[j] = knots[span + j] - u

        saved = 0.0
        for r in range(j):
            temp = _safe_div(N[r], right[r + 1] + left[j - r])
            N[r] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        N[j] = saved

    return N


def eval_basis_ders_1d(kv: KnotVector, u: float, n_ders: int,
                       span: Optional[int] = None) -> np.ndarray:
    """
    Evaluate B-spline basis functions and derivatives at a parameter value.

    Uses the algorithm from Piegl & Tiller "The NURBS Book" (Algorithm A2.3).

    Parameters:
        kv: Knot vector
        u: Parameter value
        n_ders: Number of derivatives to compute (0 = just values)
        span: Optional pre-computed span index

    Returns:
        Array of shape (n_ders+1, p+1) where result[k, j] is the k-th derivative
        of the j-th non-zero basis function (N_{span-p+j, p}). Derivatives
        above the degree are identically zero.
    """
    p = kv.degree
    knots = kv.knots

    if span is None:
        span = kv.find_span(u)

    ders = np.zeros((n_ders + 1, p + 1))
    n_ders = min(n_ders, p)

    # ndu[j][r] = N_{span-p+r, j} (lower triangle) or knot differences (upper)
    ndu = np.zeros((p + 1, p + 1))
    ndu[0, 0] = 1.0

    left = np.zeros(p + 1)
    right = np.zeros(p + 1)

    for j in range(1, p + 1):
        left[j] = u - knots[span + 1 - j]
        right[j] = knots[span + j] - u

        saved = 0.0
        for r in range(j):
            ndu[j, r] = right[r + 1] + left[j - r]
            temp = _safe_div(ndu[r, j - 1], ndu[j, r])

            ndu[r, j] = saved + right[r + 1] * temp
            saved = left[j - r] * temp

        ndu[j, j] = saved

    for j in range(p + 1):
        ders[0, j] = ndu[j, p]

    a = np.zeros((2, p + 1))

    for r in range(p + 1):
        s1, s2 = 0, 1
        a[0, 0] = 1.0

        for k in range(1, n_ders + 1):
            d = 0.0
            rk = r - k
            pk = p - k

            if r >= k:
                a[s2, 0] = _safe_div(a[s1, 0], ndu[pk + 1, rk])
                d = a[s2, 0] * ndu[rk, pk]

            j1 = 1 if rk >= -1 else -rk
            j2 = k - 1 if r - 1 <= pk else p - r

            for j in range(j1, j2 + 1):
                a[s2, j] = _safe_div(a[s1, j] - a[s1, j - 1], ndu[pk + 1, rk + j])
                d += a[s2, j] * ndu[rk + j, pk]

            if r <= pk:
                a[s2, k] = _safe_div(-a[s1, k - 1], ndu[pk + 1, r])
                d += a[s2, k] * ndu[r, pk]

            ders[k, r] = d
            s1, s2 = s2, s1

    # Multiply by factorial factors p! / (p-k)!
    r = p
    for k in range(1, n_ders + 1):
        ders[k, :] *= r
        r *= (p - k)

    return ders


def eval_basis_row(kv: KnotVector, u: float, n_ders: int = 0) -> np.ndarray:
    """
    Evaluate the k-th derivative of every basis function at u.

    The span-local values are scattered into a row of length n_basis, which
    is the layout needed when assembling a collocation matrix.

    Parameters:
        kv: Knot vector
        u: Parameter value
        n_ders: Derivative order (0 = values)

    Returns:
        Array of shape (n_basis,)
    """
    span = kv.find_span(u)
    p = kv.degree
    row = np.zeros(kv.n_basis)
    row[span - p:span + 1] = eval_basis_ders_1d(kv, u, n_ders, span)[n_ders]
    return row


def eval_rational_basis(kv: KnotVector, weights: np.ndarray, u: float,
                        span: Optional[int] = None) -> np.ndarray:
    """
    Evaluate the non-zero rational basis functions R_{span-p..span}(u).

    Parameters:
        kv: Knot vector
        weights: Control point weights, shape (n_basis,)
        u: Parameter value
        span: Optional pre-computed span index

    Returns:
        Array of shape (p+1,), summing to 1
    """
    if span is None:
        span = kv.find_span(u)
    p = kv.degree
    Nw = eval_basis_1d(kv, u, span) * np.asarray(weights)[span - p:span + 1]
    return Nw / np.sum(Nw)


class BSplineBasis:
    """
    Encapsulates a univariate B-spline basis.

    This class bundles a knot vector with methods for basis evaluation,
    providing a cleaner interface for higher-level code.

    Attributes:
        knot_vector: The underlying KnotVector
        degree: Polynomial degree
        n_basis: Number of basis functions
    """

    def __init__(self, knot_vector: KnotVector):
        self.knot_vector = knot_vector

    @property
    def degree(self) -> int:
        return self.knot_vector.degree

    @property
    def n_basis(self) -> int:
        return self.knot_vector.n_basis

    @property
    def n_elements(self) -> int:
        return self.knot_vector.n_elements

    def eval(self, u: float, span: Optional[int] = None) -> np.ndarray:
        """Evaluate non-zero basis functions at u."""
        return eval_basis_1d(self.knot_vector, u, span)

    def eval_ders(self, u: float, n_ders: int,
                  span: Optional[int] = None) -> np.ndarray:
        """Evaluate basis functions and derivatives at u."""
        return eval_basis_ders_1d(self.knot_vector, u, n_ders, span)

    def eval_row(self, u: float, n_ders: int = 0) -> np.ndarray:
        """Evaluate all basis functions (or a derivative) at u as a full row."""
        return eval_basis_row(self.knot_vector, u, n_ders)
