"""
NURBS (Non-Uniform Rational B-Spline) curve representation.

NURBS extend B-splines by introducing weights for each control point,
enabling exact representation of conic sections (circles, ellipses, etc.).

A NURBS curve point is computed as:

    C(u) = sum_i (N_i(u) * w_i * P_i) / sum_i (N_i(u) * w_i)

where:
- N_i are B-spline basis functions
- w_i are weights (positive real numbers)
- P_i are control points

The rational basis functions R_i(u) = N_i(u) * w_i / sum_j N_j(u) * w_j
form a partition of unity and are non-negative.
"""

import math
import numpy as np
from typing import Optional, Sequence, Tuple

from ..core.errors import InputValidationError
from ..core.vector import Vector3, PointLike, as_point_array
from ..discretization.knot_vector import KnotVector, make_open_knot_vector
from ..quadrature.gauss import integrate_over_spans
from .bspline import BSplineBasis
from .curve import Curve, apply_transform


class NURBSCurve(Curve):
    """
    NURBS curve in 3D space.

    A NURBS curve C(u) is defined by:
    - Knot vector defining the parametric domain
    - Control points P_i in R^3 (2D input is lifted to z = 0)
    - Weights w_i > 0
    """

    def __init__(self, knot_vector: KnotVector,
                 control_points: Sequence[PointLike],
                 weights: Optional[Sequence[float]] = None):
        """
        Initialize a NURBS curve.

        Parameters:
            knot_vector: KnotVector defining the basis
            control_points: n points where n = number of basis functions
            weights: Array of shape (n,), defaults to 1.0 (B-spline)
        """
        if knot_vector.degree < 1:
            raise InputValidationError("A NURBS curve must have degree of at least 1.")

        points = as_point_array(control_points)
        if weights is None:
            weights = np.ones(points.shape[0])
        elif len(weights) != points.shape[0]:
            raise InputValidationError("Weights array length must match number of control points")

        self._set_representation(points, weights, knot_vector)
        self._basis = BSplineBasis(knot_vector)

    @classmethod
    def from_points(cls, control_points: Sequence[PointLike], degree: int,
                    weights: Optional[Sequence[float]] = None) -> "NURBSCurve":
        """
        Build a clamped uniform curve on [0, 1] from a control polygon.

        Parameters:
            control_points: At least degree + 1 points
            degree: Polynomial degree
            weights: Optional weights
        """
        points = as_point_array(control_points)
        if points.shape[0] < degree + 1:
            raise InputValidationError(
                f"A degree {degree} curve needs at least {degree + 1} control points, "
                f"got {points.shape[0]}."
            )
        kv = make_open_knot_vector(points.shape[0], degree, domain=(0.0, 1.0))
        return cls(kv, points, weights)

    @property
    def knot_vector(self) -> KnotVector:
        return self._knot_vector

    @property
    def basis(self) -> BSplineBasis:
        return self._basis

    def eval_point(self, u: float) -> np.ndarray:
        """
        Evaluate curve at parameter value.

        Parameters:
            u: Parameter value

        Returns:
            Point coordinates as (3,) array
        """
        u = self._check_parameter(u)
        span = self._knot_vector.find_span(u)
        N = self._basis.eval(u, span)

        start = span - self.degree
        Pw_local = self._homogenized[start:start + self.degree + 1]

        Cw = np.dot(N, Pw_local)
        return Cw[:3] / Cw[3]

    def eval_derivatives(self, u: float, n_ders: int = 1) -> Tuple[np.ndarray, ...]:
        """
        Evaluate curve and derivatives at parameter value.

        Uses the formula for rational derivatives (Piegl & Tiller, Eq. 4.8).

        Parameters:
            u: Parameter value
            n_ders: Number of derivatives

        Returns:
            Tuple (C, dC/du, d²C/du², ...) of (3,) arrays
        """
        u = self._check_parameter(u)
        span = self._knot_vector.find_span(u)
        Nders = self._basis.eval_ders(u, n_ders, span)

        start = span - self.degree
        Pw_local = self._homogenized[start:start + self.degree + 1]

        # A^(k) = sum_i N_i^(k) * w_i * P_i  (numerator derivatives)
        # w^(k) = sum_i N_i^(k) * w_i        (denominator derivatives)
        Aw_ders = Nders @ Pw_local
        A_ders = Aw_ders[:, :3]
        w_ders = Aw_ders[:, 3]

        # C^(k) = (A^(k) - sum_{j=1}^{k} C(k,j) * w^(j) * C^(k-j)) / w^(0)
        C_ders = np.zeros((n_ders + 1, 3))

        for k in range(n_ders + 1):
            v = A_ders[k].copy()
            for j in range(1, k + 1):
                v -= math.comb(k, j) * w_ders[j] * C_ders[k - j]
            C_ders[k] = v / w_ders[0]

        return tuple(C_ders[k] for k in range(n_ders + 1))

    def derivative_at(self, u: float, order: int = 1) -> Vector3:
        """Derivative vector of the given order at u."""
        return Vector3(*self.eval_derivatives(u, order)[order])

    def tangent_at(self, u: float) -> Vector3:
        """Unit tangent at u."""
        return self.derivative_at(u, 1).unitize()

    def length(self, n_gauss: Optional[int] = None) -> float:
        """
        Arc length by Gauss-Legendre quadrature of |C'(u)| over each knot span.

        Parameters:
            n_gauss: Points per span; defaults to 2 * (p + 1)
        """
        if n_gauss is None:
            n_gauss = 2 * (self.degree + 1)

        def speed(u: float) -> float:
            return float(np.linalg.norm(self.eval_derivatives(u, 1)[1]))

        return integrate_over_spans(speed, self._knot_vector.elements, n_gauss)

    def reverse(self) -> "NURBSCurve":
        """Same curve traversed in the opposite direction."""
        return NURBSCurve(self._knot_vector.reversed(),
                          self._control_points[::-1],
                          self._weights[::-1])

    def transform(self, matrix: np.ndarray) -> "NURBSCurve":
        """Apply an affine transformation to the control points."""
        return NURBSCurve(self._knot_vector,
                          apply_transform(matrix, self._control_points),
                          self._weights)

    def __repr__(self) -> str:
        return (f"NURBSCurve(degree={self.degree}, "
                f"n_control_points={self.n_control_points}, domain={self.domain})")
