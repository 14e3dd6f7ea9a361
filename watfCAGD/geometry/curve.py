"""
Curve capability set.

Every curve variant (Line, Polyline, NURBSCurve) exposes the same small
interface so that fitting, closest-point queries and sampling can consume
any of them uniformly:

- degree: polynomial degree
- control_points: ordered control polygon (Vector3)
- weights / homogenized_points: rational weighting, (x*w, y*w, z*w, w)
- knots: clamped KnotVector
- domain: parametric interval
- point_at / eval_point: evaluation
- closest_point / closest_parameter: inverse evaluation

Curves are immutable. Derived data (knot vector, homogeneous points) is
computed once at construction and reused for the lifetime of the object;
operations such as transform or reverse return new curves.
"""

import numpy as np
from typing import List, Optional, Tuple
from abc import ABC, abstractmethod

from ..core.errors import InputValidationError
from ..core.tolerance import Tolerance, EPSILON
from ..core.vector import Vector3, PointLike, to_vectors
from ..discretization.knot_vector import KnotVector
from ..discretization.control_point import homogenize


class Curve(ABC):
    """
    Abstract base class for parametric curves.

    Subclasses store their control polygon, weights and knot vector through
    _set_representation and implement evaluation.
    """

    _control_points: np.ndarray
    _weights: np.ndarray
    _knot_vector: KnotVector
    _homogenized: np.ndarray

    def _set_representation(self, control_points: np.ndarray,
                            weights: np.ndarray, knot_vector: KnotVector):
        """Store the (read-only) spline representation of the curve."""
        control_points = np.array(control_points, dtype=np.float64)
        weights = np.array(weights, dtype=np.float64)

        if control_points.shape[0] != knot_vector.n_basis:
            raise InputValidationError(
                f"Number of control points ({control_points.shape[0]}) "
                f"must match number of basis functions ({knot_vector.n_basis})"
            )

        homogenized = homogenize(control_points, weights)
        for arr in (control_points, weights, homogenized):
            arr.setflags(write=False)

        self._control_points = control_points
        self._weights = weights
        self._knot_vector = knot_vector
        self._homogenized = homogenized

    @property
    def degree(self) -> int:
        return self._knot_vector.degree

    @property
    def knots(self) -> KnotVector:
        return self._knot_vector

    @property
    def domain(self) -> Tuple[float, float]:
        return self._knot_vector.domain

    @property
    def control_points(self) -> List[Vector3]:
        """Control polygon as a list of Vector3."""
        return to_vectors(self._control_points)

    @property
    def control_point_array(self) -> np.ndarray:
        """Control polygon as an (n, 3) array."""
        return self._control_points.copy()

    @property
    def n_control_points(self) -> int:
        return self._control_points.shape[0]

    @property
    def weights(self) -> np.ndarray:
        return self._weights.copy()

    @property
    def homogenized_points(self) -> np.ndarray:
        """Homogeneous control points, shape (n, 4)."""
        return self._homogenized

    def _check_parameter(self, t: float) -> float:
        """Validate t against the domain, snapping round-off at the ends."""
        lo, hi = self.domain
        if t < lo - EPSILON or t > hi + EPSILON:
            raise InputValidationError(
                f"Parameter is outside the domain {lo:.1f} to {hi:.1f} (got {t})."
            )
        return min(max(t, lo), hi)

    @abstractmethod
    def eval_point(self, t: float) -> np.ndarray:
        """Evaluate the curve at t, returning a (3,) array."""

    def point_at(self, t: float) -> Vector3:
        """Evaluate the curve at t."""
        return Vector3(*self.eval_point(t))

    @abstractmethod
    def tangent_at(self, t: float) -> Vector3:
        """Unit tangent at t."""

    @abstractmethod
    def length(self) -> float:
        """Arc length of the curve."""

    @abstractmethod
    def transform(self, matrix: np.ndarray) -> "Curve":
        """Return a copy of the curve with an affine transformation applied."""

    def closest_parameter(self, point: PointLike,
                          tol: Optional[Tolerance] = None) -> float:
        """Parameter of the curve point nearest to point."""
        from ..operation.closest_point import closest_parameter
        return closest_parameter(self, point, tol)

    def closest_point(self, point: PointLike,
                      tol: Optional[Tolerance] = None) -> Vector3:
        """Curve point nearest to point."""
        from ..operation.closest_point import closest_point
        return closest_point(self, point, tol)

    def to_nurbs(self):
        """NURBSCurve with the same knots, control points and weights."""
        from .nurbs import NURBSCurve
        return NURBSCurve(self._knot_vector, self._control_points, self._weights)


def apply_transform(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Apply an affine transformation to an (n, 3) array of points.

    Parameters:
        matrix: (4, 4) homogeneous matrix or (3, 4) affine matrix

    Returns:
        Transformed points, shape (n, 3)
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.shape not in ((4, 4), (3, 4)):
        raise InputValidationError(
            f"Transformation must be a 4x4 or 3x4 matrix, got shape {matrix.shape}."
        )
    points = np.asarray(points, dtype=np.float64)
    return points @ matrix[:3, :3].T + matrix[:3, 3]
