"""
Polyline: piecewise-linear curve through an ordered list of vertices.

The polyline is parameterized vertex by vertex: parameter i is vertex i and
parameter i + s (0 <= s <= 1) lies on segment i. The domain is therefore
[0, n_vertices - 1], and the spline representation is the degree 1 curve
with knots {0, 0, 1, 2, ..., n-1, n-1}.

Consecutive vertices closer than the distance tolerance are merged at
construction, so every segment has non-zero length.
"""

import numpy as np
from typing import List, Optional, Sequence

from ..core.errors import InputValidationError
from ..core.tolerance import Tolerance, resolve_tolerance
from ..core.vector import Vector3, PointLike, as_point_array, to_vectors
from ..discretization.knot_vector import KnotVector
from .curve import Curve, apply_transform
from .line import Line


def clean_short_segments(vertices: np.ndarray, tol: Tolerance) -> np.ndarray:
    """Drop every vertex that coincides with its predecessor."""
    keep = [0]
    for i in range(1, len(vertices)):
        if np.linalg.norm(vertices[i] - vertices[i - 1]) > tol.max_tolerance:
            keep.append(i)
    return vertices[keep]


class Polyline(Curve):
    """
    Polyline curve of degree 1.

    Attributes:
        vertices: Cleaned vertex list (at least two distinct points)
    """

    def __init__(self, vertices: Sequence[PointLike],
                 tol: Optional[Tolerance] = None):
        tol = resolve_tolerance(tol)
        if len(vertices) < 2:
            raise InputValidationError("Insufficient points for a polyline.")

        points = clean_short_segments(as_point_array(vertices), tol)
        if len(points) < 2:
            raise InputValidationError("Insufficient points for a polyline.")

        n = len(points)
        knots = np.concatenate([[0.0], np.arange(n, dtype=np.float64), [n - 1.0]])
        self._tol = tol
        self._set_representation(points, np.ones(n), KnotVector(knots, 1))

    @property
    def vertices(self) -> List[Vector3]:
        return self.control_points

    @property
    def n_vertices(self) -> int:
        return self._control_points.shape[0]

    @property
    def segments_count(self) -> int:
        return self.n_vertices - 1

    @property
    def is_closed(self) -> bool:
        """True if the first and last vertices coincide."""
        first, last = self._control_points[0], self._control_points[-1]
        return bool(np.linalg.norm(last - first) <= self._tol.max_tolerance)

    def length(self) -> float:
        return float(np.sum(np.linalg.norm(np.diff(self._control_points, axis=0), axis=1)))

    def segments(self) -> List[Line]:
        """The polyline segments as lines."""
        return [self.segment_at(i) for i in range(self.segments_count)]

    def segment_at(self, index: int) -> Line:
        if index < 0 or index > self.segments_count - 1:
            raise InputValidationError(
                f"Segment index {index} is out of range [0, {self.segments_count - 1}]."
            )
        return Line(self._control_points[index], self._control_points[index + 1],
                    self._tol)

    def _segment_index(self, t: float) -> int:
        return min(int(t), self.segments_count - 1)

    def eval_point(self, t: float) -> np.ndarray:
        t = self._check_parameter(t)
        index = self._segment_index(t)
        s = t - index
        return (1.0 - s) * self._control_points[index] + s * self._control_points[index + 1]

    def tangent_at(self, t: float) -> Vector3:
        t = self._check_parameter(t)
        return self.segment_at(self._segment_index(t)).direction

    def reverse(self) -> "Polyline":
        return Polyline(self._control_points[::-1], self._tol)

    def transform(self, matrix: np.ndarray) -> "Polyline":
        return Polyline(apply_transform(matrix, self._control_points), self._tol)

    def sub_polyline(self, start: int, stop: int) -> "Polyline":
        """Polyline through vertices start .. stop - 1."""
        return Polyline(self._control_points[start:stop], self._tol)

    def __repr__(self) -> str:
        return " : ".join(repr(v) for v in to_vectors(self._control_points))
