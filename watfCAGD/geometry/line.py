"""
Straight line segment.

A Line is the simplest curve variant: degree 1, two control points and the
knot vector {0, 0, 1, 1}, parameterized on [0, 1]:

    L(t) = start + t * (end - start)

Its closest point has a closed form (projection onto the supporting line,
clamped to the segment), which the polyline closest-point search reduces
to.
"""

import numpy as np
from typing import Optional

from ..core.errors import InputValidationError
from ..core.tolerance import Tolerance, resolve_tolerance
from ..core.vector import Vector3, PointLike, as_vector
from ..discretization.knot_vector import KnotVector
from .curve import Curve, apply_transform

_LINE_KNOTS = (0.0, 0.0, 1.0, 1.0)


class Line(Curve):
    """
    Line segment between two distinct points.

    Attributes:
        start: First end point
        end: Second end point
    """

    def __init__(self, start: PointLike, end: PointLike,
                 tol: Optional[Tolerance] = None):
        """
        Initialize a line.

        Raises:
            InputValidationError: if either point is not finite or the points
                coincide within tolerance
        """
        start = as_vector(start)
        end = as_vector(end)
        if (not np.all(np.isfinite(start.to_array()))
                or not np.all(np.isfinite(end.to_array()))
                or start.equals(end, tol)):
            raise InputValidationError("Inputs are not valid, or are equal")

        self._start = start
        self._end = end
        self._set_representation(np.array([start.to_array(), end.to_array()]),
                                 np.ones(2), KnotVector(np.array(_LINE_KNOTS), 1))

    @classmethod
    def from_direction(cls, start: PointLike, direction: PointLike,
                       length: float) -> "Line":
        """
        Line starting at start, running along direction for length.

        A negative length runs against the direction.
        """
        if length == 0.0:
            raise InputValidationError("Length must not be 0.0")
        start = as_vector(start)
        end = start + as_vector(direction).amplify(length)
        return cls(start, end)

    @property
    def start(self) -> Vector3:
        return self._start

    @property
    def end(self) -> Vector3:
        return self._end

    @property
    def direction(self) -> Vector3:
        """Unit vector from start to end."""
        return (self._end - self._start).unitize()

    def length(self) -> float:
        return self._start.distance_to(self._end)

    def eval_point(self, t: float) -> np.ndarray:
        t = self._check_parameter(t)
        return (1.0 - t) * self._control_points[0] + t * self._control_points[1]

    def tangent_at(self, t: float) -> Vector3:
        self._check_parameter(t)
        return self.direction

    def project_parameter(self, point: PointLike) -> float:
        """Unclamped parameter of the projection onto the infinite line."""
        p = as_vector(point)
        d = self._end - self._start
        return (p - self._start).dot(d) / d.squared_length()

    def flip(self) -> "Line":
        """Line with start and end swapped."""
        return Line(self._end, self._start)

    def extend(self, start_length: float, end_length: float) -> "Line":
        """
        Extend (or shorten, for negative values) the line at both ends.

        Parameters:
            start_length: Distance to move the start point backwards
            end_length: Distance to move the end point forwards
        """
        d = self.direction
        return Line(self._start - d * start_length, self._end + d * end_length)

    def transform(self, matrix: np.ndarray) -> "Line":
        points = apply_transform(matrix, self._control_points)
        return Line(points[0], points[1])

    def equals(self, other: "Line", tol: Optional[Tolerance] = None) -> bool:
        """True if both end points match in order."""
        tol = resolve_tolerance(tol)
        return self._start.equals(other.start, tol) and self._end.equals(other.end, tol)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Line({self._start!r}, {self._end!r})"
