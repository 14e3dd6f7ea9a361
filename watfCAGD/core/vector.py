"""
Three-component vector value type.

Vector3 is an immutable value: every operation returns a new instance.
Equality (==) and distance comparisons are made within the default
tolerance; use Vector3.equals with an explicit Tolerance to vary it.

Numerical kernels work on numpy arrays of shape (n, 3); Vector3 is the
type exchanged at the public boundary (input points, evaluated points,
closest points). as_point_array converts between the two.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from .errors import InputValidationError
from .tolerance import Tolerance, resolve_tolerance


@dataclass(frozen=True, eq=False)
class Vector3:
    """
    Immutable 3D vector.

    Attributes:
        x, y, z: Components
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "Vector3":
        """Build a vector from 2 or 3 components (z defaults to 0)."""
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size == 2:
            return cls(values[0], values[1], 0.0)
        if values.size != 3:
            raise InputValidationError(
                f"A vector needs 2 or 3 components, got {values.size}."
            )
        return cls(values[0], values[1], values[2])

    def to_array(self) -> np.ndarray:
        """Components as a (3,) float array."""
        return np.array([self.x, self.y, self.z])

    def __array__(self, dtype=None, copy=None):
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __len__(self) -> int:
        return 3

    def __add__(self, other: "PointLike") -> "Vector3":
        other = as_vector(other)
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    __radd__ = __add__

    def __sub__(self, other: "PointLike") -> "Vector3":
        other = as_vector(other)
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __rsub__(self, other: "PointLike") -> "Vector3":
        return as_vector(other) - self

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector3":
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vector3":
        return self.reverse()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector3({self.x:g}, {self.y:g}, {self.z:g})"

    def dot(self, other: "PointLike") -> float:
        other = as_vector(other)
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "PointLike") -> "Vector3":
        other = as_vector(other)
        return Vector3(self.y * other.z - self.z * other.y,
                       self.z * other.x - self.x * other.z,
                       self.x * other.y - self.y * other.x)

    def squared_length(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.squared_length())

    def distance_to(self, other: "PointLike") -> float:
        return (self - other).length()

    def is_zero(self, tol: Optional[Tolerance] = None) -> bool:
        """True if the vector length is below the distance tolerance."""
        return self.length() <= resolve_tolerance(tol).max_tolerance

    def unitize(self) -> "Vector3":
        """
        Return the vector scaled to unit length.

        Raises:
            InputValidationError: if the vector has zero length
        """
        length = self.length()
        if length == 0.0:
            raise InputValidationError("Vector must have non-zero length to be unitized.")
        return self / length

    def amplify(self, length: float) -> "Vector3":
        """Return a vector with the same direction and the given length."""
        return self.unitize() * length

    def reverse(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def lerp(self, other: "PointLike", t: float) -> "Vector3":
        """Linear combination (1 - t) * self + t * other."""
        return self * (1.0 - t) + as_vector(other) * t

    def equals(self, other: "PointLike", tol: Optional[Tolerance] = None) -> bool:
        """Component-wise equality within the distance tolerance."""
        other = as_vector(other)
        eps = resolve_tolerance(tol).max_tolerance
        return (abs(self.x - other.x) <= eps
                and abs(self.y - other.y) <= eps
                and abs(self.z - other.z) <= eps)


ZERO = Vector3(0.0, 0.0, 0.0)
X_AXIS = Vector3(1.0, 0.0, 0.0)
Y_AXIS = Vector3(0.0, 1.0, 0.0)
Z_AXIS = Vector3(0.0, 0.0, 1.0)

PointLike = Union[Vector3, Sequence[float], np.ndarray]


def as_vector(point: PointLike) -> Vector3:
    """Coerce a Vector3 or a 2/3-component sequence to Vector3."""
    if isinstance(point, Vector3):
        return point
    return Vector3.from_array(point)


def as_point_array(points: Iterable[PointLike]) -> np.ndarray:
    """
    Coerce a collection of points to a float array of shape (n, 3).

    2D points are lifted to the z = 0 plane.
    """
    arr = np.array([np.asarray(p, dtype=np.float64) for p in points], dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] == 0:
        raise InputValidationError("Expected a non-empty collection of points.")
    if arr.shape[1] == 2:
        arr = np.hstack([arr, np.zeros((arr.shape[0], 1))])
    elif arr.shape[1] != 3:
        raise InputValidationError(
            f"Points must have 2 or 3 components, got {arr.shape[1]}."
        )
    return arr


def to_vectors(arr: np.ndarray) -> list:
    """Convert an (n, 3) array to a list of Vector3."""
    return [Vector3(*row) for row in np.asarray(arr, dtype=np.float64)]


def are_three_points_collinear(a: PointLike, b: PointLike, c: PointLike,
                               tol: Optional[Tolerance] = None) -> bool:
    """
    Check whether three points lie on a common line.

    Uses the area of the triangle (a, b, c): the points are collinear when
    twice the area is below the distance tolerance.
    """
    tol = resolve_tolerance(tol)
    pa, pb, pc = as_vector(a), as_vector(b), as_vector(c)
    area2 = (pb - pa).cross(pc - pa).length()
    return area2 <= tol.max_tolerance
