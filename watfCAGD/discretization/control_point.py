"""
Homogeneous control-point model.

A rational curve stores each control point P_i = (x, y, z) together with a
weight w_i > 0. Evaluation works in homogeneous (4D) space:

    P_i^w = (x * w, y * w, z * w, w)

and the 3D point is recovered by dividing by the last component. With all
weights equal to 1 the homogeneous form reduces to the polynomial
(B-spline) case.

Control points keep their insertion order: index i always refers to the
i-th basis function of the curve's knot vector.
"""

import numpy as np
from typing import Dict, Optional, Tuple
from dataclasses import dataclass

from ..core.errors import InputValidationError


@dataclass(frozen=True)
class ControlPoint:
    """
    Weighted control point.

    Attributes:
        id: Index of the control point (position in the control polygon)
        coordinates: Cartesian coordinates (x, y, z)
        weight: NURBS weight (1.0 for B-splines)
    """
    id: int
    coordinates: np.ndarray
    weight: float = 1.0

    def __post_init__(self):
        coords = np.array(self.coordinates, dtype=np.float64)
        coords.setflags(write=False)
        object.__setattr__(self, "coordinates", coords)
        if not self.weight > 0.0:
            raise InputValidationError(
                f"Control point {self.id} has weight {self.weight}; weights must be positive."
            )

    @property
    def homogeneous(self) -> np.ndarray:
        """Homogeneous coordinates (x*w, y*w, z*w, w)."""
        return np.append(self.coordinates * self.weight, self.weight)

    @property
    def x(self) -> float:
        return self.coordinates[0]

    @property
    def y(self) -> float:
        return self.coordinates[1]

    @property
    def z(self) -> float:
        return self.coordinates[2]

    def __repr__(self) -> str:
        return f"ControlPoint(id={self.id}, coord={self.coordinates}, w={self.weight})"


def create_control_points_from_array(
    coordinates: np.ndarray,
    weights: Optional[np.ndarray] = None,
) -> Dict[int, ControlPoint]:
    """
    Create ControlPoint objects from a coordinate array.

    Parameters:
        coordinates: Array of shape (n_points, 3)
        weights: Optional array of shape (n_points,), defaults to 1.0

    Returns:
        Dictionary mapping index -> ControlPoint, in insertion order
    """
    coordinates = np.asarray(coordinates, dtype=np.float64)
    n_points = coordinates.shape[0]

    if weights is None:
        weights = np.ones(n_points)

    return {
        i: ControlPoint(id=i, coordinates=coordinates[i], weight=float(weights[i]))
        for i in range(n_points)
    }


def homogenize(points: np.ndarray, weights: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Convert points and weights to homogeneous coordinates.

    Parameters:
        points: Array of shape (n, d)
        weights: Array of shape (n,), defaults to 1.0

    Returns:
        Array of shape (n, d + 1) with rows (x*w, y*w, z*w, w)
    """
    points = np.asarray(points, dtype=np.float64)
    n = points.shape[0]
    if weights is None:
        weights = np.ones(n)
    weights = np.asarray(weights, dtype=np.float64)

    if len(weights) != n:
        raise InputValidationError(
            f"Weights array length ({len(weights)}) must match number of points ({n})"
        )
    if np.any(weights <= 0):
        raise InputValidationError("All weights must be positive")

    return np.hstack([points * weights[:, None], weights[:, None]])


def dehomogenize(hpoints: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Recover Cartesian points and weights from homogeneous coordinates.

    Parameters:
        hpoints: Array of shape (n, d + 1)

    Returns:
        (points, weights) with shapes (n, d) and (n,)
    """
    hpoints = np.atleast_2d(np.asarray(hpoints, dtype=np.float64))
    weights = hpoints[:, -1]
    if np.any(weights <= 0):
        raise InputValidationError("All weights must be positive")
    return hpoints[:, :-1] / weights[:, None], weights.copy()
