"""
Exact rational primitives.

Circular arcs are the classic example of a shape that polynomial splines
can only approximate but rational ones represent exactly. An arc is split
into pieces of at most 90 degrees; each piece is a rational quadratic with
end weights 1 and middle weight cos(sweep / 2), whose middle control point
is the intersection of the end tangents (Piegl & Tiller, Algorithm A7.1).

The arcs lie in the plane z = center.z and run counterclockwise.
"""

import math
import numpy as np

from ..core.errors import InputValidationError
from ..core.vector import PointLike, as_vector
from ..discretization.knot_vector import KnotVector
from .nurbs import NURBSCurve


def make_nurbs_arc(radius: float = 1.0,
                   center: PointLike = (0.0, 0.0, 0.0),
                   start_angle: float = 0.0,
                   end_angle: float = np.pi / 2) -> NURBSCurve:
    """
    Create a NURBS curve representing a circular arc.

    Parameters:
        radius: Arc radius
        center: Center coordinates
        start_angle: Starting angle in radians
        end_angle: Ending angle in radians, start_angle < end_angle <= start_angle + 2*pi

    Returns:
        Degree 2 NURBSCurve on [0, 1]
    """
    if radius <= 0.0:
        raise InputValidationError("Arc radius must be positive.")
    sweep = end_angle - start_angle
    if sweep <= 0.0 or sweep > 2.0 * np.pi + 1e-12:
        raise InputValidationError("Arc sweep must be in (0, 2*pi].")

    c = as_vector(center).to_array()
    n_arcs = max(1, math.ceil(sweep / (np.pi / 2) - 1e-12))
    d_theta = sweep / n_arcs
    w_mid = math.cos(d_theta / 2.0)

    def on_circle(angle: float, r: float) -> np.ndarray:
        return c + r * np.array([math.cos(angle), math.sin(angle), 0.0])

    points = [on_circle(start_angle, radius)]
    weights = [1.0]
    for k in range(n_arcs):
        a0 = start_angle + k * d_theta
        # Middle point: intersection of the end tangents of the piece
        points.append(on_circle(a0 + d_theta / 2.0, radius / w_mid))
        weights.append(w_mid)
        points.append(on_circle(a0 + d_theta, radius))
        weights.append(1.0)

    knots = [0.0, 0.0, 0.0]
    for k in range(1, n_arcs):
        knots.extend([k / n_arcs, k / n_arcs])
    knots.extend([1.0, 1.0, 1.0])

    return NURBSCurve(KnotVector(np.array(knots), 2), np.array(points), np.array(weights))


def make_nurbs_circle(radius: float = 1.0,
                      center: PointLike = (0.0, 0.0, 0.0)) -> NURBSCurve:
    """
    Create a NURBS curve representing a full circle.

    Uses the standard 9-control-point representation with degree 2,
    parameterized from 0 to 1 counterclockwise from the positive x-axis.
    """
    return make_nurbs_arc(radius, center, 0.0, 2.0 * np.pi)
