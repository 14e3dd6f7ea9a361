"""
Closest-point queries (inverse evaluation).

Given a point P and a curve C, find the parameter t minimizing |C(t) - P|.
Each curve variant uses the strategy that suits it:

Line:
    Closed-form projection onto the supporting line, clamped to [0, 1].

Polyline:
    Up to 4 vertices, every segment is tested (brute force). Above that, the
    vertex list is split at its middle vertex into two overlapping halves;
    the half whose parametric midpoint is nearer to P is kept and split
    again until a single segment remains, which is then solved in closed
    form. This assumes distance varies monotonically along the polyline,
    which holds for convex-ish polylines but not for every non-convex one:
    the result is an approximation, not a guaranteed global minimum. Use
    brute_force_polyline_closest when an exact answer is required.

NURBS:
    The curve is sampled uniformly and the nearest sample seeds a bounded
    minimization of f(u) = |C(u) - P|^2 with gradient
    f'(u) = 2 (C(u) - P) . C'(u). If the minimizer does not converge, the
    better of the seed and the last iterate is returned.
"""

import logging
import numpy as np
from typing import Optional, Tuple

from ..core.tolerance import Tolerance, resolve_tolerance
from ..core.vector import Vector3, PointLike, as_vector
from ..geometry.curve import Curve
from ..geometry.line import Line
from ..geometry.nurbs import NURBSCurve
from ..geometry.polyline import Polyline
from ..postprocess.sampling import nearest_sample
from ..solver.minimizer import ObjectiveFunction, minimize

logger = logging.getLogger(__name__)

BRUTE_FORCE_VERTEX_LIMIT = 4
MIN_SAMPLES = 50
SAMPLES_PER_CONTROL_POINT = 10


class SquaredDistanceObjective(ObjectiveFunction):
    """f(u) = |C(u) - P|^2 for a fixed curve and point."""

    def __init__(self, curve: NURBSCurve, point: np.ndarray):
        self.curve = curve
        self.point = np.asarray(point, dtype=np.float64)

    def value(self, x: np.ndarray) -> float:
        d = self.curve.eval_point(float(x[0])) - self.point
        return float(np.dot(d, d))

    def gradient(self, x: np.ndarray) -> np.ndarray:
        C, dC = self.curve.eval_derivatives(float(x[0]), 1)
        return np.array([2.0 * np.dot(C - self.point, dC)])


def line_closest(line: Line, point: PointLike) -> Tuple[float, np.ndarray]:
    """Clamped projection of point onto a line segment."""
    t = min(max(line.project_parameter(point), 0.0), 1.0)
    return t, line.eval_point(t)


def brute_force_polyline_closest(polyline: Polyline,
                                 point: PointLike) -> Tuple[float, np.ndarray]:
    """Test every segment and keep the nearest candidate."""
    p = as_vector(point).to_array()
    best_t, best_pt, best_dist = 0.0, None, np.inf

    for i, segment in enumerate(polyline.segments()):
        s, candidate = line_closest(segment, p)
        dist = np.linalg.norm(candidate - p)
        if dist < best_dist:
            best_t, best_pt, best_dist = i + s, candidate, dist

    return best_t, best_pt


def divide_and_conquer_polyline_closest(polyline: Polyline,
                                        point: PointLike) -> Tuple[float, np.ndarray]:
    """
    Narrow the vertex window by halves until one segment remains.

    Both halves keep the shared middle vertex, so every window has at least
    two vertices and strictly shrinks while it has more than two.
    """
    p = as_vector(point).to_array()
    start, stop = 0, polyline.n_vertices

    while stop - start > 2:
        mid = start + (stop - start) // 2
        left = polyline.sub_polyline(start, mid + 1)
        right = polyline.sub_polyline(mid, stop)

        left_dist = np.linalg.norm(left.eval_point(0.5 * left.domain[1]) - p)
        right_dist = np.linalg.norm(right.eval_point(0.5 * right.domain[1]) - p)

        if left_dist > right_dist:
            start = mid
        else:
            stop = mid + 1

    s, closest = line_closest(polyline.segment_at(start), p)
    return start + s, closest


def polyline_closest(polyline: Polyline, point: PointLike) -> Tuple[float, np.ndarray]:
    if polyline.n_vertices <= BRUTE_FORCE_VERTEX_LIMIT:
        return brute_force_polyline_closest(polyline, point)
    return divide_and_conquer_polyline_closest(polyline, point)


def nurbs_closest(curve: NURBSCurve, point: PointLike,
                  tol: Optional[Tolerance] = None) -> Tuple[float, np.ndarray]:
    """Sampled seed refined by bounded minimization of the squared distance."""
    tol = resolve_tolerance(tol)
    p = as_vector(point).to_array()

    n_samples = max(MIN_SAMPLES, SAMPLES_PER_CONTROL_POINT * curve.n_control_points)
    u0, seed_pt = nearest_sample(curve, p, n_samples)
    seed_value = float(np.dot(seed_pt - p, seed_pt - p))
    if seed_value <= tol.epsilon * tol.epsilon:
        return u0, seed_pt

    objective = SquaredDistanceObjective(curve, p)
    result = minimize(objective, [u0], bounds=[curve.domain], tol=tol)

    u = float(result.x[0])
    if not result.converged:
        logger.warning("Closest point refinement did not converge (%s); "
                       "returning best candidate", result.message)
        if result.value > seed_value:
            return u0, seed_pt

    return u, curve.eval_point(u)


def _closest(curve: Curve, point: PointLike,
             tol: Optional[Tolerance]) -> Tuple[float, np.ndarray]:
    if isinstance(curve, Line):
        return line_closest(curve, point)
    if isinstance(curve, Polyline):
        return polyline_closest(curve, point)
    if isinstance(curve, NURBSCurve):
        return nurbs_closest(curve, point, tol)
    return nurbs_closest(curve.to_nurbs(), point, tol)


def closest_parameter(curve: Curve, point: PointLike,
                      tol: Optional[Tolerance] = None) -> float:
    """
    Parameter of the curve point nearest to point.

    Parameters:
        curve: Line, Polyline, NURBSCurve or any other Curve
        point: Query point
        tol: Tolerances for the iterative refinement

    Returns:
        Parameter inside curve.domain
    """
    return _closest(curve, point, tol)[0]


def closest_point(curve: Curve, point: PointLike,
                  tol: Optional[Tolerance] = None) -> Vector3:
    """
    Curve point nearest to point.

    Parameters:
        curve: Line, Polyline, NURBSCurve or any other Curve
        point: Query point
        tol: Tolerances for the iterative refinement

    Returns:
        Closest point as Vector3
    """
    return Vector3(*_closest(curve, point, tol)[1])
