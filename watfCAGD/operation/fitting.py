"""
Curve fitting from point data.

Three constructions produce clamped NURBS curves from an ordered point list
Q_0 .. Q_{N-1}:

interpolated_curve:
    Global interpolation (NURBS Book A9.1). Parameters by chord length,
    knots by averaging, one collocation row per point. Optional end
    tangents add two rows fixing C'(0) and C'(1).

bezier_interpolation:
    Piecewise cubic Bezier interpolation. Each segment depends only on its
    two end points and their local tangent estimates, so adjacent segments
    meet with collinear flanking control points (G1) without a global solve.

approximate_curve:
    Least-squares approximation (NURBS Book A9.7). End points are
    interpolated, interior control points minimize the squared distance to
    the interior samples at their parameters.

All linear systems are LU-factored once and solved for the x, y and z
columns together.
"""

import logging
import numpy as np
from typing import List, Optional, Sequence

from ..core.errors import InputValidationError
from ..core.tolerance import Tolerance, resolve_tolerance
from ..core.vector import PointLike, as_point_array, as_vector, are_three_points_collinear
from ..discretization.knot_vector import (
    KnotVector,
    make_interpolation_knot_vector,
    make_approximation_knot_vector,
)
from ..geometry.bspline import eval_basis_row
from ..geometry.nurbs import NURBSCurve
from ..solver.linear import FactoredSystem
from .parametrization import curve_parameters

logger = logging.getLogger(__name__)


def _check_degree(degree: int):
    if degree < 1:
        raise InputValidationError(f"Degree must be at least 1, got {degree}.")


def _check_tangent(tangent: PointLike, name: str, tol: Tolerance) -> np.ndarray:
    vec = as_vector(tangent)
    if vec.is_zero(tol):
        raise InputValidationError(f"The {name} tangent must have non-zero length.")
    return vec.to_array()


def collocation_matrix(kv: KnotVector, params: Sequence[float]) -> np.ndarray:
    """
    Basis values of every function at every parameter.

    Returns:
        Array of shape (len(params), kv.n_basis); row k holds N_i(t_k)
    """
    return np.array([eval_basis_row(kv, float(t)) for t in params])


def interpolation_system(Q: np.ndarray,
                         params: np.ndarray,
                         kv: KnotVector,
                         start_tangent: Optional[np.ndarray] = None,
                         end_tangent: Optional[np.ndarray] = None):
    """
    Assemble the square interpolation system A P = rhs.

    One collocation row per point; with tangents, the rows

        -P_0 + P_1         = u_{p+1} / p * T0
        -P_{n-1} + P_n     = (1 - u_{m-p-1}) / p * T1

    are inserted after the first and before the last point row.

    Returns:
        (A, rhs) with A of shape (n, n) and rhs of shape (n, 3)
    """
    A = collocation_matrix(kv, params)
    if start_tangent is None:
        return A, Q

    p = kv.degree
    n = kv.n_basis
    start_row = np.zeros(n)
    start_row[:2] = [-1.0, 1.0]
    end_row = np.zeros(n)
    end_row[-2:] = [-1.0, 1.0]

    A = np.vstack([A[:1], start_row, A[1:-1], end_row, A[-1:]])
    rhs = np.vstack([
        Q[:1],
        kv.knots[p + 1] / p * start_tangent,
        Q[1:-1],
        (1.0 - kv.knots[-p - 2]) / p * end_tangent,
        Q[-1:],
    ])
    return A, rhs


def interpolated_curve(points: Sequence[PointLike],
                       degree: int,
                       start_tangent: Optional[PointLike] = None,
                       end_tangent: Optional[PointLike] = None,
                       centripetal: bool = False,
                       tol: Optional[Tolerance] = None) -> NURBSCurve:
    """
    Interpolate points with a clamped B-spline of the given degree.

    Without tangents the curve has N control points. With both tangents it
    has N + 2 and satisfies C'(0) = T0 and C'(1) = T1 (see
    interpolation_system). End tangents need degree >= 2: at degree 1 the
    averaged knot vector has a triple end knot and the system is singular.

    Parameters:
        points: Points to interpolate, at least degree + 1
        degree: Polynomial degree (>= 1, >= 2 with tangents)
        start_tangent: Derivative at the start, must be given with end_tangent
        end_tangent: Derivative at the end
        centripetal: Use centripetal instead of chord-length parameters
        tol: Tolerances

    Returns:
        NURBSCurve with unit weights passing through every point
    """
    tol = resolve_tolerance(tol)
    _check_degree(degree)
    Q = as_point_array(points)
    n_points = len(Q)
    if n_points < degree + 1:
        raise InputValidationError(
            f"You must supply at least degree + 1 points: got {n_points} points for degree {degree}."
        )

    if (start_tangent is None) != (end_tangent is None):
        raise InputValidationError("Start and end tangents must be given together.")
    with_tangents = start_tangent is not None
    T0 = T1 = None
    if with_tangents:
        if degree < 2:
            raise InputValidationError(f"End tangents require degree >= 2, got {degree}.")
        T0 = _check_tangent(start_tangent, "start", tol)
        T1 = _check_tangent(end_tangent, "end", tol)

    params = curve_parameters(Q, centripetal, tol)
    kv = make_interpolation_knot_vector(params, degree, with_tangents)
    A, rhs = interpolation_system(Q, params, kv, T0, T1)

    logger.debug("Interpolating %d points with degree %d (%d control points%s)",
                 n_points, degree, kv.n_basis, ", end tangents" if with_tangents else "")

    P = FactoredSystem(A).solve(rhs)
    return NURBSCurve(kv, P)


def _bezier_tangents(Q: np.ndarray, tol: Tolerance) -> np.ndarray:
    chords = np.diff(Q, axis=0)
    lengths = np.linalg.norm(chords, axis=1)
    units = chords / lengths[:, None]

    T = np.empty_like(Q)
    T[0] = units[0]
    T[-1] = units[-1]
    for i in range(1, len(Q) - 1):
        blended = units[i - 1] + units[i]
        norm = np.linalg.norm(blended)
        # Reversal: the two chords cancel
        T[i] = blended / norm if norm > tol.max_tolerance else units[i - 1]
    return T


def bezier_interpolation(points: Sequence[PointLike],
                         tol: Optional[Tolerance] = None) -> List[NURBSCurve]:
    """
    Interpolate points with a chain of cubic Bezier curves.

    Segment i runs from Q_i to Q_{i+1} with control points

        Q_i,  Q_i + T_i * L_i / 3,  Q_{i+1} - T_{i+1} * L_i / 3,  Q_{i+1}

    where L_i is the chord length and T_i the unit tangent estimate at Q_i.
    Both segments meeting at Q_i use the same T_i, so the last two control
    points of one segment and the second control point of the next lie on
    one line.

    Parameters:
        points: At least 2 points, consecutive points distinct
        tol: Tolerances

    Returns:
        List of N - 1 cubic NURBSCurve segments
    """
    tol = resolve_tolerance(tol)
    Q = as_point_array(points)
    if len(Q) < 2:
        raise InputValidationError("Bezier interpolation needs at least 2 points.")
    # Rejects coincident consecutive points
    curve_parameters(Q, tol=tol)

    T = _bezier_tangents(Q, tol)
    segments = []
    for i in range(len(Q) - 1):
        third = np.linalg.norm(Q[i + 1] - Q[i]) / 3.0
        ctrl = np.array([
            Q[i],
            Q[i] + T[i] * third,
            Q[i + 1] - T[i + 1] * third,
            Q[i + 1],
        ])
        segments.append(NURBSCurve.from_points(ctrl, 3))

    logger.debug("Built %d Bezier segments from %d points", len(segments), len(Q))
    return segments


def _all_collinear(Q: np.ndarray, tol: Tolerance) -> bool:
    return all(are_three_points_collinear(Q[0], Q[k], Q[-1], tol)
               for k in range(1, len(Q) - 1))


def approximate_curve(points: Sequence[PointLike],
                      degree: int,
                      n_control_points: Optional[int] = None,
                      centripetal: bool = False,
                      tol: Optional[Tolerance] = None) -> NURBSCurve:
    """
    Least-squares approximation of points by a clamped B-spline.

    With n control points and m + 1 samples, P_0 = Q_0 and P_{n-1} = Q_m
    are fixed and P_1 .. P_{n-2} solve the normal equations

        (N^T N) P = R,   R_i = sum_k N_i(t_k) R_k
        R_k = Q_k - N_0(t_k) Q_0 - N_{n-1}(t_k) Q_m,   k = 1 .. m-1

    Parameters:
        points: Sample points
        degree: Polynomial degree (>= 1)
        n_control_points: Control points of the result, degree + 1 <= n <= N.
            Defaults to N - 1; N reduces to interpolation.
        centripetal: Use centripetal instead of chord-length parameters
        tol: Tolerances

    Returns:
        NURBSCurve with n_control_points control points
    """
    tol = resolve_tolerance(tol)
    _check_degree(degree)
    Q = as_point_array(points)
    n_points = len(Q)

    n = n_points - 1 if n_control_points is None else int(n_control_points)
    if n == n_points:
        return interpolated_curve(Q, degree, centripetal=centripetal, tol=tol)
    if n > n_points:
        raise InputValidationError(
            f"Cannot approximate {n_points} points with {n} control points; "
            "use at most as many control points as points."
        )
    if n < degree + 1:
        raise InputValidationError(
            f"Degree {degree} needs at least {degree + 1} control points, got {n}."
        )

    params = curve_parameters(Q, centripetal, tol)
    if _all_collinear(Q, tol):
        raise InputValidationError("Points are collinear; approximation needs a non-degenerate point set.")

    kv = make_approximation_knot_vector(params, degree, n)
    P = np.empty((n, 3))
    P[0] = Q[0]
    P[-1] = Q[-1]

    if n > 2:
        full = collocation_matrix(kv, params[1:-1])
        N = full[:, 1:-1]
        Rk = Q[1:-1] - np.outer(full[:, 0], Q[0]) - np.outer(full[:, -1], Q[-1])
        P[1:-1] = FactoredSystem(N.T @ N).solve(N.T @ Rk)

    logger.debug("Approximated %d points with %d control points of degree %d",
                 n_points, n, degree)
    return NURBSCurve(kv, P)
