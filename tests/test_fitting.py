"""
Unit tests for curve fitting: interpolation, Bezier interpolation and
least-squares approximation.
"""

import pytest
import numpy as np
from numpy.testing import assert_array_almost_equal

from watfCAGD.core.errors import InputValidationError, SingularSystemError
from watfCAGD.core.tolerance import MAX_TOLERANCE
from watfCAGD.core.vector import Vector3, are_three_points_collinear
from watfCAGD.geometry.nurbs import NURBSCurve
from watfCAGD.operation.fitting import (
    interpolated_curve,
    bezier_interpolation,
    approximate_curve,
    interpolation_system,
)
from watfCAGD.discretization.knot_vector import make_interpolation_knot_vector
from watfCAGD.solver.linear import FactoredSystem
from watfCAGD.operation.parametrization import curve_parameters


class TestCurveParameters:
    """Tests for chord-length and centripetal parameters."""

    def test_chord_length(self, fitting_points):
        params = curve_parameters(fitting_points)
        assert_array_almost_equal(params, np.array([0.0, 5.0, 9.0, 14.0, 17.0]) / 17.0)

    def test_centripetal(self, fitting_points):
        params = curve_parameters(fitting_points, centripetal=True)
        steps = np.sqrt([5.0, 4.0, 5.0, 3.0])
        expected = np.concatenate([[0.0], np.cumsum(steps)]) / np.sum(steps)
        assert_array_almost_equal(params, expected)

    def test_coincident_points(self):
        with pytest.raises(InputValidationError, match="coincident"):
            curve_parameters(np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]))


class TestInterpolatedCurve:
    """Tests for global interpolation."""

    @pytest.mark.parametrize("degree", [2, 3, 4])
    def test_interpolates_points(self, fitting_points, degree):
        curve = interpolated_curve(fitting_points, degree)

        assert isinstance(curve, NURBSCurve)
        assert curve.degree == degree
        assert curve.n_control_points == len(fitting_points)
        assert curve.control_points[0].distance_to(Vector3(*fitting_points[0])) < MAX_TOLERANCE
        assert curve.control_points[-1].distance_to(Vector3(*fitting_points[-1])) < MAX_TOLERANCE

        for point in fitting_points:
            closest = curve.closest_point(point)
            assert closest.distance_to(Vector3(*point)) < MAX_TOLERANCE

    def test_passes_through_points_at_parameters(self, fitting_points):
        curve = interpolated_curve(fitting_points, 3)
        params = curve_parameters(fitting_points)

        for t, point in zip(params, fitting_points):
            assert_array_almost_equal(curve.eval_point(t), point, decimal=10)

    def test_centripetal_interpolation(self, fitting_points):
        curve = interpolated_curve(fitting_points, 3, centripetal=True)
        params = curve_parameters(fitting_points, centripetal=True)

        for t, point in zip(params, fitting_points):
            assert_array_almost_equal(curve.eval_point(t), point, decimal=10)

    def test_with_end_tangents(self, fitting_points):
        v1 = Vector3(1.278803, 1.06885, 0.0)
        v2 = Vector3(-4.204863, -2.021209, 0.0)

        curve = interpolated_curve(fitting_points, 2, start_tangent=v1, end_tangent=v2)

        assert curve.n_control_points == len(fitting_points) + 2
        assert curve.control_points[0].distance_to(Vector3(*fitting_points[0])) < MAX_TOLERANCE
        assert curve.control_points[-1].distance_to(Vector3(*fitting_points[-1])) < MAX_TOLERANCE

        for point in fitting_points:
            closest = curve.closest_point(point)
            assert closest.distance_to(Vector3(*point)) < MAX_TOLERANCE

        assert_array_almost_equal(curve.derivative_at(0.0).to_array(), v1.to_array(), decimal=10)
        assert_array_almost_equal(curve.derivative_at(1.0).to_array(), v2.to_array(), decimal=10)

    def test_two_points_degree_one(self):
        curve = interpolated_curve([(0.0, 0.0, 0.0), (2.0, 2.0, 0.0)], 1)
        assert_array_almost_equal(curve.eval_point(0.5), [1.0, 1.0, 0.0])

    def test_too_few_points(self, fitting_points):
        with pytest.raises(InputValidationError, match="at least degree \\+ 1 points"):
            interpolated_curve(fitting_points[:3], 3)

    def test_invalid_degree(self, fitting_points):
        with pytest.raises(InputValidationError):
            interpolated_curve(fitting_points, 0)

    def test_coincident_points(self):
        pts = [(0, 0, 0), (1, 1, 0), (1, 1, 0), (2, 0, 0)]
        with pytest.raises(InputValidationError):
            interpolated_curve(pts, 2)

    def test_single_tangent(self, fitting_points):
        with pytest.raises(InputValidationError):
            interpolated_curve(fitting_points, 2, start_tangent=(1.0, 0.0, 0.0))

    def test_zero_tangent(self, fitting_points):
        with pytest.raises(InputValidationError, match="non-zero length"):
            interpolated_curve(fitting_points, 2, start_tangent=(0.0, 0.0, 0.0),
                               end_tangent=(1.0, 0.0, 0.0))

    def test_tangents_need_degree_two(self, fitting_points):
        with pytest.raises(InputValidationError, match="degree >= 2"):
            interpolated_curve(fitting_points, 1, start_tangent=(1.0, 0.0, 0.0),
                               end_tangent=(0.0, 1.0, 0.0))

    def test_degree_one_tangent_system_is_singular(self, fitting_points):
        params = curve_parameters(fitting_points)
        kv = make_interpolation_knot_vector(params, 1, with_tangents=True)
        A, rhs = interpolation_system(fitting_points, params, kv,
                                      np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0]))

        assert A.shape == (len(fitting_points) + 2, len(fitting_points) + 2)
        assert rhs.shape == (len(fitting_points) + 2, 3)
        with pytest.raises(SingularSystemError):
            FactoredSystem(A)

    def test_tangent_system_rows(self, fitting_points):
        params = curve_parameters(fitting_points)
        kv = make_interpolation_knot_vector(params, 3, with_tangents=True)
        T0 = np.array([1.0, 1.0, 0.0])
        T1 = np.array([-4.0, -2.0, 0.0])
        A, rhs = interpolation_system(fitting_points, params, kv, T0, T1)

        assert_array_almost_equal(A[1, :2], [-1.0, 1.0])
        assert_array_almost_equal(A[-2, -2:], [-1.0, 1.0])
        assert_array_almost_equal(rhs[1], kv.knots[4] / 3 * T0)
        assert_array_almost_equal(rhs[-2], (1.0 - kv.knots[-5]) / 3 * T1)


class TestBezierInterpolation:
    """Tests for piecewise cubic Bezier interpolation."""

    def test_segment_count(self, fitting_points):
        segments = bezier_interpolation(fitting_points)

        assert len(segments) == len(fitting_points) - 1
        for segment in segments:
            assert segment.degree == 3
            assert segment.n_control_points == 4

    def test_segments_interpolate_points(self, fitting_points):
        segments = bezier_interpolation(fitting_points)

        for i, segment in enumerate(segments):
            assert_array_almost_equal(segment.eval_point(0.0), fitting_points[i])
            assert_array_almost_equal(segment.eval_point(1.0), fitting_points[i + 1])

    def test_junctions_are_collinear(self, fitting_points):
        segments = bezier_interpolation(fitting_points)

        for left, right in zip(segments[:-1], segments[1:]):
            assert are_three_points_collinear(left.control_points[2],
                                              left.control_points[3],
                                              right.control_points[1])

    def test_junction_tangent_directions_match(self, fitting_points):
        segments = bezier_interpolation(fitting_points)

        for left, right in zip(segments[:-1], segments[1:]):
            t_left = left.tangent_at(1.0)
            t_right = right.tangent_at(0.0)
            assert t_left.equals(t_right)

    def test_reversal_falls_back_to_incoming_chord(self):
        pts = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0)]
        segments = bezier_interpolation(pts)

        assert len(segments) == 2
        assert_array_almost_equal(segments[0].control_points[2].to_array(), [2.0 / 3.0, 0.0, 0.0])

    def test_two_points(self):
        segments = bezier_interpolation([(0.0, 0.0, 0.0), (3.0, 0.0, 0.0)])

        assert len(segments) == 1
        assert_array_almost_equal(segments[0].control_point_array,
                                  [[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0]])

    def test_too_few_points(self):
        with pytest.raises(InputValidationError):
            bezier_interpolation([(0.0, 0.0, 0.0)])

    def test_coincident_points(self):
        with pytest.raises(InputValidationError):
            bezier_interpolation([(0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (1.0, 0.0, 0.0)])


class TestApproximateCurve:
    """Tests for least-squares approximation."""

    def test_approximated_curve(self, fitting_points):
        expected = np.array([
            [0.0, 0.0, 0.0],
            [9.610024470158852, 8.200277881464892, 0.0],
            [-8.160625855418692, 3.3820642030608417, 0.0],
            [-4.0, -3.0, 0.0],
        ])

        curve = approximate_curve(fitting_points, 3)

        assert curve.n_control_points == 4
        for actual, target in zip(curve.control_point_array, expected):
            assert np.linalg.norm(actual - target) < 1e-5

    def test_end_points_are_exact(self):
        t = np.linspace(0.0, 2.0 * np.pi, 25)
        pts = np.column_stack([np.cos(t) * (1.0 + 0.1 * t), np.sin(t), 0.05 * t])

        curve = approximate_curve(pts, 3, n_control_points=8)

        assert curve.n_control_points == 8
        assert_array_almost_equal(curve.control_point_array[0], pts[0], decimal=12)
        assert_array_almost_equal(curve.control_point_array[-1], pts[-1], decimal=12)

    def test_least_squares_optimality(self):
        """Perturbing an interior control point never lowers the residual."""
        t = np.linspace(0.0, 1.0, 15)
        pts = np.column_stack([t, np.sin(3.0 * t), np.zeros_like(t)])
        params = curve_parameters(pts)

        curve = approximate_curve(pts, 3, n_control_points=6)

        def residual(candidate):
            return sum(np.sum((candidate.eval_point(u) - q) ** 2) for u, q in zip(params, pts))

        base = residual(curve)
        for k in range(1, 5):
            for delta in ([1e-3, 0, 0], [0, -1e-3, 0]):
                points = curve.control_point_array
                points[k] += delta
                perturbed = NURBSCurve(curve.knots, points)
                assert residual(perturbed) >= base

    def test_full_count_delegates_to_interpolation(self, fitting_points):
        approx = approximate_curve(fitting_points, 3, n_control_points=len(fitting_points))
        interp = interpolated_curve(fitting_points, 3)

        assert_array_almost_equal(approx.control_point_array, interp.control_point_array)

    def test_too_many_control_points(self, fitting_points):
        with pytest.raises(InputValidationError):
            approximate_curve(fitting_points, 3, n_control_points=6)

    def test_too_few_control_points(self, fitting_points):
        with pytest.raises(InputValidationError):
            approximate_curve(fitting_points, 3, n_control_points=3)

    def test_collinear_points(self):
        pts = [(0, 0, 0), (1, 1, 0), (2, 2, 0), (3, 3, 0), (4, 4, 0), (5, 5, 0)]
        with pytest.raises(InputValidationError, match="collinear"):
            approximate_curve(pts, 2)

    def test_coincident_points(self):
        pts = [(0, 0, 0), (1, 1, 0), (1, 1, 0), (2, 0, 0), (3, 1, 0)]
        with pytest.raises(InputValidationError):
            approximate_curve(pts, 2, n_control_points=4)
