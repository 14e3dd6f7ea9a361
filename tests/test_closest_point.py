"""
Unit tests for closest-point queries on NURBS curves.
"""

import logging
import pytest
import numpy as np
from numpy.testing import assert_array_almost_equal

from watfCAGD.core.tolerance import MAX_TOLERANCE, Tolerance
from watfCAGD.core.vector import Vector3
from watfCAGD.geometry.line import Line
from watfCAGD.geometry.primitives import make_nurbs_circle
from watfCAGD.operation import closest_point as cp
from watfCAGD.operation.closest_point import (
    SquaredDistanceObjective,
    closest_parameter,
    closest_point,
    nurbs_closest,
)
from watfCAGD.operation.fitting import interpolated_curve
from watfCAGD.solver.minimizer import MinimizerResult


@pytest.fixture
def curve(fitting_points):
    return interpolated_curve(fitting_points, 3)


class TestSquaredDistanceObjective:
    """Tests for the distance objective handed to the minimizer."""

    def test_value_and_gradient(self, curve):
        target = np.array([1.0, 2.0, 0.5])
        objective = SquaredDistanceObjective(curve, target)

        u, h = 0.4, 1e-6
        fd = (objective.value([u + h]) - objective.value([u - h])) / (2 * h)

        assert objective.value([u]) == pytest.approx(np.sum((curve.eval_point(u) - target) ** 2))
        assert objective.gradient([u])[0] == pytest.approx(fd, rel=1e-5)


class TestNURBSClosestPoint:
    """Tests for sampled seed + minimizer refinement."""

    def test_point_on_curve(self, curve):
        for u in [0.0, 0.13, 0.5, 0.77, 1.0]:
            target = curve.eval_point(u)
            assert closest_parameter(curve, target) == pytest.approx(u, abs=1e-6)

    def test_circle_center_direction(self):
        circle = make_nurbs_circle(radius=2.0)
        point = closest_point(circle, (5.0, 5.0, 0.0))

        expected = 2.0 * np.array([1.0, 1.0, 0.0]) / np.sqrt(2.0)
        assert_array_almost_equal(point.to_array(), expected, decimal=6)

    def test_idempotent(self, curve):
        first = closest_point(curve, (1.0, 3.0, 0.0))
        second = closest_point(curve, first)

        assert first.distance_to(second) < MAX_TOLERANCE

    def test_closest_is_orthogonal(self, curve):
        target = np.array([2.0, 1.0, 0.0])
        u = closest_parameter(curve, target)
        C, dC = curve.eval_derivatives(u, 1)

        if 0.0 < u < 1.0:
            assert abs(np.dot(C - target, dC)) < 1e-5

    def test_end_clamping(self, curve):
        # Beyond the start of the curve, opposite to its initial tangent
        start_tangent = curve.tangent_at(0.0).to_array()
        target = curve.eval_point(0.0) - 0.5 * start_tangent

        assert closest_parameter(curve, target) == pytest.approx(0.0, abs=1e-6)

    def test_returns_vector(self, curve):
        assert isinstance(closest_point(curve, (0.0, 1.0, 0.0)), Vector3)

    def test_non_convergence_keeps_best_candidate(self, curve, monkeypatch, caplog):
        target = np.array([1.0, 3.0, 0.0])

        def failing_minimize(objective, x0, bounds=None, tol=None, max_iterations=None):
            return MinimizerResult(x=np.array([0.999]), value=1e6, converged=False,
                                   iterations=1, message="forced failure")

        monkeypatch.setattr(cp, "minimize", failing_minimize)
        with caplog.at_level(logging.WARNING, logger="watfCAGD.operation.closest_point"):
            u, point = nurbs_closest(curve, target)

        assert u != 0.999
        assert "did not converge" in caplog.text
        assert_array_almost_equal(point, curve.eval_point(u))

    def test_custom_tolerance(self, curve):
        tol = Tolerance(max_tolerance=1e-8, max_iterations=500)
        target = curve.eval_point(0.3)

        assert closest_parameter(curve, target, tol) == pytest.approx(0.3, abs=1e-7)


class TestDispatch:
    """closest_point dispatches by curve variant."""

    def test_line(self):
        line = Line((0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
        assert closest_point(line, (4.0, 3.0, 0.0)) == Vector3(4.0, 0.0, 0.0)
        assert closest_parameter(line, (4.0, 3.0, 0.0)) == pytest.approx(0.4)

    def test_line_nurbs_agree(self):
        line = Line((0.0, 0.0, 0.0), (10.0, 5.0, 0.0))
        target = (3.0, 6.0, 0.0)

        exact = closest_point(line, target)
        refined = closest_point(line.to_nurbs(), target)
        assert exact.distance_to(refined) < MAX_TOLERANCE
