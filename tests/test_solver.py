"""
Unit tests for the linear solver and the scalar minimizer.
"""

import pytest
import numpy as np
from numpy.testing import assert_array_almost_equal

from watfCAGD.core.errors import SingularSystemError
from watfCAGD.core.tolerance import Tolerance
from watfCAGD.solver.linear import FactoredSystem, solve_shared
from watfCAGD.solver.minimizer import ObjectiveFunction, minimize


class Quadratic(ObjectiveFunction):
    """f(x) = sum (x - c)^2"""

    def __init__(self, center):
        self.center = np.asarray(center, dtype=np.float64)

    def value(self, x):
        return float(np.sum((np.asarray(x) - self.center) ** 2))

    def gradient(self, x):
        return 2.0 * (np.asarray(x) - self.center)


class Rosenbrock(ObjectiveFunction):

    def value(self, x):
        return float((1.0 - x[0]) ** 2 + 100.0 * (x[1] - x[0] ** 2) ** 2)

    def gradient(self, x):
        return np.array([
            -2.0 * (1.0 - x[0]) - 400.0 * x[0] * (x[1] - x[0] ** 2),
            200.0 * (x[1] - x[0] ** 2),
        ])


class TestFactoredSystem:
    """Tests for the LU-factored dense solve."""

    def test_solve_multiple_right_hand_sides(self):
        A = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 2.0]])
        X = np.array([[1.0, 2.0, 3.0], [-1.0, 0.0, 1.0], [0.5, 0.5, 0.5]])

        system = FactoredSystem(A)
        assert_array_almost_equal(system.solve(A @ X), X)
        assert_array_almost_equal(system.solve(A @ X[:, 0]), X[:, 0])

    def test_solve_shared(self):
        A = np.array([[2.0, 0.0], [0.0, 4.0]])
        assert_array_almost_equal(solve_shared(A, np.array([[2.0, 4.0], [4.0, 8.0]])),
                                  [[1.0, 2.0], [1.0, 2.0]])

    def test_singular_matrix(self):
        with pytest.raises(SingularSystemError):
            FactoredSystem(np.array([[1.0, 2.0], [2.0, 4.0]]))

    def test_non_square_matrix(self):
        with pytest.raises(SingularSystemError):
            FactoredSystem(np.ones((2, 3)))

    def test_non_finite_matrix(self):
        with pytest.raises(SingularSystemError):
            FactoredSystem(np.array([[1.0, np.nan], [0.0, 1.0]]))

    def test_rhs_size_mismatch(self):
        system = FactoredSystem(np.eye(3))
        with pytest.raises(SingularSystemError):
            system.solve(np.ones(2))

    def test_singular_system_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            FactoredSystem(np.zeros((2, 2)))


class TestMinimizer:
    """Tests for the L-BFGS-B wrapper."""

    def test_quadratic(self):
        result = minimize(Quadratic([1.0, -2.0]), [5.0, 5.0])

        assert result.converged
        assert_array_almost_equal(result.x, [1.0, -2.0], decimal=6)
        assert result.value == pytest.approx(0.0, abs=1e-10)

    def test_bounds(self):
        result = minimize(Quadratic([3.0]), [0.5], bounds=[(0.0, 1.0)])

        assert result.converged
        assert result.x[0] == pytest.approx(1.0)

    def test_scalar_start(self):
        result = minimize(Quadratic([0.25]), 0.0)
        assert result.x.shape == (1,)
        assert result.x[0] == pytest.approx(0.25, abs=1e-6)

    def test_iteration_limit(self):
        result = minimize(Rosenbrock(), [-1.2, 1.0], max_iterations=2)

        assert not result.converged
        assert result.iterations <= 2
        assert "LIMIT" in result.message.upper()

    def test_rosenbrock(self):
        tol = Tolerance(max_iterations=1000)
        result = minimize(Rosenbrock(), [-1.2, 1.0], tol=tol)

        assert_array_almost_equal(result.x, [1.0, 1.0], decimal=4)
