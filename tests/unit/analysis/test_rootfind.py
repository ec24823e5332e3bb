"""
Unit tests for the shared root finder and finite-difference Jacobians.
"""

import numpy as np
import pytest

from readiness_engine.analysis.rootfind import (
    central_difference_jacobian,
    forward_difference_jacobian,
    solve_root,
)
from readiness_engine.errors import ReadinessModelError, RootFindingFailure


def _quadratic(x):
    return np.array([x[0] ** 2 + x[1] - 3.0, x[0] - x[1] ** 3])


def _quadratic_jacobian(x):
    return np.array([[2.0 * x[0], 1.0], [1.0, -3.0 * x[1] ** 2]])


# ======================================================================
# Jacobians
# ======================================================================


class TestJacobians:

    def test_forward_difference(self):
        x = np.array([1.3, 0.7])
        J = forward_difference_jacobian(_quadratic, x, 1e-7)
        np.testing.assert_allclose(J, _quadratic_jacobian(x), atol=1e-5)

    def test_forward_difference_reuses_base_value(self):
        calls = []

        def f(x):
            calls.append(x.copy())
            return _quadratic(x)

        x = np.array([1.0, 1.0])
        forward_difference_jacobian(f, x, 1e-6, f0=_quadratic(x))
        assert len(calls) == 2

    def test_central_difference(self):
        x = np.array([1.3, 0.7])
        J = central_difference_jacobian(_quadratic, x, 1e-5)
        np.testing.assert_allclose(J, _quadratic_jacobian(x), atol=1e-8)

    def test_linear_map_is_exact(self):
        A = np.array([[2.0, -1.0, 0.0], [0.5, 3.0, 1.0], [0.0, 0.0, -4.0]])
        J = central_difference_jacobian(lambda x: A @ x, np.ones(3), 1e-3)
        np.testing.assert_allclose(J, A, atol=1e-10)


# ======================================================================
# Root finder
# ======================================================================


class TestSolveRoot:

    def test_converges(self):
        sol = solve_root(_quadratic, [1.5, 1.0], ftol=1e-10)
        assert sol.max_residual <= 1e-10
        np.testing.assert_allclose(_quadratic(sol.x), 0.0, atol=1e-10)
        assert sol.n_evaluations > 0

    def test_analytic_jacobian_is_used(self):
        sol = solve_root(_quadratic, [1.5, 1.0], jac=_quadratic_jacobian, ftol=1e-10)
        assert sol.n_jacobians >= 1
        assert sol.max_residual <= 1e-10

    def test_linear_system(self):
        A = np.array([[4.0, 1.0], [2.0, 3.0]])
        b = np.array([1.0, 2.0])
        sol = solve_root(lambda x: A @ x - b, np.zeros(2))
        np.testing.assert_allclose(sol.x, np.linalg.solve(A, b), atol=1e-10)

    def test_no_root_raises_with_last_iterate(self):
        with pytest.raises(RootFindingFailure) as excinfo:
            solve_root(lambda x: x ** 2 + 1.0, [0.5], label="no-real-root")
        err = excinfo.value
        assert err.label == "no-real-root"
        assert err.last_iterate.shape == (1,)
        assert np.max(np.abs(err.residual)) >= 1.0
        assert "no-real-root" in str(err)
        assert isinstance(err, ReadinessModelError)

    def test_tolerance_is_enforced_on_residual(self):
        # a tiny budget cannot reach an absurd tolerance
        with pytest.raises(RootFindingFailure):
            solve_root(lambda x: np.exp(x) - 2.0, [10.0], max_evaluations=3, ftol=1e-15)
