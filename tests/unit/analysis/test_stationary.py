"""
Unit tests for the weekly-averaged surrogate and its equilibrium.
"""

import numpy as np
import pytest

import readiness_engine.analysis.stationary as stationary_module
from readiness_engine.analysis.stationary import (
    WeeklyMeans,
    equilibrium_summary,
    jacobian_summary,
    surrogate_rhs,
    weekly_averages,
)
from readiness_engine.config import LN2
from readiness_engine.dynamics.readiness import readiness
from readiness_engine.errors import DegenerateInputFailure, RootFindingFailure
from readiness_engine.inputs.regimes import early_hiit, evening_intensity, full_rest
from readiness_engine.model.parameters import ModelParams
from readiness_engine.model.profiles import sa_r


@pytest.fixture(scope="module")
def params():
    return ModelParams()


@pytest.fixture(scope="module")
def hiit_equilibrium(params):
    return equilibrium_summary(params, early_hiit())


# ======================================================================
# Weekly averages
# ======================================================================


class TestWeeklyAverages:

    def test_early_hiit_means(self, params):
        means = weekly_averages(params, early_hiit())
        assert means.u_h == pytest.approx(1.0 / 24.0, abs=2e-3)
        assert means.u_e == pytest.approx(0.2 * 0.5 / 24.0, abs=1e-3)
        assert means.u_s == 0.0
        assert means.s == pytest.approx(1.0 / 3.0, abs=2e-3)
        assert means.n == pytest.approx(0.8)
        assert means.x == pytest.approx(0.1)

    def test_clearance_mean_bounded(self, params):
        means = weekly_averages(params, evening_intensity())
        assert 0.0 < means.sq < params.q0 * means.s

    def test_clearance_mean_without_training(self, params):
        means = weekly_averages(params, full_rest())
        assert means.s == pytest.approx(1.0)
        assert means.sq == pytest.approx(params.q0)

    def test_zero_period(self, params):
        with pytest.raises(DegenerateInputFailure):
            weekly_averages(params, early_hiit(), period_days=0.0)

    @pytest.mark.parametrize("dt", [0.0, -1.0 / 96.0])
    def test_non_positive_step(self, params, dt):
        with pytest.raises(DegenerateInputFailure):
            weekly_averages(params, early_hiit(), dt=dt)

    def test_as_dict_keys(self, params):
        d = weekly_averages(params, early_hiit()).as_dict()
        assert set(d) == {"ubarE", "ubarH", "ubarS", "sbar", "sqbar", "nbar", "xbar"}


# ======================================================================
# Spectrum summary
# ======================================================================


class TestJacobianSummary:

    def test_stable(self):
        js = jacobian_summary(np.diag([-0.5, -2.0, -0.1]))
        assert js.lambda_max == pytest.approx(-0.1)
        assert js.half_life_days == pytest.approx(LN2 / 0.1)
        assert js.stable

    def test_unstable_has_infinite_half_life(self):
        js = jacobian_summary(np.diag([-0.5, 0.2]))
        assert not js.stable
        assert js.half_life_days == float("inf")

    def test_complex_pair_uses_real_part(self):
        J = np.array([[-0.3, 1.0], [-1.0, -0.3]])
        js = jacobian_summary(J)
        assert js.lambda_max == pytest.approx(-0.3)
        assert np.iscomplexobj(js.eigenvalues)


# ======================================================================
# Equilibrium
# ======================================================================


class TestEquilibrium:

    def test_residual(self, hiit_equilibrium, params):
        f = surrogate_rhs(hiit_equilibrium.state, params, hiit_equilibrium.means)
        assert np.max(np.abs(f)) < 1e-8
        assert np.max(np.abs(hiit_equilibrium.residual)) < 1e-8

    def test_readiness_at_equilibrium(self, hiit_equilibrium, params):
        assert hiit_equilibrium.readiness == pytest.approx(
            readiness(hiit_equilibrium.state, params), abs=1e-12)

    def test_stable_with_finite_half_life(self, hiit_equilibrium):
        js = hiit_equilibrium.stability
        assert js.stable
        assert 0.0 < js.half_life_days < np.inf
        assert hiit_equilibrium.eigenvalues.shape == (6,)
        np.testing.assert_allclose(np.max(hiit_equilibrium.eigenvalues.real), js.lambda_max)

    def test_fatigue_and_damage_positive(self, hiit_equilibrium):
        # training keeps fatigue, sleep debt and damage away from zero
        assert np.all(np.isfinite(hiit_equilibrium.state))
        assert np.all(hiit_equilibrium.state[2:] > 0.0)

    def test_full_rest_equilibrium_is_origin(self, params):
        eq = equilibrium_summary(params, full_rest())
        np.testing.assert_allclose(eq.state, 0.0, atol=1e-8)

    def test_profile_input(self):
        eq = equilibrium_summary(sa_r(), early_hiit())
        assert eq.stability.stable

    def test_evaluation_budget_exhausted(self, params, monkeypatch):
        monkeypatch.setattr(stationary_module, "MAX_ROOT_EVALUATIONS", 1)
        with pytest.raises(RootFindingFailure) as excinfo:
            equilibrium_summary(params, early_hiit())
        assert excinfo.value.last_iterate.shape == (6,)
        assert np.all(np.isfinite(excinfo.value.last_iterate))
        assert "equilibrium" in excinfo.value.label

    def test_guess_is_accepted(self, hiit_equilibrium, params):
        eq = equilibrium_summary(params, early_hiit(), guess=hiit_equilibrium.state)
        np.testing.assert_allclose(eq.state, hiit_equilibrium.state, atol=1e-7)

    def test_means_vector_order(self):
        means = WeeklyMeans(1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0)
        np.testing.assert_array_equal(means.as_vector(), [1, 2, 3, 4, 5, 6, 7])
