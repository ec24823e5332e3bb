"""
Unit tests for regimes, the bedtime kernel and sleep efficiency.
"""

import numpy as np
import pytest

from readiness_engine.inputs.regime import (
    BedtimeKernel,
    SleepEfficiency,
    build_drive,
    kernel_subdivisions,
)
from readiness_engine.inputs.regimes import (
    REGIMES,
    evening_intensity,
    early_hiit,
    full_rest,
    get_regime,
    single_session,
)
from readiness_engine.model.parameters import ModelParams


H = 1.0 / 24.0


@pytest.fixture
def params():
    return ModelParams()


# ======================================================================
# Bedtime kernel
# ======================================================================


class TestBedtimeKernel:

    def test_subdivisions(self):
        assert kernel_subdivisions(6.0) == 24
        assert kernel_subdivisions(3.0) == 24
        assert kernel_subdivisions(12.0) == 48

    def test_zero_without_training(self, params):
        B = BedtimeKernel(full_rest(), params)
        assert B(0.5) == 0.0
        assert not B(np.linspace(0, 3, 20)).any()

    def test_zero_horizon_gives_zero(self, params):
        p = params.with_overrides(h_b_hours=0.0)
        B = BedtimeKernel(evening_intensity(), p)
        assert B(23 * H) == 0.0
        q = SleepEfficiency(B, p)
        assert q(23 * H) == pytest.approx(p.q0)

    def test_evening_training_raises_bedtime_load(self, params):
        B = BedtimeKernel(evening_intensity(), params)
        at_lights_out = B(23 * H)
        assert at_lights_out > 0.0
        # nothing in the 6 h before 07:00 for an evening regime
        assert B(1.0 + 7 * H) == 0.0
        # early sessions leave less memory at lights out
        assert BedtimeKernel(early_hiit(), params)(23 * H) < at_lights_out

    def test_bounded_by_constant_drive(self, params):
        # drive 1 on every modality around the clock: B ≤ Σβ · σb
        regime = single_session("h", 0.0, 24.0, 1.0)
        B = BedtimeKernel(regime, params)
        bound = params.beta_h * params.sigma_b_hours * H
        assert 0.0 < B(2.0) <= bound

    def test_vectorized_matches_scalar(self, params):
        B = BedtimeKernel(evening_intensity(), params)
        t = np.linspace(0.0, 2.0, 33)
        np.testing.assert_allclose(B(t), [B(v) for v in t])

    def test_sleep_efficiency_in_range(self, params):
        drive = build_drive(evening_intensity(), params)
        q = drive.q(np.linspace(0.0, 3.0, 289))
        assert np.all(q > 0.0)
        assert np.all(q <= params.q0)
        assert q.min() < params.q0


# ======================================================================
# Drive bundle
# ======================================================================


class TestDriveSignals:

    def test_sample_layout(self, params):
        drive = build_drive(early_hiit(), params)
        u_e, u_h, u_s, s, sq, n, x = drive.sample(7.5 * H)
        assert (u_e, u_h, u_s) == (0.0, 1.0, 0.0)
        assert s == 0.0 and sq == 0.0
        assert (n, x) == (0.8, 0.1)

    def test_clearance_while_asleep(self, params):
        drive = build_drive(early_hiit(), params)
        _, _, _, s, sq, _, _ = drive.sample(2 * H)
        assert s == 1.0
        assert sq == pytest.approx(params.q0)
        assert drive.clearance(2 * H) == pytest.approx(sq)


# ======================================================================
# Regime builders
# ======================================================================


class TestRegimes:

    @pytest.mark.parametrize("key", sorted(REGIMES))
    def test_registry_builds(self, key):
        regime = get_regime(key)
        assert regime.name
        assert 0.0 <= regime.sleep(0.0) <= 1.0

    def test_overrides_forwarded(self):
        assert get_regime("early_hiit", bedtime_hour=22.0).bedtime_hour == 22.0

    def test_unknown_regime(self):
        with pytest.raises(ValueError, match="Unknown regime"):
            get_regime("couch")

    def test_single_session(self):
        r = single_session("s", start_hour=18.0)
        assert r.u_s(18.5 * H) == 1.0
        assert r.u_e(18.5 * H) == 0.0
        assert r.u_h(18.5 * H) == 0.0
        with pytest.raises(ValueError, match="Unknown modality"):
            single_session("x")

    def test_full_rest(self):
        r = full_rest()
        t = np.linspace(0.0, 5.0, 121)
        assert r.sleep(t).min() == 1.0
        assert not (r.u_e(t).any() or r.u_h(t).any() or r.u_s(t).any())

    def test_alternating_has_hard_and_easy_days(self):
        r = get_regime("alternating_hard_easy")
        assert r.u_h(17.5 * H) == pytest.approx(0.6)
        assert r.u_h(1.0 + 17.5 * H) == 0.0
        assert r.sleep(1.0 + 13.25 * H) == 1.0
