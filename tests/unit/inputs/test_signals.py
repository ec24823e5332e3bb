"""
Unit tests for the time-of-day input signals.
"""

import numpy as np
import pytest

from readiness_engine.inputs.quadrature import fixed_step_integral
from readiness_engine.inputs.signals import (
    AlternatingDays,
    Constant,
    DailyPulses,
    NO_SESSIONS,
    SleepSchedule,
    WeeklyTaper,
    day_index,
    in_daily_window,
    time_of_day,
)


H = 1.0 / 24.0


# ======================================================================
# Helpers
# ======================================================================


class TestClock:

    def test_time_of_day_and_day_index(self):
        t = np.array([0.0, 0.25, 1.0, 2.75])
        np.testing.assert_allclose(time_of_day(t), [0.0, 0.25, 0.0, 0.75])
        np.testing.assert_array_equal(day_index(t), [0, 0, 1, 2])

    @pytest.mark.parametrize("t,expected", [
        (7 / 24, True),           # start is inside
        (7.5 * H, True),
        (8 / 24, False),          # stop is outside
        (6.99 * H, False),
        (3.0 + 7.5 / 24, True),   # every day
    ])
    def test_half_open_window(self, t, expected):
        assert bool(in_daily_window(t, 7.0, 1.0)) is expected

    @pytest.mark.parametrize("t,expected", [
        (0.0, True),              # midnight, t mod 1 == 0
        (1.0, True),
        (5.0, True),
        (23 / 24, True),
        (6.9 * H, True),
        (7 / 24, False),
        (22.9 * H, False),
        (12 * H, False),
    ])
    def test_window_wraps_past_midnight(self, t, expected):
        assert bool(in_daily_window(t, 23.0, 8.0)) is expected

    def test_degenerate_durations(self):
        t = np.linspace(0, 2, 17)
        assert not in_daily_window(t, 10.0, 0.0).any()
        assert in_daily_window(t, 10.0, 24.0).all()


# ======================================================================
# Signal strategies
# ======================================================================


class TestSignals:

    def test_constant_scalar_and_array(self):
        c = Constant(0.8)
        assert c(3.3) == 0.8
        assert isinstance(c(3.3), float)
        np.testing.assert_array_equal(c(np.zeros(4)), np.full(4, 0.8))

    def test_pulses_sum_and_vectorize(self):
        u = DailyPulses(((7.0, 1.0, 1.0), (7.5, 1.0, 0.5)))
        t = np.array([6.5, 7.25, 7.75, 8.25, 9.0]) * H
        np.testing.assert_allclose(u(t), [0.0, 1.0, 1.5, 0.5, 0.0])
        assert u(7.75 * H) == pytest.approx(1.5)

    def test_no_sessions_is_zero(self):
        assert NO_SESSIONS(0.3) == 0.0
        assert not NO_SESSIONS(np.linspace(0, 7, 50)).any()

    def test_alternating_days(self):
        sig = AlternatingDays(Constant(1.0), Constant(0.25))
        t = np.array([0.5, 1.5, 2.0, 3.999, 4.0])
        np.testing.assert_allclose(sig(t), [1.0, 0.25, 1.0, 0.25, 1.0])

    def test_weekly_taper_ratio(self):
        sig = WeeklyTaper(Constant(1.0), weekly_ratio=0.6)
        assert sig(0.0) == pytest.approx(1.0)
        assert sig(7.0) == pytest.approx(0.6)
        assert sig(14.0) == pytest.approx(0.36)

    def test_weekly_taper_floor_keeps_intensity(self):
        sig = WeeklyTaper(Constant(1.0), weekly_ratio=0.6, floor=0.4, weight=0.6)
        assert sig(0.0) == pytest.approx(1.0)
        assert sig(7.0) == pytest.approx(0.4 + 0.6 * 0.6)
        assert sig(700.0) == pytest.approx(0.4)


# ======================================================================
# Sleep schedule
# ======================================================================


class TestSleepSchedule:

    def test_night_block(self):
        s = SleepSchedule(23.0, 8.0)
        assert s(0.0) == 1.0
        assert s(3 * H) == 1.0
        assert s(7 / 24) == 0.0
        assert s(15 * H) == 0.0
        assert s(23 / 24) == 1.0

    def test_naps_add_to_night(self):
        s = SleepSchedule(23.0, 8.0, naps=((13.0, 0.5),))
        assert s(13.25 * H) == 1.0
        assert s(13.5 / 24) == 0.0

    def test_always_asleep(self):
        s = SleepSchedule(0.0, 24.0)
        assert s(np.linspace(0, 3, 37)).min() == 1.0

    def test_shifted_schedule_keeps_daily_total(self):
        base = SleepSchedule(23.0, 8.0)
        late = SleepSchedule(5.0, 8.0)
        n = 24 * 60
        # offset keeps every node off the window edges
        start = 0.3 / n
        total_base = fixed_step_integral(base, start, 1.0 + start, n)
        total_late = fixed_step_integral(late, start, 1.0 + start, n)
        assert total_base == pytest.approx(8 * H, abs=1e-9)
        assert total_late == pytest.approx(total_base, abs=1e-9)
        # phase differs
        assert base(0.0) == 1.0
        assert late(0.0) == 0.0
