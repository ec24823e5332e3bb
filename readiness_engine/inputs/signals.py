"""
Exogenous input signals as small composable strategies.

Every signal is a frozen dataclass whose ``__call__`` maps time in days
(float or numpy array) to a value of the same shape. Schedules are keyed by
wall-clock time of day or by integer day index; no signal carries mutable
state, so the same instance can be sampled in any order.

Windows are half-open [start, stop) and tile every calendar day. A window
whose stop passes 24:00 wraps into the next morning.

Regimes may also carry plain scalar functions of time (``lambda t: 0.0``).
``as_signal`` wraps those so they can be sampled on arrays like the
strategies below.
"""
from dataclasses import dataclass
from typing import Callable, Tuple

import numpy as np

from readiness_engine.config import DAYS_PER_WEEK, HOURS_PER_DAY


# (start_hour, duration_hours, amplitude)
Session = Tuple[float, float, float]
# (start_hour, duration_hours)
Nap = Tuple[float, float]


def _as_output(values, t):
    """Return a float for scalar t, an array otherwise."""
    if np.ndim(t) == 0:
        return float(values)
    return np.asarray(values, dtype=float)


def time_of_day(t):
    """Fraction of the current day elapsed, in [0, 1)."""
    t = np.asarray(t, dtype=float)
    return t - np.floor(t)


def day_index(t):
    """Integer calendar day containing t."""
    return np.floor(np.asarray(t, dtype=float)).astype(int)


def in_daily_window(t, start_hour: float, duration_hours: float):
    """
    Boolean mask: is the time of day inside [start, start + duration)?

    Comparison is done in days so that t = h/24 lands exactly on a boundary.
    """
    tau = time_of_day(t)
    if duration_hours <= 0:
        return np.zeros_like(tau, dtype=bool)
    if duration_hours >= HOURS_PER_DAY:
        return np.ones_like(tau, dtype=bool)

    start_h = start_hour % HOURS_PER_DAY
    stop_h = start_h + duration_hours
    start = start_h / HOURS_PER_DAY
    if stop_h <= HOURS_PER_DAY:
        stop = stop_h / HOURS_PER_DAY
        return (tau >= start) & (tau < stop)
    # wraps past midnight
    stop = (stop_h - HOURS_PER_DAY) / HOURS_PER_DAY
    return (tau >= start) | (tau < stop)


@dataclass(frozen=True)
class Constant:
    """Constant level, e.g. nutrition availability or background stress."""
    value: float

    def __call__(self, t):
        return _as_output(np.full(np.shape(t), self.value, dtype=float), t)


@dataclass(frozen=True)
class DailyPulses:
    """Sum of rectangular session pulses repeated every day."""
    sessions: Tuple[Session, ...] = ()

    def __call__(self, t):
        total = np.zeros(np.shape(t), dtype=float)
        for start_hour, duration_hours, amplitude in self.sessions:
            total = total + np.where(in_daily_window(t, start_hour, duration_hours), amplitude, 0.0)
        return _as_output(total, t)


@dataclass(frozen=True)
class AlternatingDays:
    """Use ``even`` on even calendar days and ``odd`` on odd ones."""
    even: Callable
    odd: Callable

    def __call__(self, t):
        is_even = (day_index(t) % 2) == 0
        return _as_output(np.where(is_even, as_signal(self.even)(t), as_signal(self.odd)(t)), t)


@dataclass(frozen=True)
class WeeklyTaper:
    """
    Scale a signal by an exponential decay of fixed ratio per elapsed week.

    scale(t) = weekly_ratio ** (t / 7)

    With ``floor`` and ``weight`` set, the multiplier becomes
    min(1, floor + weight * scale), which keeps part of the signal alive
    (intensity kept while volume drops).
    """
    signal: Callable
    weekly_ratio: float = 0.6
    floor: float = 0.0
    weight: float = 1.0

    def scale(self, t):
        return np.power(self.weekly_ratio, np.asarray(t, dtype=float) / DAYS_PER_WEEK)

    def __call__(self, t):
        factor = self.scale(t)
        if self.floor > 0.0 or self.weight != 1.0:
            factor = np.minimum(1.0, self.floor + self.weight * factor)
        return _as_output(factor * np.asarray(as_signal(self.signal)(t), dtype=float), t)


@dataclass(frozen=True)
class SleepSchedule:
    """
    Sleep indicator: 1.0 inside the nightly block or any nap, else 0.0.

    The nightly block starts at ``bedtime_hour`` and lasts ``sleep_hours``,
    wrapping past midnight (23:00 + 8 h covers 23:00-07:00).
    """
    bedtime_hour: float = 23.0
    sleep_hours: float = 8.0
    naps: Tuple[Nap, ...] = ()

    def __call__(self, t):
        asleep = in_daily_window(t, self.bedtime_hour, self.sleep_hours)
        for start_hour, duration_hours in self.naps:
            asleep = asleep | in_daily_window(t, start_hour, duration_hours)
        return _as_output(np.where(asleep, 1.0, 0.0), t)


NO_SESSIONS = DailyPulses(())


@dataclass(frozen=True)
class ScalarSignal:
    """Array-safe view of a scalar-only function of time."""
    fn: Callable

    def __call__(self, t):
        if np.ndim(t) == 0:
            return float(self.fn(float(t)))
        return np.vectorize(lambda v: float(self.fn(v)), otypes=[float])(np.asarray(t, dtype=float))


_VECTORIZED = (Constant, DailyPulses, AlternatingDays, WeeklyTaper, SleepSchedule, ScalarSignal)


def as_signal(fn: Callable) -> Callable:
    """Return ``fn`` if it already handles arrays, otherwise wrap it element-wise."""
    if isinstance(fn, _VECTORIZED):
        return fn
    return ScalarSignal(fn)
