"""
Readiness aggregator and trajectory summary metrics.

    P = w_end·A + w_str·N − λa·Fa − λc·Fc − λs·S − λi·I

P is a relative score, not a probability: it is never clamped and may go
negative or overshoot transiently.
"""
from dataclasses import dataclass

import numpy as np

from readiness_engine.config import DEFAULT_I_THRESHOLD
from readiness_engine.dynamics.ode import IDX_I, N_STATES
from readiness_engine.errors import DegenerateInputFailure
from readiness_engine.model.parameters import ModelParams


@dataclass(frozen=True)
class ReadoutMetrics:
    """Scalar decision metrics for one trajectory."""
    max_p: float
    t_to_peak: float
    mean_p: float
    frac_time_i_high: float
    i_threshold: float = DEFAULT_I_THRESHOLD

    def as_dict(self) -> dict:
        return {
            "max_P": self.max_p,
            "t_to_peak": self.t_to_peak,
            "mean_P": self.mean_p,
            "frac_time_I_high": self.frac_time_i_high,
            "I_threshold": self.i_threshold,
        }


def readiness_weights(p: ModelParams) -> np.ndarray:
    """Coefficients of P on (A, N, Fa, Fc, S, I)."""
    return np.array([p.w_end, p.w_str, -p.lambda_a, -p.lambda_c, -p.lambda_s, -p.lambda_i])


def readiness(state, p: ModelParams):
    """
    Readiness of a single state (length-6 vector) or a trajectory (6×T matrix).
    Returns a float or a length-T array respectively.
    """
    state = np.asarray(state, dtype=float)
    if state.shape[0] != N_STATES:
        raise ValueError(f"Expected {N_STATES} state rows, got shape {state.shape}")
    value = readiness_weights(p) @ state
    if state.ndim == 1:
        return float(value)
    return value


def readiness_series(states, p: ModelParams) -> np.ndarray:
    """P(t) along a 6×T trajectory."""
    return np.atleast_1d(readiness(np.asarray(states, dtype=float).reshape(N_STATES, -1), p))


def summarize_metrics(ts, P, states, i_threshold: float = DEFAULT_I_THRESHOLD) -> ReadoutMetrics:
    """Peak (first occurrence), mean readiness, and share of samples with I above threshold."""
    ts = np.asarray(ts, dtype=float)
    P = np.asarray(P, dtype=float)
    if P.size == 0:
        raise DegenerateInputFailure("Cannot summarise an empty readiness series")
    states = np.asarray(states, dtype=float)

    idx = int(np.argmax(P))
    damage = states[IDX_I]
    return ReadoutMetrics(
        max_p=float(P[idx]),
        t_to_peak=float(ts[idx]),
        mean_p=float(np.mean(P)),
        frac_time_i_high=float(np.count_nonzero(damage > i_threshold) / damage.size),
        i_threshold=i_threshold,
    )
