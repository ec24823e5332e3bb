"""
Regime container and the signals derived from it.

A Regime bundles the six exogenous inputs (endurance, HIIT and strength
drive, sleep indicator, nutrition, context stress) with its schedule
metadata. Two derived signals depend on the athlete's parameters as well:

    B(t) = ∫_0^hb (βE·uE + βH·uH + βS·uS)(t - δ) · exp(-δ/σb) dδ
    q(t) = q0 / (1 + η·B(t))

B is the bedtime-proximity kernel: how much exertion happened in the last
few hours. q is the resulting sleep efficiency, in (0, q0]. Both are
rebuilt per analysis call by ``build_drive``.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import math

import numpy as np

from readiness_engine.config import HOURS_PER_DAY, KERNEL_REFERENCE_HOURS, KERNEL_SUBDIVISIONS
from readiness_engine.inputs.quadrature import fixed_step_rule
from readiness_engine.inputs.signals import Nap, as_signal
from readiness_engine.model.parameters import ModelParams


@dataclass(frozen=True)
class Regime:
    """Daily/weekly training, sleep, nutrition and stress signals."""
    name: str
    u_e: Callable           # endurance drive
    u_h: Callable           # HIIT / anaerobic drive
    u_s: Callable           # strength / plyometric drive
    sleep: Callable         # sleep-opportunity indicator in {0, 1}
    nutrition: Callable     # nutrition availability
    context: Callable       # context stress
    bedtime_hour: float = 23.0
    sleep_hours: float = 8.0
    naps: Tuple[Nap, ...] = ()
    description: str = ""


def kernel_subdivisions(horizon_hours: float) -> int:
    """Quadrature nodes for a look-back horizon: never sparser than 24 per 6 h."""
    scaled = math.ceil(KERNEL_SUBDIVISIONS * horizon_hours / KERNEL_REFERENCE_HOURS)
    return max(KERNEL_SUBDIVISIONS, scaled)


class BedtimeKernel:
    """
    Recency-weighted memory B(t) of combined training drive.

    Right-endpoint Riemann sum over elapsed time δ ∈ (0, hb]: samples at
    t - Δ, t - 2Δ, ..., t - hb. With the default 24 nodes per 6 h the
    spacing is 15 min, finer than any session pulse the regimes use.
    """

    def __init__(self, regime: Regime, params: ModelParams, subdivisions: Optional[int] = None):
        self.regime = regime
        self.drives = (as_signal(regime.u_e), as_signal(regime.u_h), as_signal(regime.u_s))
        self.beta = (params.beta_e, params.beta_h, params.beta_s)
        horizon = params.h_b_hours / HOURS_PER_DAY
        decay = params.sigma_b_hours / HOURS_PER_DAY
        if horizon <= 0:
            # No look-back: the kernel is identically zero
            self.lags = np.zeros(0)
            self.weights = np.zeros(0)
            return
        n = kernel_subdivisions(params.h_b_hours) if subdivisions is None else subdivisions
        lags, widths = fixed_step_rule(0.0, horizon, n, rule="right")
        self.lags = lags
        self.weights = widths * np.exp(-lags / decay)

    def combined_drive(self, t):
        shape = np.shape(t)
        total = np.zeros(shape, dtype=float)
        for beta, drive in zip(self.beta, self.drives):
            total = total + beta * np.broadcast_to(np.asarray(drive(t), dtype=float), shape)
        return total

    def __call__(self, t):
        if self.lags.size == 0:
            return 0.0 if np.ndim(t) == 0 else np.zeros(np.shape(t))
        times = np.asarray(t, dtype=float)[..., np.newaxis] - self.lags
        values = self.combined_drive(times) @ self.weights
        if np.ndim(t) == 0:
            return float(values)
        return values


class SleepEfficiency:
    """q(t) = q0 / (1 + η·B(t))."""

    def __init__(self, kernel: BedtimeKernel, params: ModelParams):
        self.kernel = kernel
        self.q0 = params.q0
        self.eta = params.eta

    def __call__(self, t):
        return self.q0 / (1.0 + self.eta * self.kernel(t))


@dataclass(frozen=True)
class DriveSignals:
    """Everything the right-hand side samples at time t."""
    u_e: Callable
    u_h: Callable
    u_s: Callable
    s: Callable
    n: Callable
    x: Callable
    B: BedtimeKernel
    q: SleepEfficiency

    def sample(self, t: float) -> Tuple[float, float, float, float, float, float, float]:
        """(uE, uH, uS, s, s·q, n, x) at time t."""
        s = float(self.s(t))
        sq = s * float(self.q(t)) if s != 0.0 else 0.0
        return (float(self.u_e(t)), float(self.u_h(t)), float(self.u_s(t)),
                s, sq, float(self.n(t)), float(self.x(t)))

    def clearance(self, t):
        """Effective nightly clearance multiplier s(t)·q(t)."""
        shape = np.shape(t)
        s = np.broadcast_to(np.asarray(self.s(t), dtype=float), shape)
        return s * np.broadcast_to(np.asarray(self.q(t), dtype=float), shape)


def build_drive(regime: Regime, params: ModelParams) -> DriveSignals:
    """Bind a regime to a parameter set, building B(t) and q(t)."""
    kernel = BedtimeKernel(regime, params)
    u_e, u_h, u_s = kernel.drives
    return DriveSignals(
        u_e=u_e, u_h=u_h, u_s=u_s,
        s=as_signal(regime.sleep), n=as_signal(regime.nutrition), x=as_signal(regime.context),
        B=kernel, q=SleepEfficiency(kernel, params),
    )
