"""
Weekly periodic steady state of the full time-varying system.

Poincaré map Φ_T(z0): integrate the full ODE from z0 at t=0 for one period
T and return the end state ("state one week from now given today's
state"). Its fixed point z* = Φ_T(z*) is the steady weekly cycle; the
eigenvalues of DΦ_T(z*) (Floquet multipliers) decide whether the cycle
attracts nearby trajectories: all |μ| < 1 → stable.

Each map evaluation is a full ODE solve, so the fixed-point search is
warm-started from the end of a multi-week simulation and its Jacobian is
built by forward differences with the same fixed ε used for the Floquet
estimate.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from readiness_engine.config import (
    DEFAULT_I_THRESHOLD,
    DEFAULT_OUTPUT_STEP_DAYS,
    FIXED_POINT_FTOL,
    FLOQUET_EPSILON,
    MAX_ROOT_EVALUATIONS,
    PERIOD_DAYS,
    WARMUP_PERIODS,
)
from readiness_engine.analysis.rootfind import forward_difference_jacobian, solve_root
from readiness_engine.dynamics.ode import IDX_I, N_STATES
from readiness_engine.dynamics.readiness import readiness_series
from readiness_engine.inputs.regime import DriveSignals, Regime, build_drive
from readiness_engine.model.profiles import resolve_params
from readiness_engine.simulation.simulator import integrate_interval, simulate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadinessEnvelope:
    p_min: float
    p_median: float
    p_max: float


@dataclass(frozen=True)
class SteadyWeekSummary:
    """Weekly fixed point, its Floquet multipliers and one steady week of trajectory."""
    state: np.ndarray
    multipliers: np.ndarray
    monodromy: np.ndarray
    envelope: ReadinessEnvelope
    risk_fraction: float
    ts: np.ndarray
    readiness: np.ndarray
    states: np.ndarray

    @property
    def max_multiplier(self) -> float:
        return float(np.max(np.abs(self.multipliers)))

    @property
    def stable(self) -> bool:
        return self.max_multiplier < 1.0


def poincare_map(
    state,
    params,
    regime: Regime,
    period_days: float = PERIOD_DAYS,
    drive: Optional[DriveSignals] = None,
) -> np.ndarray:
    """Φ_T(state): end state after one period of the full ODE, starting at t=0."""
    p, _ = resolve_params(params)
    drive = drive or build_drive(regime, p)
    _, states = integrate_interval(state, p, drive, 0.0, period_days, period_days)
    return states[:, -1].copy()


def poincare_fixed_point(
    params,
    regime: Regime,
    period_days: float = PERIOD_DAYS,
    warmup_periods: int = WARMUP_PERIODS,
    epsilon: float = FLOQUET_EPSILON,
    ftol: float = FIXED_POINT_FTOL,
    guess: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Solve Φ_T(z*) = z* via G(z) = Φ_T(z) − z.

    The seed is the terminal state of a ``warmup_periods``-period simulation
    from the parameter set's initial condition (or ``guess`` when given).

    Raises:
        RootFindingFailure: no fixed point within tolerance
        IntegrationFailure: a map evaluation failed
    """
    p, athlete_name = resolve_params(params)
    drive = build_drive(regime, p)

    if guess is None:
        warm = simulate(p, regime, horizon_days=warmup_periods * period_days,
                        output_step_days=DEFAULT_OUTPUT_STEP_DAYS)
        z0 = warm.final_state
    else:
        z0 = np.array(guess, dtype=float)

    cache = {}

    def phi(z):
        key = np.asarray(z, dtype=float).tobytes()
        if key not in cache:
            cache[key] = poincare_map(z, p, regime, period_days, drive=drive)
        return cache[key]

    def G(z):
        return phi(z) - np.asarray(z, dtype=float)

    def G_jacobian(z):
        z = np.asarray(z, dtype=float)
        return forward_difference_jacobian(phi, z, epsilon, f0=phi(z)) - np.eye(N_STATES)

    logger.info("Weekly fixed point %s × %s: seed %s", athlete_name, regime.name, np.round(z0, 4))
    sol = solve_root(G, z0, jac=G_jacobian, ftol=ftol,
                     max_evaluations=MAX_ROOT_EVALUATIONS,
                     label=f"poincare_fixed_point[{athlete_name} × {regime.name}]")
    logger.info("Weekly fixed point converged in %d map evaluations (max|G| = %.2e)",
                sol.n_evaluations, sol.max_residual)
    return sol.x


def floquet_multipliers(
    state,
    params,
    regime: Regime,
    period_days: float = PERIOD_DAYS,
    epsilon: float = FLOQUET_EPSILON,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Forward-difference Jacobian of Φ_T at ``state`` and its eigenvalues.

    Every coordinate is perturbed by the same ε; the n+1 integrations are
    independent of each other.

    Returns:
        (multipliers, monodromy) — complex eigenvalues and the 6×6 matrix
    """
    p, _ = resolve_params(params)
    drive = build_drive(regime, p)
    state = np.asarray(state, dtype=float)

    def phi(z):
        return poincare_map(z, p, regime, period_days, drive=drive)

    M = forward_difference_jacobian(phi, state, epsilon)
    return np.linalg.eigvals(M), M


def steady_weekly_summary(
    params,
    regime: Regime,
    period_days: float = PERIOD_DAYS,
    warmup_periods: int = WARMUP_PERIODS,
    i_threshold: float = DEFAULT_I_THRESHOLD,
    output_step_days: float = DEFAULT_OUTPUT_STEP_DAYS,
    epsilon: float = FLOQUET_EPSILON,
) -> SteadyWeekSummary:
    """Fixed point, Floquet multipliers, and readiness envelope over one steady week."""
    p, athlete_name = resolve_params(params)
    zstar = poincare_fixed_point(p, regime, period_days=period_days,
                                 warmup_periods=warmup_periods, epsilon=epsilon)
    multipliers, monodromy = floquet_multipliers(zstar, p, regime, period_days, epsilon)

    drive = build_drive(regime, p)
    ts, states = integrate_interval(zstar, p, drive, 0.0, period_days, output_step_days)
    P = readiness_series(states, p)
    envelope = ReadinessEnvelope(
        p_min=float(np.min(P)),
        p_median=float(np.median(P)),
        p_max=float(np.max(P)),
    )
    damage = states[IDX_I]
    risk = float(np.count_nonzero(damage > i_threshold) / damage.size)

    logger.info("Steady week %s × %s: |μ|max = %.4f, P[min,med,max] = (%.3f, %.3f, %.3f)",
                athlete_name, regime.name, float(np.max(np.abs(multipliers))),
                envelope.p_min, envelope.p_median, envelope.p_max)

    return SteadyWeekSummary(
        state=zstar,
        multipliers=multipliers,
        monodromy=monodromy,
        envelope=envelope,
        risk_fraction=risk,
        ts=ts,
        readiness=P,
        states=states,
    )
