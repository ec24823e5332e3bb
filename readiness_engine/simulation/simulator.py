"""
Trajectory integrator.

Drives scipy's Dormand–Prince 5(4) stepper (RK45) one step at a time so
that the accepted-step budget can be enforced, and samples the dense output
on a fixed output grid. The forcing is discontinuous in t (pulse edges,
sleep on/off) but the state is continuous; the step is capped at 15 min so
no session pulse can be stepped over silently.

A failed or runaway integration raises IntegrationFailure. A partial
trajectory is never returned.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from scipy.integrate import RK45

from readiness_engine.config import (
    DEFAULT_HORIZON_DAYS,
    DEFAULT_I_THRESHOLD,
    DEFAULT_OUTPUT_STEP_DAYS,
    MAX_SOLVER_STEPS,
    MAX_STEP_DAYS,
    SOLVER_ATOL,
    SOLVER_RTOL,
)
from readiness_engine.dynamics.ode import N_STATES, STATE_NAMES, rhs
from readiness_engine.dynamics.readiness import ReadoutMetrics, readiness_series, summarize_metrics
from readiness_engine.errors import DegenerateInputFailure, IntegrationFailure
from readiness_engine.inputs.regime import DriveSignals, Regime, build_drive
from readiness_engine.model.parameters import ModelParams
from readiness_engine.model.profiles import resolve_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Readout:
    """One simulated trajectory: time grid, states (6×T), readiness, metrics."""
    ts: np.ndarray
    states: np.ndarray
    readiness: np.ndarray
    metrics: ReadoutMetrics
    athlete: str = ""
    regime: str = ""

    def __post_init__(self):
        for arr in (self.ts, self.states, self.readiness):
            arr.setflags(write=False)

    @property
    def final_state(self) -> np.ndarray:
        return self.states[:, -1].copy()

    def to_frame(self) -> pd.DataFrame:
        """Tabular view: t_days, one column per state, readiness."""
        df = pd.DataFrame(self.states.T, columns=list(STATE_NAMES))
        df.insert(0, "t_days", self.ts)
        df["readiness"] = self.readiness
        return df


def output_grid(t0: float, t1: float, step: float) -> np.ndarray:
    """Grid t0 + k·step for k = 0..floor((t1 - t0)/step), never past t1."""
    if not np.isfinite(step) or step <= 0:
        raise DegenerateInputFailure(f"Output step must be positive, got {step}")
    span = t1 - t0
    if not np.isfinite(span) or span <= 0:
        raise DegenerateInputFailure(f"Integration window [{t0}, {t1}] has no extent")
    m = int(np.floor(span / step + 1e-9))
    grid = t0 + step * np.arange(m + 1, dtype=float)
    return np.minimum(grid, t1)


def integrate_interval(
    z0,
    params: ModelParams,
    drive: DriveSignals,
    t0: float,
    t1: float,
    output_step: float,
    rtol: float = SOLVER_RTOL,
    atol: float = SOLVER_ATOL,
    max_step: float = MAX_STEP_DAYS,
    max_steps: int = MAX_SOLVER_STEPS,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integrate the full ODE from z0 at t0 to t1.

    Returns:
        (ts, states) with states of shape (6, len(ts))
    """
    z0 = np.array(z0, dtype=float)
    if z0.shape != (N_STATES,):
        raise ValueError(f"Initial state must have {N_STATES} components, got shape {z0.shape}")
    if not np.all(np.isfinite(z0)):
        raise IntegrationFailure("Initial state is not finite", t=t0)

    grid = output_grid(t0, t1, output_step)
    states = np.empty((N_STATES, grid.size), dtype=float)
    states[:, 0] = z0
    filled = 1

    solver = RK45(
        lambda t, z: rhs(t, z, params, drive),
        t0, z0, t1,
        max_step=max_step, rtol=rtol, atol=atol,
    )

    n_steps = 0
    while solver.status == "running":
        if n_steps >= max_steps:
            raise IntegrationFailure(
                f"Step budget of {max_steps} exhausted at t={solver.t:.6f} before reaching t={t1}",
                t=solver.t, n_steps=n_steps,
            )
        message = solver.step()
        n_steps += 1
        if solver.status == "failed":
            raise IntegrationFailure(f"Solver failed at t={solver.t:.6f}: {message}",
                                     t=solver.t, n_steps=n_steps)
        if not np.all(np.isfinite(solver.y)):
            raise IntegrationFailure(f"State became non-finite at t={solver.t:.6f}",
                                     t=solver.t, n_steps=n_steps)

        upto = int(np.searchsorted(grid, solver.t, side="right"))
        if upto > filled:
            states[:, filled:upto] = solver.dense_output()(grid[filled:upto])
            filled = upto

    if filled < grid.size:
        raise IntegrationFailure(
            f"Integration stopped at t={solver.t:.6f} with {grid.size - filled} samples unfilled",
            t=solver.t, n_steps=n_steps,
        )

    logger.debug("Integrated [%.3f, %.3f] in %d steps", t0, t1, n_steps)
    return grid, states


def simulate(
    params,
    regime: Regime,
    horizon_days: float = DEFAULT_HORIZON_DAYS,
    output_step_days: float = DEFAULT_OUTPUT_STEP_DAYS,
    i_threshold: float = DEFAULT_I_THRESHOLD,
    initial_state: Optional[np.ndarray] = None,
    max_steps: int = MAX_SOLVER_STEPS,
) -> Readout:
    """
    Integrate the readiness model over [0, horizon_days].

    Args:
        params: ModelParams or AthleteProfile
        regime: Input signals
        horizon_days: End of the integration window
        output_step_days: Spacing of the returned time grid
        i_threshold: Damage level counted as high risk in the metrics
        initial_state: Override for the parameter set's initial condition
        max_steps: Accepted-step budget for the solver

    Returns:
        Readout with ts, states (6×T), readiness and summary metrics
    """
    p, athlete_name = resolve_params(params)

    logger.info("Athlete: %s | Regime: %s", athlete_name, regime.name)
    logger.info("Horizon: %.2f days, output step = %.5f day", horizon_days, output_step_days)

    drive = build_drive(regime, p)
    z0 = p.initial_state() if initial_state is None else np.asarray(initial_state, dtype=float)

    ts, states = integrate_interval(
        z0, p, drive, 0.0, horizon_days, output_step_days, max_steps=max_steps,
    )
    P = readiness_series(states, p)
    metrics = summarize_metrics(ts, P, states, i_threshold=i_threshold)

    logger.info("Peak P = %.3f at day %.2f | mean P = %.3f | frac time I > %.2f = %.3f",
                metrics.max_p, metrics.t_to_peak, metrics.mean_p,
                i_threshold, metrics.frac_time_i_high)

    return Readout(ts=ts, states=states, readiness=P, metrics=metrics,
                   athlete=athlete_name, regime=regime.name)
