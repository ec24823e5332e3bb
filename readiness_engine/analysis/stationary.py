"""
Stationary surrogate analysis.

Cheap approximation of the long-run "average week": replace every
time-varying input by its mean over one period and study the resulting
autonomous vector field.

1. weekly_averages    — means of uE, uH, uS, s, n, x and of s·q
2. surrogate_rhs      — same ODE algebra with those constants
3. equilibrium        — root of the surrogate field, seeded at the initial state
4. linearisation      — central-difference Jacobian + eigenvalues
5. stability summary  — dominant real part → stable/unstable and half-life

The clearance terms use mean(s·q), the weekly average of the effective
nightly clearance multiplier, not mean(s)·mean(q).
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from readiness_engine.config import (
    AVERAGING_STEP_DAYS,
    EQUILIBRIUM_FTOL,
    JACOBIAN_STEP,
    LN2,
    MAX_ROOT_EVALUATIONS,
    PERIOD_DAYS,
)
from readiness_engine.analysis.rootfind import central_difference_jacobian, solve_root
from readiness_engine.dynamics.ode import vector_field
from readiness_engine.dynamics.readiness import readiness
from readiness_engine.errors import DegenerateInputFailure
from readiness_engine.inputs.quadrature import fixed_step_mean, steps_for
from readiness_engine.inputs.regime import Regime, build_drive
from readiness_engine.model.parameters import ModelParams
from readiness_engine.model.profiles import resolve_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeeklyMeans:
    """Period averages of the inputs; ``sq`` is the mean of s(t)·q(t)."""
    u_e: float
    u_h: float
    u_s: float
    s: float
    sq: float
    n: float
    x: float

    def as_vector(self) -> np.ndarray:
        """Argument order expected by ``vector_field``."""
        return np.array([self.u_e, self.u_h, self.u_s, self.s, self.sq, self.n, self.x])

    def as_dict(self) -> Dict[str, float]:
        return {
            "ubarE": self.u_e, "ubarH": self.u_h, "ubarS": self.u_s,
            "sbar": self.s, "sqbar": self.sq, "nbar": self.n, "xbar": self.x,
        }


@dataclass(frozen=True)
class JacobianSummary:
    """Eigen-structure of a Jacobian: dominant real part and relaxation half-life."""
    eigenvalues: np.ndarray
    lambda_max: float
    half_life_days: float

    @property
    def stable(self) -> bool:
        return self.lambda_max < 0


@dataclass(frozen=True)
class EquilibriumSummary:
    """Equilibrium of the weekly-averaged surrogate."""
    state: np.ndarray
    readiness: float
    jacobian: np.ndarray
    eigenvalues: np.ndarray
    means: WeeklyMeans
    residual: np.ndarray

    @property
    def stability(self) -> JacobianSummary:
        return jacobian_summary(self.jacobian)


def weekly_averages(
    params,
    regime: Regime,
    period_days: float = PERIOD_DAYS,
    dt: float = AVERAGING_STEP_DAYS,
) -> WeeklyMeans:
    """
    Average every input, plus s·q, over [0, period_days] on a grid of step dt.

    Raises:
        DegenerateInputFailure: period_days or dt not strictly positive
    """
    p, _ = resolve_params(params)
    if not np.isfinite(period_days) or period_days <= 0:
        raise DegenerateInputFailure(f"Averaging window must have positive length, got {period_days}")
    n_intervals = steps_for(period_days, dt)
    drive = build_drive(regime, p)

    def mean_of(fn):
        return fixed_step_mean(fn, 0.0, period_days, n_intervals, rule="closed")

    return WeeklyMeans(
        u_e=mean_of(drive.u_e),
        u_h=mean_of(drive.u_h),
        u_s=mean_of(drive.u_s),
        s=mean_of(drive.s),
        sq=mean_of(drive.clearance),
        n=mean_of(drive.n),
        x=mean_of(drive.x),
    )


def surrogate_rhs(z, params: ModelParams, means: WeeklyMeans) -> np.ndarray:
    """Autonomous vector field with every input frozen at its weekly mean."""
    return vector_field(z, params, *means.as_vector())


def jacobian_summary(J) -> JacobianSummary:
    """
    Dominant real part of the spectrum and the matching half-life.

    λmax < 0 → half-life ln2/|λmax| days; otherwise the equilibrium is
    marginal or unstable and the half-life is reported as infinite.
    """
    eig = np.linalg.eigvals(np.asarray(J, dtype=float))
    lambda_max = float(np.max(eig.real))
    half_life = LN2 / abs(lambda_max) if lambda_max < 0 else float("inf")
    return JacobianSummary(eigenvalues=eig, lambda_max=lambda_max, half_life_days=half_life)


def equilibrium_summary(
    params,
    regime: Regime,
    guess: Optional[np.ndarray] = None,
    period_days: float = PERIOD_DAYS,
    dt: float = AVERAGING_STEP_DAYS,
    ftol: float = EQUILIBRIUM_FTOL,
    jacobian_step: float = JACOBIAN_STEP,
) -> EquilibriumSummary:
    """
    Weekly means → equilibrium z* of the surrogate → Jacobian and eigenvalues.

    Args:
        params: ModelParams or AthleteProfile
        regime: Input signals
        guess: Seed for the root finder (defaults to the initial condition)
        period_days, dt: Averaging window and grid step
        ftol: Required max |f(z*)| per component
        jacobian_step: Central-difference step for the Jacobian

    Raises:
        RootFindingFailure: no self-consistent equilibrium found
    """
    p, athlete_name = resolve_params(params)
    means = weekly_averages(p, regime, period_days=period_days, dt=dt)
    z0 = p.initial_state() if guess is None else np.array(guess, dtype=float)

    def field(z):
        return surrogate_rhs(z, p, means)

    def field_jacobian(z):
        return central_difference_jacobian(field, z, jacobian_step)

    sol = solve_root(field, z0, jac=field_jacobian, ftol=ftol,
                     max_evaluations=MAX_ROOT_EVALUATIONS,
                     label=f"equilibrium[{athlete_name} × {regime.name}]")

    J = field_jacobian(sol.x)
    eig = np.linalg.eigvals(J)
    logger.info("Equilibrium %s × %s: z* = %s, max|f| = %.2e",
                athlete_name, regime.name, np.round(sol.x, 4), sol.max_residual)

    return EquilibriumSummary(
        state=sol.x,
        readiness=readiness(sol.x, p),
        jacobian=J,
        eigenvalues=eig,
        means=means,
        residual=sol.residual,
    )
