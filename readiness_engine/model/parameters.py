"""
Model parameters for the six-state readiness ODE.

One flat, explicit bundle of coefficients (no nested dicts) so every term of
the vector field reads directly off a named field. Units: time in days,
except the bedtime-kernel decay and horizon which are given in hours and
converted where the kernel is built.

Nominal values describe an all-round athlete. Named variants are derived
once with ``with_overrides`` and are never mutated afterwards.
"""
from dataclasses import dataclass, fields, replace
import math
import numbers

import numpy as np


# Fields that must be strictly positive (time constants, capacities, baseline efficiency)
_STRICTLY_POSITIVE = (
    "cap_a", "tau_a", "cap_n", "tau_n",
    "tau_fa", "tau_fc", "tau_s", "tau_i",
    "q0", "sigma_b_hours",
)


@dataclass(frozen=True)
class ModelParams:
    """Coefficients of the readiness model plus its initial state."""
    # ── Capacity A (endurance) ──────────────────────────────────
    k_a: float = 0.035          # growth rate
    alpha_e: float = 0.60       # endurance drive weight
    alpha_h: float = 0.40       # HIIT drive weight
    cap_a: float = 1.0          # logistic ceiling
    tau_a: float = 50.0         # detraining time constant
    theta_ai: float = 0.030     # damage penalty
    c_s: float = 0.50           # recovery gate: sleep-debt sensitivity
    c_c: float = 0.40           # recovery gate: chronic-fatigue sensitivity

    # ── Capacity N (neuromuscular) ──────────────────────────────
    k_n: float = 0.040
    alpha_s: float = 0.70       # strength drive weight
    alpha_hn: float = 0.30      # HIIT drive weight
    cap_n: float = 1.0
    tau_n: float = 35.0
    theta_ni: float = 0.030
    mu_e: float = 0.30          # interference from concurrent endurance load

    # ── Fatigue ────────────────────────────────────────────────
    gamma_e: float = 0.55
    gamma_h: float = 0.90
    gamma_s: float = 0.45
    tau_fa: float = 1.0
    rho_a: float = 0.50         # sleep-driven acute clearance
    epsilon: float = 0.18       # acute → chronic transfer
    xi_c: float = 0.20          # context stress → chronic fatigue
    tau_fc: float = 10.0
    rho_c: float = 0.40

    # ── Sleep debt S ───────────────────────────────────────────
    lambda_w: float = 0.30      # accumulation while awake
    lambda_t: float = 0.20      # accumulation from training strain
    xi_s: float = 0.15          # accumulation from context stress
    tau_s: float = 6.0
    mu_s: float = 0.30

    # ── Micro-damage I ─────────────────────────────────────────
    psi_0: float = 0.40
    kappa_e: float = 0.30
    kappa_h: float = 0.35
    kappa_s: float = 0.35
    chi_a: float = 0.25         # amplification by acute fatigue
    chi_c: float = 0.25         # amplification by chronic fatigue
    tau_i: float = 14.0
    psi_s: float = 0.25         # sleep-linked repair
    psi_n: float = 0.20         # nutrition-linked repair

    # ── Sleep efficiency and bedtime kernel ────────────────────
    q0: float = 0.88
    eta: float = 1.00
    beta_e: float = 0.30
    beta_h: float = 0.40
    beta_s: float = 0.30
    sigma_b_hours: float = 1.5  # kernel decay
    h_b_hours: float = 6.0      # kernel look-back horizon

    # ── Readiness weights ──────────────────────────────────────
    w_end: float = 0.50
    w_str: float = 0.50
    lambda_a: float = 0.30
    lambda_c: float = 0.50
    lambda_s: float = 0.40
    lambda_i: float = 0.60

    # ── Initial conditions ─────────────────────────────────────
    a0: float = 0.65
    n0: float = 0.65
    fa0: float = 0.20
    fc0: float = 0.20
    s0: float = 0.20
    i0: float = 0.15

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
                raise ValueError(f"Parameter {f.name} must be a finite number, got {value!r}")
            if value < 0:
                raise ValueError(f"Parameter {f.name} must be non-negative, got {value}")
        for name in _STRICTLY_POSITIVE:
            if getattr(self, name) <= 0:
                raise ValueError(f"Parameter {name} must be strictly positive")

    def with_overrides(self, **changes) -> "ModelParams":
        """Return a validated copy with the given fields replaced."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def initial_state(self) -> np.ndarray:
        """Initial state vector (A, N, Fa, Fc, S, I)."""
        return np.array([self.a0, self.n0, self.fa0, self.fc0, self.s0, self.i0], dtype=float)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
