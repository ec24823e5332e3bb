"""
Six-state readiness ODE: gates and right-hand side.

State order: z = (A, N, Fa, Fc, S, I)
  A   endurance capacity          N   neuromuscular capacity
  Fa  acute fatigue               Fc  chronic fatigue
  S   sleep debt                  I   micro-damage / injury risk

Top row (capacities): gated logistic growth toward the ceiling, linear
detraining, damage penalty. Middle row (fatigue): linear accumulation from
weighted drive, clearance amplified by effective sleep s·q. Bottom row:
sleep debt from wakefulness, strain and stress; damage from load amplified
by current fatigue, repaired by sleep and nutrition.

The algebra lives in ``vector_field`` and is shared by the time-varying
system (``rhs``) and the weekly-averaged surrogate, so the two can never
drift apart.
"""
import numpy as np

from readiness_engine.model.parameters import ModelParams


STATE_NAMES = ("A", "N", "Fa", "Fc", "S", "I")
IDX_A, IDX_N, IDX_FA, IDX_FC, IDX_S, IDX_I = range(6)
N_STATES = len(STATE_NAMES)


# ── Gates ───────────────────────────────────────────────────────

def recovery_gate(S: float, Fc: float, p: ModelParams) -> float:
    """Sleep debt and chronic fatigue throttle capacity growth."""
    return 1.0 / (1.0 + p.c_s * S + p.c_c * Fc)


def interference_gate(u_e: float, p: ModelParams) -> float:
    """Concurrent endurance load throttles neuromuscular growth."""
    return 1.0 / (1.0 + p.mu_e * u_e)


# ── Vector field ────────────────────────────────────────────────

def vector_field(z, p: ModelParams, u_e: float, u_h: float, u_s: float,
                 s: float, sq: float, n: float, x: float) -> np.ndarray:
    """
    dz/dt for sampled inputs.

    Args:
        z: State (A, N, Fa, Fc, S, I)
        p: Model parameters
        u_e, u_h, u_s: Training drive per modality
        s: Sleep indicator
        sq: Effective clearance multiplier s·q (0 when awake)
        n: Nutrition availability
        x: Context stress
    """
    A, N, Fa, Fc, S, I = z

    g_rec = recovery_gate(S, Fc, p)
    g_int = interference_gate(u_e, p)
    strain = p.gamma_e * u_e + p.gamma_h * u_h + p.gamma_s * u_s

    dA = (p.k_a * (p.alpha_e * u_e + p.alpha_h * u_h) * g_rec * (1.0 - A / p.cap_a)
          - A / p.tau_a - p.theta_ai * I)
    dN = (p.k_n * (p.alpha_s * u_s + p.alpha_hn * u_h) * g_rec * g_int * (1.0 - N / p.cap_n)
          - N / p.tau_n - p.theta_ni * I)

    dFa = strain - (1.0 / p.tau_fa + p.rho_a * sq) * Fa
    dFc = p.epsilon * Fa + p.xi_c * x - (1.0 / p.tau_fc + p.rho_c * sq) * Fc

    dS = (p.lambda_w * (1.0 - s) + p.lambda_t * strain + p.xi_s * x
          - (1.0 / p.tau_s + p.mu_s * sq) * S)
    load_to_i = p.psi_0 * (p.kappa_e * u_e + p.kappa_h * u_h + p.kappa_s * u_s) * (
        1.0 + p.chi_a * Fa + p.chi_c * Fc)
    dI = load_to_i - (1.0 / p.tau_i + p.psi_s * sq + p.psi_n * n) * I

    return np.array([dA, dN, dFa, dFc, dS, dI], dtype=float)


def rhs(t: float, z, p: ModelParams, drive) -> np.ndarray:
    """Time-varying right-hand side; ``drive`` is a DriveSignals bundle."""
    return vector_field(z, p, *drive.sample(t))
