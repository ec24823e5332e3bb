"""
Named athlete profiles.
Nominal all-rounder plus three synthetic responders, each a fixed set of
overrides on the nominal parameters.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from readiness_engine.model.parameters import ModelParams


@dataclass(frozen=True)
class AthleteProfile:
    """A parameter set with a display name."""
    name: str
    params: ModelParams


def nominal() -> AthleteProfile:
    return AthleteProfile("Nominal", ModelParams())


def sa_e() -> AthleteProfile:
    """Aerobic responder: faster endurance gains, quicker fatigue clearance."""
    p = ModelParams().with_overrides(
        k_a=0.045, alpha_e=0.70, alpha_h=0.30, k_n=0.035,
        tau_fa=0.9, rho_a=0.60, tau_fc=9.0, rho_c=0.50,
        mu_e=0.18, eta=0.70,
        w_end=0.65, w_str=0.35,
    )
    return AthleteProfile("SA-E (Aerobic responder)", p)


def sa_s() -> AthleteProfile:
    """Neuromuscular responder: strength-driven, more interference and damage."""
    p = ModelParams().with_overrides(
        k_n=0.055, alpha_s=0.80, alpha_hn=0.20, k_a=0.030,
        mu_e=0.55, gamma_s=0.60, kappa_s=0.45, psi_0=0.45,
        chi_a=0.30, chi_c=0.30,
        w_end=0.35, w_str=0.65,
    )
    return AthleteProfile("SA-S (Neuromuscular responder)", p)


def sa_r() -> AthleteProfile:
    """Recovery-limited: sleep debt and chronic fatigue bite harder."""
    p = ModelParams().with_overrides(
        c_s=0.80, c_c=0.60,
        tau_fa=1.3, rho_a=0.35, tau_fc=14.0, rho_c=0.30,
        tau_s=8.0, mu_s=0.25, xi_s=0.25,
        eta=1.50, q0=0.82,
        psi_s=0.20, psi_n=0.15,
        lambda_s=0.60, lambda_i=0.70,
        s0=0.30,
    )
    return AthleteProfile("SA-R (Recovery-limited)", p)


PROFILES: Dict[str, Callable[[], AthleteProfile]] = {
    "nominal": nominal,
    "sa_e": sa_e,
    "sa_s": sa_s,
    "sa_r": sa_r,
}


def get_profile(key: str) -> AthleteProfile:
    """Build a profile by registry key (case-insensitive)."""
    factory = PROFILES.get(key.lower())
    if factory is None:
        raise ValueError(f"Unknown athlete profile {key!r}; known: {', '.join(PROFILES)}")
    return factory()


def resolve_params(athlete) -> Tuple[ModelParams, str]:
    """Accept a ModelParams or an AthleteProfile; return (params, display name)."""
    if isinstance(athlete, AthleteProfile):
        return athlete.params, athlete.name
    if isinstance(athlete, ModelParams):
        return athlete, "custom"
    raise TypeError(f"Expected ModelParams or AthleteProfile, got {type(athlete).__name__}")
