"""
Plain-text and JSON reporting of stability results.
"""
import json
import logging
from pathlib import Path
from typing import Dict

import numpy as np

from readiness_engine.config import STABILITY_JSON
from readiness_engine.analysis.periodic import SteadyWeekSummary
from readiness_engine.analysis.stationary import EquilibriumSummary
from readiness_engine.dynamics.ode import STATE_NAMES

logger = logging.getLogger(__name__)


def _fmt_state(z) -> str:
    return ", ".join(f"{name}={value:.3f}" for name, value in zip(STATE_NAMES, z))


def format_equilibrium(title: str, summary: EquilibriumSummary) -> str:
    js = summary.stability
    half_life = f"{js.half_life_days:.2f}" if np.isfinite(js.half_life_days) else "inf"
    lines = [
        f"== {title} ==",
        f"Equilibrium z* = ({_fmt_state(summary.state)})  P* = {summary.readiness:.3f}",
        f"λ_max(real) = {js.lambda_max:.4f}  half-life(days) ≈ {half_life}  "
        f"[{'stable' if js.stable else 'marginal/unstable'}]",
    ]
    return "\n".join(lines)


def format_steady_week(title: str, summary: SteadyWeekSummary) -> str:
    env = summary.envelope
    lines = [
        f"== Weekly steady rhythm: {title} ==",
        f"|μ|_max = {summary.max_multiplier:.4f}   "
        f"P[min,med,max] = ({env.p_min:.3f}, {env.p_median:.3f}, {env.p_max:.3f})   "
        f"frac time I>thr = {summary.risk_fraction:.3f}",
    ]
    return "\n".join(lines)


def equilibrium_record(summary: EquilibriumSummary) -> Dict:
    js = summary.stability
    return {
        "state": dict(zip(STATE_NAMES, summary.state)),
        "readiness": summary.readiness,
        "eigenvalues": summary.eigenvalues,
        "lambda_max": js.lambda_max,
        "half_life_days": js.half_life_days if np.isfinite(js.half_life_days) else None,
        "weekly_means": summary.means.as_dict(),
    }


def steady_week_record(summary: SteadyWeekSummary) -> Dict:
    return {
        "state": dict(zip(STATE_NAMES, summary.state)),
        "multipliers": summary.multipliers,
        "max_multiplier": summary.max_multiplier,
        "envelope": {
            "P_min": summary.envelope.p_min,
            "P_median": summary.envelope.p_median,
            "P_max": summary.envelope.p_max,
        },
        "risk_fraction": summary.risk_fraction,
    }


class NumpyEncoder(json.JSONEncoder):
    """numpy scalars/arrays to plain JSON; complex numbers as [re, im]."""

    def default(self, obj):
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.complexfloating, complex)):
            return [float(obj.real), float(obj.imag)]
        if isinstance(obj, (np.floating,)):
            return float(obj)
        if isinstance(obj, np.ndarray):
            if np.iscomplexobj(obj):
                return [[float(v.real), float(v.imag)] for v in obj.ravel()]
            return obj.tolist()
        if isinstance(obj, (np.bool_,)):
            return bool(obj)
        return super().default(obj)


def save_stability_json(results: Dict, output_path=None) -> Path:
    """Save a stability results mapping as JSON."""
    output_path = Path(output_path or STABILITY_JSON)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(results, f, indent=2, cls=NumpyEncoder)

    logger.info("Saved stability summary to %s", output_path)
    return output_path
