"""
Readiness Engine — Stability analysis
For every athlete × regime combination:
  1. Stationary surrogate: weekly means → equilibrium → eigenvalues, half-life
  2. Weekly rhythm: Poincaré fixed point → Floquet multipliers → steady-week envelope
Results are printed and saved to JSON.
"""
import sys
import time
import logging
from pathlib import Path
from typing import Dict, List

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from readiness_engine.config import STABILITY_JSON
from readiness_engine.analysis.periodic import steady_weekly_summary
from readiness_engine.analysis.stationary import equilibrium_summary
from readiness_engine.errors import RootFindingFailure
from readiness_engine.inputs.regimes import get_regime
from readiness_engine.model.profiles import PROFILES, get_profile
from readiness_engine.output.report import (
    equilibrium_record,
    format_equilibrium,
    format_steady_week,
    save_stability_json,
    steady_week_record,
)


STATIONARY_REGIMES: List[str] = ["early_hiit", "evening_intensity", "alternating_hard_easy", "taper"]
PERIODIC_REGIMES: List[str] = ["early_hiit", "evening_intensity", "alternating_hard_easy", "taper"]


def run_stability(profiles: List[str] = None, skip_periodic: bool = False,
                  output_path=STABILITY_JSON) -> Dict:
    """Run both analyses over the grid and save the JSON summary."""
    profiles = profiles or list(PROFILES)
    results = {}

    print("=" * 60)
    print("READINESS ENGINE — Stability analysis")
    print("=" * 60)

    # ── Phase 1: Stationary surrogate ───────────────────────────
    print("\n▶ Phase 1: Weekly-averaged equilibria...")
    for profile_key in profiles:
        athlete = get_profile(profile_key)
        for regime_key in STATIONARY_REGIMES:
            regime = get_regime(regime_key)
            key = f"{profile_key}×{regime_key}"
            try:
                eq = equilibrium_summary(athlete, regime)
            except RootFindingFailure as exc:
                print(f"  ✗ {key}: {exc}")
                results.setdefault(key, {})["equilibrium_error"] = str(exc)
                continue
            print(format_equilibrium(f"{athlete.name} × {regime.name}", eq))
            results.setdefault(key, {})["equilibrium"] = equilibrium_record(eq)

    # ── Phase 2: Weekly periodic steady state ───────────────────
    if not skip_periodic:
        print("\n▶ Phase 2: Weekly Poincaré / Floquet analysis...")
        for profile_key in profiles:
            athlete = get_profile(profile_key)
            for regime_key in PERIODIC_REGIMES:
                regime = get_regime(regime_key)
                key = f"{profile_key}×{regime_key}"
                start = time.time()
                try:
                    st = steady_weekly_summary(athlete, regime)
                except RootFindingFailure as exc:
                    print(f"  ✗ {key}: {exc}")
                    results.setdefault(key, {})["steady_week_error"] = str(exc)
                    continue
                print(format_steady_week(f"{athlete.name} × {regime.name}", st))
                print(f"    ({time.time() - start:.1f}s)")
                results.setdefault(key, {})["steady_week"] = steady_week_record(st)

    path = save_stability_json(results, output_path)
    print("\n" + "=" * 60)
    print("STABILITY ANALYSIS COMPLETE")
    print("=" * 60)
    print(f"  Combinations: {len(results)}")
    print(f"  Output: {path}")
    print()
    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Readiness stability analysis")
    parser.add_argument("--profiles", nargs="*", default=None,
                        help=f"Profile keys (default: all of {', '.join(PROFILES)})")
    parser.add_argument("--skip-periodic", action="store_true",
                        help="Only run the stationary surrogate (fast)")
    parser.add_argument("--out", type=str, default=str(STABILITY_JSON), help="JSON output path")
    parser.add_argument("--verbose", action="store_true", help="Log solver progress")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )
    run_stability(profiles=args.profiles, skip_periodic=args.skip_periodic, output_path=args.out)
