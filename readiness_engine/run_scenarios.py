"""
Readiness Engine — Scenario runs
Simulates the athlete × regime scenarios used in the readiness figures,
exports each readiness series as CSV and prints an ASCII chart of one.
"""
import sys
import logging
from pathlib import Path
from typing import Dict, List, Tuple

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from readiness_engine.config import DEFAULT_OUTPUT_STEP_DAYS, FIGDATA_DIR
from readiness_engine.errors import ReadinessModelError
from readiness_engine.inputs.regimes import get_regime
from readiness_engine.model.profiles import get_profile
from readiness_engine.output.ascii_plot import ascii_plot
from readiness_engine.output.csv_export import save_readiness_csv
from readiness_engine.simulation.simulator import Readout, simulate


# (profile key, regime key, horizon days, csv name)
SCENARIOS: List[Tuple[str, str, float, str]] = [
    ("nominal", "early_hiit", 42.0, "nominal_early_am_hiit.csv"),
    ("nominal", "evening_intensity", 42.0, "nominal_evening_intensity.csv"),
    ("sa_e", "polarized", 42.0, "sae_polarized_midday.csv"),
    ("sa_s", "split_day", 42.0, "sas_split_day.csv"),
    ("sa_r", "alternating_hard_easy", 42.0, "sar_alt_hard_easy.csv"),
    # shorter horizons
    ("nominal", "taper", 21.0, "nominal_taper.csv"),
    ("sa_r", "sleep_extension", 28.0, "sar_sleep_extension.csv"),
]


def run_scenarios(output_dir=FIGDATA_DIR, export: bool = True,
                  plot_key: str = "nominal_early_am_hiit.csv") -> Dict[str, Readout]:
    """
    Simulate every scenario, optionally export CSVs, and print a chart.

    Returns:
        Mapping csv name → Readout
    """
    print("=" * 60)
    print("READINESS ENGINE — Scenario runs")
    print("=" * 60)

    readouts = {}
    for profile_key, regime_key, horizon, csv_name in SCENARIOS:
        athlete = get_profile(profile_key)
        regime = get_regime(regime_key)
        print(f"\n▶ {athlete.name} × {regime.name} ({horizon:.0f} days)")
        try:
            rd = simulate(athlete, regime, horizon_days=horizon,
                          output_step_days=DEFAULT_OUTPUT_STEP_DAYS)
        except ReadinessModelError as exc:
            print(f"  ✗ {exc}")
            raise

        m = rd.metrics
        print(f"  → Peak P = {m.max_p:.3f} at day {m.t_to_peak:.2f}, mean P = {m.mean_p:.3f}, "
              f"frac time I > {m.i_threshold:.1f} = {m.frac_time_i_high:.3f}")

        if export:
            path = save_readiness_csv(rd, Path(output_dir) / csv_name)
            print(f"  → Saved {path.name} (rows={rd.ts.size})")
        readouts[csv_name] = rd

    if plot_key in readouts:
        rd = readouts[plot_key]
        print(f"\nReadiness — {rd.athlete} × {rd.regime}")
        print(ascii_plot(rd.readiness))

    print("\n" + "=" * 60)
    print(f"  Scenarios simulated: {len(readouts)}")
    if export:
        print(f"  Output: {output_dir}")
    print()
    return readouts


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Readiness scenario runs")
    parser.add_argument("--no-export", action="store_true", help="Skip CSV export")
    parser.add_argument("--out", type=str, default=str(FIGDATA_DIR), help="CSV output directory")
    parser.add_argument("--verbose", action="store_true", help="Log solver progress")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )
    run_scenarios(output_dir=args.out, export=not args.no_export)
