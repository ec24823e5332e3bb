"""
Smoke tests for the scenario and stability driver scripts.
"""

import json

import pytest

import readiness_engine.run_scenarios as run_scenarios_module
from readiness_engine.run_scenarios import run_scenarios
from readiness_engine.run_stability import STATIONARY_REGIMES, run_stability


class TestRunScenarios:

    def test_short_grid(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(run_scenarios_module, "SCENARIOS", [
            ("nominal", "early_hiit", 2.0, "nominal_short.csv"),
            ("sa_r", "sleep_extension", 1.0, "sar_short.csv"),
        ])
        readouts = run_scenarios(output_dir=tmp_path, plot_key="nominal_short.csv")

        assert set(readouts) == {"nominal_short.csv", "sar_short.csv"}
        assert (tmp_path / "nominal_short.csv").exists()
        assert readouts["sar_short.csv"].athlete.startswith("SA-R")
        out = capsys.readouterr().out
        assert "Scenarios simulated: 2" in out
        assert "•" in out

    def test_no_export(self, tmp_path, monkeypatch):
        monkeypatch.setattr(run_scenarios_module, "SCENARIOS", [
            ("nominal", "taper", 1.0, "taper.csv"),
        ])
        run_scenarios(output_dir=tmp_path, export=False)
        assert not list(tmp_path.iterdir())


class TestRunStability:

    def test_stationary_only(self, tmp_path):
        path = tmp_path / "stability.json"
        results = run_stability(profiles=["nominal"], skip_periodic=True, output_path=path)

        assert len(results) == len(STATIONARY_REGIMES)
        saved = json.loads(path.read_text())
        for regime_key in STATIONARY_REGIMES:
            entry = saved[f"nominal×{regime_key}"]
            assert "equilibrium" in entry
            assert "steady_week" not in entry

    def test_unknown_profile(self, tmp_path):
        with pytest.raises(ValueError):
            run_stability(profiles=["nobody"], skip_periodic=True,
                          output_path=tmp_path / "s.json")
