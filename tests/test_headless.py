import argparse
import math

import numpy as np
import pytest

from maneuver_sim import analyze_run, headless
from maneuver_sim.core.config import PhysicsCfg, Termination
from maneuver_sim.core.maneuver import BurnType
from maneuver_sim.core.simulation import Simulation
from maneuver_sim.data.scenarios import SCENARIOS


def test_parse_burn():
    burn = headless.parse_burn("120:radialOut:2.5")
    assert burn.tick == 120
    assert burn.burn_type is BurnType.RADIAL_OUT
    assert burn.delta_v == 2.5


@pytest.mark.parametrize("text", ["120:prograde", "x:prograde:1", "10:sideways:1", "-1:prograde:1"])
def test_parse_burn_rejects_bad_input(text):
    with pytest.raises(argparse.ArgumentTypeError):
        headless.parse_burn(text)


def test_build_config_defaults_to_escape_in_3d():
    args = headless.build_parser().parse_args(["--dimensions", "3"])
    cfg = headless.build_config(args)
    assert cfg.dimensions == 3
    assert cfg.termination is Termination.ESCAPE

    args = headless.build_parser().parse_args(["--termination", "escape", "--dt", "0.05"])
    cfg = headless.build_config(args)
    assert cfg.dimensions == 2
    assert cfg.termination is Termination.ESCAPE
    assert cfg.dt == 0.05


def test_run_headless_applies_scripted_burns():
    sim = Simulation(PhysicsCfg(max_prediction_steps=2))
    burns = [
        headless.ScriptedBurn(tick=3, burn_type=BurnType.PROGRADE, delta_v=1.0),
        headless.ScriptedBurn(tick=3, burn_type=BurnType.PROGRADE, delta_v=2.0),
        headless.ScriptedBurn(tick=7, burn_type=BurnType.RETROGRADE, delta_v=0.5),
    ]

    result = headless.run_headless(sim, 10, burns)

    assert result is not None
    assert sim.cumulative_delta_v == pytest.approx(3.5)
    assert not sim.is_paused
    assert sim.time == pytest.approx(1.0)


def test_run_headless_resumes_after_extreme_pauses():
    sim = Simulation(PhysicsCfg(max_prediction_steps=2))
    sim.load_scenario(SCENARIOS["elliptical"])

    headless.run_headless(sim, 1_700, pause_at_extreme=True)

    assert sim.time == pytest.approx(170.0)
    assert sim.extreme_watch_armed


def test_record_then_analyze(tmp_path, capsys):
    code = headless.main(
        [
            "--ticks",
            "400",
            "--scenario",
            "elliptical",
            "--burn",
            "100:prograde:2",
            "--runs-dir",
            str(tmp_path),
            "--run-id",
            "demo",
            "--max-prediction-steps",
            "50",
        ]
    )
    assert code == 0
    assert "Run: demo" in capsys.readouterr().out

    run_dir = tmp_path / "demo"
    for name in ("meta.json", "timeseries.csv", "events.csv"):
        assert (run_dir / name).exists()

    summary = analyze_run.analyze(run_dir)
    assert summary.run_id == "demo"
    assert summary.orbit_class == "elliptical"
    assert summary.total_delta_v == pytest.approx(2.0)
    assert summary.event_counts["burn_executed"] == 1
    assert summary.semi_major_axis is not None and summary.semi_major_axis > 400.0
    for name in ("orbit.png", "energy.png", "radius.png", "delta_v.png"):
        assert (run_dir / analyze_run.FIGS_SUBDIR / name).exists()

    assert analyze_run.main(["--runs-dir", str(tmp_path), "--no-figures"]) == 0
    assert "Classification: elliptical" in capsys.readouterr().out


def test_analyze_reports_missing_run(tmp_path):
    with pytest.raises(SystemExit):
        analyze_run.main(["--runs-dir", str(tmp_path)])


def test_classify_and_period_helpers():
    assert analyze_run.classify_orbit(-1.0) == "elliptical"
    assert analyze_run.classify_orbit(1.0) == "hyperbolic"
    assert analyze_run.classify_orbit(0.0) == "parabolic"

    events = [
        {"t": 1.0, "type": "periapsis"},
        {"t": 5.0, "type": "burn_executed"},
        {"t": 9.0, "type": "periapsis"},
        {"t": 20.0, "type": "periapsis"},
    ]
    assert analyze_run.estimate_period(events) == pytest.approx(11.0)
    assert analyze_run.estimate_period(events[:3]) is None
    assert analyze_run.relative_energy_drift(np.array([-250.0, -247.5])) == pytest.approx(-0.01)
    assert math.isclose(analyze_run.relative_energy_drift(np.array([])), 0.0)


def test_summary_elements_match_the_physics_helpers(tmp_path):
    ts = {"energy": np.array([-251.0, -250.0]), "dv_total": np.array([0.0, 1.5])}
    summary = analyze_run.summarize_run(tmp_path / "synthetic", {"mu": 1e5}, ts, [])

    assert summary.orbit_class == "elliptical"
    assert summary.semi_major_axis == pytest.approx(200.0)
    assert summary.period_theoretical == pytest.approx(2 * math.pi * math.sqrt(200.0**3 / 1e5))
    assert summary.total_delta_v == pytest.approx(1.5)

    unbound = analyze_run.summarize_run(tmp_path / "open", {"mu": 1e5}, {"energy": np.array([10.0])}, [])
    assert unbound.semi_major_axis is None
    assert unbound.period_theoretical is None
