"""Analyze a recorded simulation run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .core.logging_utils import LAST_RUN_MARKER
from .core.physics import period_from_semi_major_axis, semi_major_axis_from_energy

logger = logging.getLogger(__name__)

TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
ENERGY_TOL = 1e-4  # specific energy tolerance for orbit classification


@dataclass(frozen=True)
class RunSummary:
    run_id: str
    orbit_class: str
    rel_drift: float
    semi_major_axis: Optional[float]
    period_theoretical: Optional[float]
    period_simulated: Optional[float]
    total_delta_v: float
    event_counts: Dict[str, int]


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "t": float(row["t"]),
                "type": row["type"],
                "r": float(row["r"]),
                "v": float(row["v"]),
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    logger.warning("Unparseable event details at t=%s: %r", row["t"], details_raw)
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def classify_orbit(energy_last: float) -> str:
    if energy_last < -ENERGY_TOL:
        return "elliptical"
    if energy_last > ENERGY_TOL:
        return "hyperbolic"
    return "parabolic"


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {
        "periapsis": 0,
        "apoapsis": 0,
        "burn_executed": 0,
        "paused_at_extreme": 0,
    }
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def estimate_period(events: List[dict]) -> float | None:
    """Time between the last two periapsis passages since the last burn."""

    last_burn = max((e["t"] for e in events if e["type"] == "burn_executed"), default=-math.inf)
    periapses = [e["t"] for e in events if e["type"] == "periapsis" and e["t"] > last_burn]
    if len(periapses) >= 2:
        return periapses[-1] - periapses[-2]
    return None


def relative_energy_drift(energy: np.ndarray) -> float:
    if not energy.size:
        return 0.0
    denom = energy[0] if abs(energy[0]) > 1e-12 else 1.0
    return float((energy[-1] - energy[0]) / denom)


def summarize_run(run_dir: Path, meta: dict, ts: Dict[str, np.ndarray], events: List[dict]) -> RunSummary:
    energy = ts.get("energy", np.array([]))
    energy_last = float(energy[-1]) if energy.size else 0.0
    orbit_class = classify_orbit(energy_last) if energy.size else "unknown"

    mu = float(meta.get("mu", 0.0))
    a = None
    if mu > 0 and energy.size:
        a = semi_major_axis_from_energy(energy_last, mu)
    period = period_from_semi_major_axis(a, mu)

    dv_total = ts.get("dv_total", np.array([]))
    return RunSummary(
        run_id=run_dir.name,
        orbit_class=orbit_class,
        rel_drift=relative_energy_drift(energy),
        semi_major_axis=a,
        period_theoretical=period,
        period_simulated=estimate_period(events),
        total_delta_v=float(dv_total[-1]) if dv_total.size else 0.0,
        event_counts=summarize_events(events),
    )


def plot_orbit(fig_dir: Path, ts: Dict[str, np.ndarray], body_radius: float) -> None:
    fig, ax = plt.subplots(figsize=(6, 6))
    # 3D runs orbit in the x-z plane
    horizontal = ts["x"]
    vertical = ts["z"] if np.any(ts.get("z", np.zeros(1))) else ts["y"]
    ax.plot(horizontal, vertical, color="#6bc5c0", lw=1.5, label="Craft")
    theta = np.linspace(0, 2 * np.pi, 256)
    ax.fill(body_radius * np.cos(theta), body_radius * np.sin(theta), color="#FFB900", alpha=0.6, label="Central body")
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x")
    ax.set_ylabel("y / z")
    ax.set_title("Orbit")
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "orbit.png", dpi=150)
    plt.close(fig)


def plot_energy(fig_dir: Path, ts: Dict[str, np.ndarray], rel_drift: float) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["energy"], color="#ffa94d")
    ax.set_xlabel("t")
    ax.set_ylabel("Specific energy")
    ax.set_title(f"Specific energy (relative drift {rel_drift:.2e})")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "energy.png", dpi=150)
    plt.close(fig)


def plot_radius(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["r"], color="#4dabf7")
    for event in events:
        if event["type"] == "periapsis":
            ax.axvline(event["t"], color="#d9480f", linestyle="--", alpha=0.5, label="Periapsis")
        elif event["type"] == "apoapsis":
            ax.axvline(event["t"], color="#1864ab", linestyle=":", alpha=0.5, label="Apoapsis")
        elif event["type"] == "burn_executed":
            ax.axvline(event["t"], color="#2b8a3e", alpha=0.7, label="Burn")
    handles, labels = ax.get_legend_handles_labels()
    if handles:
        unique = dict(zip(labels, handles))
        ax.legend(list(unique.values()), list(unique.keys()))
    ax.set_xlabel("t")
    ax.set_ylabel("r")
    ax.set_title("Radius over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "radius.png", dpi=150)
    plt.close(fig)


def plot_delta_v(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.step(ts["t"], ts["dv_total"], where="post", color="#94d82d")
    ax.set_xlabel("t")
    ax.set_ylabel("Cumulative delta-V")
    ax.set_title("Delta-V spent")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "delta_v.png", dpi=150)
    plt.close(fig)


def print_summary(summary: RunSummary) -> None:
    print(f"Run: {summary.run_id}")
    print(f" Classification: {summary.orbit_class}")
    if summary.semi_major_axis is not None:
        print(f" Semi-major axis a = {summary.semi_major_axis:.3f}")
    else:
        print(" Semi-major axis: undefined (open trajectory)")
    if summary.period_theoretical is not None:
        print(f" Theoretical period T = {summary.period_theoretical:.3f}")
    if summary.period_simulated is not None:
        print(f" Simulated period (last two periapses) T = {summary.period_simulated:.3f}")
    else:
        print(" Simulated period: needs two periapsis passages after the last burn")
    print(f" Relative energy drift dE/E = {summary.rel_drift:.3e}")
    print(f" Total delta-V = {summary.total_delta_v:.3f}")
    print(" Events:" + ",".join(f" {etype}: {count}" for etype, count in summary.event_counts.items()))


def resolve_run_dir(base_runs_dir: Path, run_dir: Optional[str]) -> Path:
    if run_dir:
        run_path = Path(run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / run_dir
        return run_path
    last_run_file = base_runs_dir / LAST_RUN_MARKER
    if not last_run_file.exists():
        raise FileNotFoundError(f"no run given and {last_run_file} is missing")
    return base_runs_dir / last_run_file.read_text(encoding="utf-8").strip()


def analyze(run_path: Path, *, make_figures: bool = True) -> RunSummary:
    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME
    for path in (meta_path, ts_path, ev_path):
        if not path.exists():
            raise FileNotFoundError(f"run directory is missing {path.name}")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)
    ts = load_timeseries(ts_path)
    events = load_events(ev_path)
    if not ts or not ts.get("t", np.array([])).size:
        raise ValueError(f"{ts_path} holds no samples")

    summary = summarize_run(run_path, meta, ts, events)
    if make_figures:
        fig_dir = ensure_fig_dir(run_path)
        plot_orbit(fig_dir, ts, float(meta.get("central_body_radius", 0.0)))
        plot_energy(fig_dir, ts, summary.rel_drift)
        plot_radius(fig_dir, ts, events)
        plot_delta_v(fig_dir, ts)
    return summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze a recorded run and write figures.")
    parser.add_argument("run_dir", nargs="?", help="path to (or id of) a run directory")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    parser.add_argument("--no-figures", action="store_true")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        run_path = resolve_run_dir(args.runs_dir, args.run_dir)
        summary = analyze(run_path, make_figures=not args.no_figures)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    print_summary(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
