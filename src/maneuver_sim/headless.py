"""Run the simulation without a display and record it for later analysis."""
from __future__ import annotations

import argparse
import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .core.config import PHYSICS_CFG, PhysicsCfg, Termination
from .core.logging_utils import RunLogger
from .core.maneuver import BurnType
from .core.simulation import SimEvent, Simulation, TickResult
from .core.vector import norm
from .data.scenarios import DEFAULT_SCENARIO_KEY, SCENARIO_DISPLAY_ORDER, SCENARIOS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptedBurn:
    """A burn planned and executed at a given tick."""

    tick: int
    burn_type: BurnType
    delta_v: float


def parse_burn(text: str) -> ScriptedBurn:
    """Parse ``TICK:TYPE:DV`` (e.g. ``300:prograde:5``)."""

    parts = text.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected TICK:TYPE:DV, got {text!r}")
    tick_text, type_text, dv_text = parts
    try:
        tick = int(tick_text)
        delta_v = float(dv_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"bad burn {text!r}: {exc}") from exc
    try:
        burn_type = BurnType(type_text)
    except ValueError as exc:
        choices = ", ".join(b.value for b in BurnType)
        raise argparse.ArgumentTypeError(f"unknown burn type {type_text!r} (choose from {choices})") from exc
    if tick < 0:
        raise argparse.ArgumentTypeError("burn tick must be >= 0")
    return ScriptedBurn(tick=tick, burn_type=burn_type, delta_v=delta_v)


def run_headless(
    sim: Simulation,
    ticks: int,
    burns: Sequence[ScriptedBurn] = (),
    *,
    pause_at_extreme: bool = False,
) -> Optional[TickResult]:
    """Drive ``sim`` for ``ticks`` frames and return the last frame.

    Scripted burns are planned and committed before the frame with the same
    index. An auto-pause at an extreme resumes on the following frame so that
    a headless run always covers the full tick budget.
    """

    by_tick: dict[int, list[ScriptedBurn]] = {}
    for burn in burns:
        by_tick.setdefault(burn.tick, []).append(burn)

    if pause_at_extreme:
        sim.arm_pause_at_extreme()

    result: Optional[TickResult] = None
    for tick in range(ticks):
        for burn in by_tick.get(tick, ()):
            sim.plan_maneuver(burn.burn_type, burn.delta_v)
        if tick in by_tick:
            sim.execute_burn()
        elif sim.is_paused and sim.pending_burn is None:
            sim.toggle_pause()

        result = sim.tick()
        if SimEvent.PAUSED_AT_EXTREME in result.events:
            logger.info("Paused at extreme on tick %d (t=%.1f)", tick, sim.time)
            if pause_at_extreme:
                sim.arm_pause_at_extreme()
    return result


def build_config(args: argparse.Namespace, base: PhysicsCfg = PHYSICS_CFG) -> PhysicsCfg:
    overrides: dict = {"dimensions": args.dimensions}
    if args.termination is not None:
        overrides["termination"] = Termination(args.termination)
    elif args.dimensions == 3:
        overrides["termination"] = Termination.ESCAPE
    if args.dt is not None:
        overrides["dt"] = args.dt
    if args.max_prediction_steps is not None:
        overrides["max_prediction_steps"] = args.max_prediction_steps
    cfg = dataclasses.replace(base, **overrides)
    cfg.validate()
    return cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a headless orbit simulation and record it.")
    parser.add_argument("--ticks", type=int, default=2_000, help="number of frames to simulate")
    parser.add_argument("--dimensions", type=int, choices=(2, 3), default=2)
    parser.add_argument(
        "--termination",
        choices=[t.value for t in Termination],
        default=None,
        help="trajectory prediction strategy (default: closed_orbit in 2D, escape in 3D)",
    )
    parser.add_argument("--dt", type=float, default=None, help="physics time step")
    parser.add_argument("--max-prediction-steps", type=int, default=None, help="step cap for predicted orbits")
    parser.add_argument(
        "--scenario",
        choices=SCENARIO_DISPLAY_ORDER,
        default=DEFAULT_SCENARIO_KEY,
    )
    parser.add_argument(
        "--burn",
        dest="burns",
        action="append",
        type=parse_burn,
        default=[],
        metavar="TICK:TYPE:DV",
        help="plan and execute a burn at the given tick (repeatable)",
    )
    parser.add_argument("--pause-at-extreme", action="store_true", help="log every apsis auto-pause")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.ticks <= 0:
        parser.error("--ticks must be > 0")

    try:
        cfg = build_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    scenario = SCENARIOS[args.scenario]
    with RunLogger(args.runs_dir, args.run_id) as run_logger:
        sim = Simulation(cfg, run_logger=run_logger)
        sim.load_scenario(scenario)
        meta = sim.describe()
        meta["scenario_key"] = scenario.key
        meta["scenario_name"] = scenario.name
        meta["ticks"] = args.ticks
        meta["burns"] = [
            {"tick": b.tick, "burn_type": b.burn_type.value, "delta_v": b.delta_v} for b in args.burns
        ]
        run_logger.write_meta(meta)

        result = run_headless(sim, args.ticks, args.burns, pause_at_extreme=args.pause_at_extreme)

    print(f"Run: {run_logger.run_id}")
    print(f" Scenario: {scenario.name}")
    print(f" t = {sim.time:.1f}, |r| = {norm(sim.position):.2f}")
    print(f" Total delta-V: {sim.cumulative_delta_v:.2f}")
    if result is not None and result.extremes is not None:
        pe_h, ap_h = result.extremes.altitudes(cfg)
        print(f" Predicted Pe h: {pe_h:.1f}  Ap h: {ap_h:.1f}  ({len(result.trajectory)} points)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
