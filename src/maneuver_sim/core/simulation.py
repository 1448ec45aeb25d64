"""The simulation object driven by a host application's frame loop."""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from ..data.scenarios import Scenario
from .config import PHYSICS_CFG, PhysicsCfg
from .logging_utils import RunLogger
from .maneuver import BurnType, accumulate, cancel_burn, execute_burn, plan_burn
from .model import PlannedBurn, Satellite, SimState
from .physics import advance, angular_momentum, eccentricity, energy_specific, radial_velocity
from .prediction import Extremes, apsis_kind, find_extremes, is_apsis_crossing, predict_trajectory
from .vector import as_3d, norm, zeros

logger = logging.getLogger(__name__)


class SimPhase(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    PAUSED_WITH_BURN = "paused_with_burn"
    PAUSED_AT_EXTREME = "paused_at_extreme"


class SimEvent(str, Enum):
    PERIAPSIS = "periapsis"
    APOAPSIS = "apoapsis"
    PAUSED_AT_EXTREME = "paused_at_extreme"


class _WatchStage(Enum):
    IDLE = 0
    SKIP = 1
    ACTIVE = 2


class ExtremeWatch:
    """Pause-at-next-apsis trigger.

    Arming enters a skip stage: the next observation only records the radial
    velocity, so a craft that is already sitting on an apsis does not stop
    immediately. After that the first radial-velocity sign change fires and
    disarms the watch.
    """

    def __init__(self) -> None:
        self._stage = _WatchStage.IDLE
        self._prev_vr: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._stage is not _WatchStage.IDLE

    def arm(self) -> None:
        self._stage = _WatchStage.SKIP
        self._prev_vr = None

    def disarm(self) -> None:
        self._stage = _WatchStage.IDLE
        self._prev_vr = None

    def rebase(self) -> None:
        """Forget the last sample, e.g. after a burn changed the velocity."""
        self._prev_vr = None

    def observe(self, vr: float) -> bool:
        if self._stage is _WatchStage.IDLE:
            return False
        if self._stage is _WatchStage.SKIP or self._prev_vr is None:
            self._stage = _WatchStage.ACTIVE
            self._prev_vr = vr
            return False
        fired = is_apsis_crossing(self._prev_vr, vr)
        self._prev_vr = vr
        if fired:
            self.disarm()
        return fired


@dataclass(frozen=True)
class TickResult:
    """Everything a presentation layer needs to draw one frame."""

    trajectory: list[np.ndarray]
    planned_trajectory: list[np.ndarray] = field(default_factory=list)
    extremes: Optional[Extremes] = None
    planned_extremes: Optional[Extremes] = None
    events: tuple[SimEvent, ...] = ()


class Simulation:
    """Owns the craft state and coordinates physics, prediction and burns."""

    def __init__(self, cfg: PhysicsCfg = PHYSICS_CFG, *, run_logger: Optional[RunLogger] = None) -> None:
        cfg.validate()
        self.cfg = cfg
        self.run_logger = run_logger
        dims = cfg.dimensions
        self.state = SimState(
            satellite=Satellite(position=zeros(dims), velocity=zeros(dims))
        )
        self._watch = ExtremeWatch()
        self._paused_at_extreme = False
        self._prev_vr: Optional[float] = None
        self._restart(*self.canonical_state())

    # -- readable state -------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        return self.state.satellite.position.copy()

    @property
    def velocity(self) -> np.ndarray:
        return self.state.satellite.velocity.copy()

    @property
    def pending_burn(self) -> Optional[PlannedBurn]:
        return self.state.pending_burn

    @property
    def cumulative_delta_v(self) -> float:
        return self.state.cumulative_delta_v

    @property
    def is_paused(self) -> bool:
        return self.state.paused

    @property
    def time(self) -> float:
        return self.state.time

    @property
    def extreme_watch_armed(self) -> bool:
        return self._watch.armed

    @property
    def phase(self) -> SimPhase:
        if not self.state.paused:
            return SimPhase.RUNNING
        if self.state.pending_burn is not None:
            return SimPhase.PAUSED_WITH_BURN
        if self._paused_at_extreme:
            return SimPhase.PAUSED_AT_EXTREME
        return SimPhase.PAUSED

    # -- frame loop -----------------------------------------------------

    def tick(self) -> TickResult:
        """Advance one step if running, then rebuild both predicted orbits."""

        events: list[SimEvent] = []
        if not self.state.paused:
            events.extend(self._step())

        sat = self.state.satellite
        trajectory = predict_trajectory(sat.position, sat.velocity, cfg=self.cfg)
        planned: list[np.ndarray] = []
        burn = self.state.pending_burn
        if burn is not None:
            planned = predict_trajectory(sat.position, sat.velocity + burn.delta, cfg=self.cfg)

        return TickResult(
            trajectory=trajectory,
            planned_trajectory=planned,
            extremes=find_extremes(trajectory),
            planned_extremes=find_extremes(planned),
            events=tuple(events),
        )

    def _step(self) -> list[SimEvent]:
        sat = self.state.satellite
        advance(sat, self.cfg.dt, self.cfg)
        self.state.time += self.cfg.dt
        self.state.steps += 1

        events: list[SimEvent] = []
        vr = radial_velocity(sat.position, sat.velocity)
        if self._prev_vr is not None:
            kind = apsis_kind(self._prev_vr, vr)
            if kind is not None:
                events.append(SimEvent(kind))
                self._record_event(kind)
        self._prev_vr = vr

        if self._watch.observe(vr):
            self.state.paused = True
            self._paused_at_extreme = True
            events.append(SimEvent.PAUSED_AT_EXTREME)
            self._record_event(SimEvent.PAUSED_AT_EXTREME.value)
            logger.debug("paused at extreme, t=%.2f r=%.3f", self.state.time, norm(sat.position))

        if self.run_logger is not None and self.state.steps % self.cfg.log_every_steps == 0:
            self._record_sample()
        return events

    # -- commands -------------------------------------------------------

    def plan_maneuver(self, burn_type: BurnType, delta_v: float) -> PlannedBurn:
        """Pause and add a burn of ``delta_v`` in the ``burn_type`` direction."""

        vector = plan_burn(self.state.satellite.velocity, burn_type, delta_v, self.cfg)
        self.state.paused = True
        self.state.pending_burn = accumulate(self.state.pending_burn, vector)
        burn_type = BurnType(burn_type)
        logger.debug(
            "planned %s burn of %.3f, pending %.3f",
            burn_type.value,
            delta_v,
            self.state.pending_burn.magnitude,
        )
        self._record_event(
            "burn_planned",
            {
                "burn_type": burn_type.value,
                "delta_v": float(delta_v),
                "pending": self.state.pending_burn.magnitude,
            },
        )
        return self.state.pending_burn

    def execute_burn(self) -> float:
        """Commit the pending burn and resume. Returns the magnitude applied."""

        burn = self.state.pending_burn
        if burn is None:
            return 0.0
        execute_burn(self.state, burn)
        self.state.paused = False
        self._paused_at_extreme = False
        self._prev_vr = None
        self._watch.rebase()
        logger.debug("executed burn of %.3f, total %.3f", burn.magnitude, self.state.cumulative_delta_v)
        self._record_event(
            "burn_executed",
            {
                "delta": burn.delta.tolist(),
                "magnitude": burn.magnitude,
                "dv_total": self.state.cumulative_delta_v,
            },
        )
        return burn.magnitude

    def cancel_burn(self) -> None:
        if self.state.pending_burn is None:
            return
        magnitude = self.state.pending_burn.magnitude
        cancel_burn(self.state)
        logger.debug("cancelled burn of %.3f", magnitude)
        self._record_event("burn_cancelled", {"magnitude": magnitude})

    def toggle_pause(self) -> bool:
        """Flip running/paused unless a burn is waiting. Returns the new pause state."""

        if self.state.pending_burn is not None:
            return self.state.paused
        self.state.paused = not self.state.paused
        if not self.state.paused:
            self._paused_at_extreme = False
        return self.state.paused

    def execute_or_toggle(self) -> bool:
        if self.state.pending_burn is not None:
            self.execute_burn()
            return self.state.paused
        return self.toggle_pause()

    def arm_pause_at_extreme(self) -> None:
        self._watch.arm()

    def reset(self) -> None:
        """Return to the canonical circular orbit with no burns on record."""

        self._restart(*self.canonical_state())
        self._record_event("reset")

    def load_scenario(self, scenario: Scenario) -> None:
        dims = self.cfg.dimensions
        self._restart(scenario.position_vector(dims), scenario.velocity_vector(dims))
        self._record_event("scenario", {"key": scenario.key})

    def canonical_state(self) -> tuple[np.ndarray, np.ndarray]:
        dims = self.cfg.dimensions
        position = zeros(dims)
        velocity = zeros(dims)
        position[0] = self.cfg.initial_radius
        # 2D orbits run in the x-y plane, 3D ones in x-z around the up axis.
        velocity[1 if dims == 2 else 2] = self.cfg.circular_speed()
        return position, velocity

    def _restart(self, position: np.ndarray, velocity: np.ndarray) -> None:
        self.state.reset(position, velocity)
        self._paused_at_extreme = False
        self._prev_vr = None
        self._watch.disarm()

    # -- recording ------------------------------------------------------

    def describe(self) -> dict:
        """Run metadata for :meth:`RunLogger.write_meta`."""

        meta = dataclasses.asdict(self.cfg)
        meta["termination"] = self.cfg.termination.value
        meta["up_axis"] = list(self.cfg.up_axis)
        meta["mu"] = self.cfg.mu
        meta["R0"] = self.state.satellite.position.tolist()
        meta["V0"] = self.state.satellite.velocity.tolist()
        meta["integrator"] = "symplectic_euler"
        return meta

    def _record_sample(self) -> None:
        sat = self.state.satellite
        r = sat.position
        v = sat.velocity
        h = angular_momentum(r, v)
        if r.shape[0] == 3:
            h = norm(h)
        self.run_logger.log_ts(
            [
                self.state.time,
                *as_3d(r),
                *as_3d(v),
                norm(r),
                norm(v),
                energy_specific(r, v, self.cfg),
                h,
                eccentricity(r, v, self.cfg),
                self.state.cumulative_delta_v,
            ]
        )

    def _record_event(self, event_type: str, details: Optional[dict] = None) -> None:
        if self.run_logger is None:
            return
        sat = self.state.satellite
        self.run_logger.log_event(
            self.state.time,
            event_type,
            norm(sat.position),
            norm(sat.velocity),
            details,
        )


__all__ = ["ExtremeWatch", "SimEvent", "SimPhase", "Simulation", "TickResult"]
