"""Data models for the maneuver simulation state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np


@dataclass
class Satellite:
    """Mutable position/velocity of the simulated craft."""

    position: np.ndarray = field(
        default_factory=lambda: np.zeros(2, dtype=float)
    )
    velocity: np.ndarray = field(
        default_factory=lambda: np.zeros(2, dtype=float)
    )

    def copy(self) -> "Satellite":
        return Satellite(position=self.position.copy(), velocity=self.velocity.copy())


@dataclass(frozen=True)
class PlannedBurn:
    """Summed velocity change of every burn planned since the last commit."""

    delta: np.ndarray

    def __post_init__(self) -> None:
        # Own a read-only copy so callers cannot edit a pending burn in place.
        delta = np.array(self.delta, dtype=float)
        delta.flags.writeable = False
        object.__setattr__(self, "delta", delta)

    @property
    def magnitude(self) -> float:
        return float(np.linalg.norm(self.delta))


@dataclass
class SimState:
    """High level simulation state container."""

    satellite: Satellite
    time: float = 0.0
    steps: int = 0
    paused: bool = False
    pending_burn: Optional[PlannedBurn] = None
    cumulative_delta_v: float = 0.0

    def reset(self, position: np.ndarray, velocity: np.ndarray) -> None:
        self.satellite.position = position.copy()
        self.satellite.velocity = velocity.copy()
        self.time = 0.0
        self.steps = 0
        self.paused = False
        self.pending_burn = None
        self.cumulative_delta_v = 0.0


__all__ = ["PlannedBurn", "Satellite", "SimState"]
