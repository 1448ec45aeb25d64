"""Configuration dataclasses for the maneuver simulation."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .errors import ConfigError


class Termination(str, Enum):
    """How trajectory prediction decides that it has seen enough."""

    CLOSED_ORBIT = "closed_orbit"
    ESCAPE = "escape"


@dataclass(frozen=True)
class PhysicsCfg:
    gravitational_constant: float = 100.0
    central_mass: float = 1000.0
    dt: float = 0.1
    initial_radius: float = 200.0
    central_body_radius: float = 30.0
    dimensions: int = 2
    up_axis: tuple[float, float, float] = (0.0, 1.0, 0.0)
    termination: Termination = Termination.CLOSED_ORBIT
    max_prediction_steps: int = 2_000
    closure_settle_steps: int = 50
    closure_speed_tolerance: float = 0.1
    closure_angle_tolerance: float = 0.1
    escape_radius: float = 2_000.0
    escape_min_points: int = 500
    log_every_steps: int = 20

    @property
    def mu(self) -> float:
        return self.gravitational_constant * self.central_mass

    def circular_speed(self, radius: float | None = None) -> float:
        """Speed of a circular orbit at *radius* (defaults to the start radius)."""

        r = self.initial_radius if radius is None else radius
        return math.sqrt(self.mu / r)

    def validate(self) -> None:
        if self.gravitational_constant <= 0:
            raise ConfigError("gravitational_constant must be > 0")
        if self.central_mass <= 0:
            raise ConfigError("central_mass must be > 0")
        if self.dt <= 0:
            raise ConfigError("dt must be > 0")
        if self.initial_radius <= 0:
            raise ConfigError("initial_radius must be > 0")
        if self.central_body_radius < 0:
            raise ConfigError("central_body_radius must be >= 0")
        if self.dimensions not in (2, 3):
            raise ConfigError("dimensions must be 2 or 3")
        if len(self.up_axis) != 3 or not any(self.up_axis):
            raise ConfigError("up_axis must be a non-zero 3D vector")
        if self.max_prediction_steps <= 0:
            raise ConfigError("max_prediction_steps must be > 0")
        if self.closure_settle_steps < 0:
            raise ConfigError("closure_settle_steps must be >= 0")
        if self.escape_radius <= 0:
            raise ConfigError("escape_radius must be > 0")
        if self.escape_min_points < 0:
            raise ConfigError("escape_min_points must be >= 0")
        if self.log_every_steps <= 0:
            raise ConfigError("log_every_steps must be > 0")


PHYSICS_CFG = PhysicsCfg()
PHYSICS_CFG_3D = PhysicsCfg(dimensions=3, termination=Termination.ESCAPE)


__all__ = ["PHYSICS_CFG", "PHYSICS_CFG_3D", "PhysicsCfg", "Termination"]
