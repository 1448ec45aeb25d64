"""Scenario definitions for preset simulation starting conditions.

Speeds are in simulation units for the default constants (G=100, M=1000);
circular speed at r=200 is sqrt(500) ~ 22.36.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    radius: float
    speed: float
    description: str
    flight_path_angle_deg: float = 0.0

    def position_vector(self, dimensions: int = 2) -> np.ndarray:
        """Start on the +X axis."""
        position = np.zeros(dimensions, dtype=float)
        position[0] = self.radius
        return position

    def velocity_vector(self, dimensions: int = 2) -> np.ndarray:
        """Prograde velocity in the orbital plane, tilted outward by the flight path angle.

        The orbital plane is x-y in 2D and x-z in 3D, so 3D runs keep the
        world "up" axis as the orbit normal.
        """
        gamma = math.radians(self.flight_path_angle_deg)
        radial = self.speed * math.sin(gamma)
        tangential = self.speed * math.cos(gamma)
        velocity = np.zeros(dimensions, dtype=float)
        velocity[0] = radial
        velocity[1 if dimensions == 2 else 2] = tangential
        return velocity


_V_CIRC = math.sqrt(100.0 * 1000.0 / 200.0)
_V_ESC = math.sqrt(2.0) * _V_CIRC

SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="circular",
        name="Circular",
        radius=200.0,
        speed=_V_CIRC,
        description="Canonical circular orbit at r=200.",
    ),
    Scenario(
        key="elliptical",
        name="Elliptical",
        radius=200.0,
        speed=_V_CIRC * math.sqrt(1.5),
        description="Periapsis start with eccentricity ~0.5.",
    ),
    Scenario(
        key="suborbital",
        name="Suborbital",
        radius=200.0,
        speed=_V_CIRC * 0.5,
        description="Too slow to hold altitude; periapsis dips under the surface.",
    ),
    Scenario(
        key="escape",
        name="Escape",
        radius=200.0,
        speed=_V_ESC * 1.1,
        description="Above escape speed; leaves on a hyperbola.",
    ),
    Scenario(
        key="retrograde",
        name="Retrograde",
        radius=200.0,
        speed=-_V_CIRC,
        description="Circular speed, flown clockwise.",
    ),
    Scenario(
        key="climbing",
        name="Climbing",
        radius=200.0,
        speed=_V_CIRC,
        flight_path_angle_deg=20.0,
        description="Circular speed with a 20 degree outward flight path angle.",
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


__all__ = [
    "DEFAULT_SCENARIO_KEY",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "Scenario",
]
