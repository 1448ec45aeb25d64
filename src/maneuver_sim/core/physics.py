"""Physics helpers for the maneuver simulation."""
from __future__ import annotations

import math

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .errors import CentralBodyCollisionError
from .model import Satellite
from .vector import as_3d, cross, norm


def acceleration(r: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> np.ndarray:
    """Gravitational acceleration towards the central body at the origin."""

    rmag = norm(r)
    if rmag == 0.0 or not math.isfinite(rmag):
        raise CentralBodyCollisionError(r)
    magnitude = cfg.mu / (rmag * rmag)
    return -magnitude * (r / rmag)


def symplectic_euler_step(
    r: np.ndarray,
    v: np.ndarray,
    dt: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> tuple[np.ndarray, np.ndarray]:
    """Advance ``(r, v)`` by one semi-implicit Euler step.

    The velocity is updated first and the position then moves with the
    *updated* velocity. Swapping the two updates turns this into explicit
    Euler, whose energy grows without bound.
    """

    v_next = v + acceleration(r, cfg) * dt
    r_next = r + v_next * dt
    return r_next, v_next


def advance(satellite: Satellite, dt: float, cfg: PhysicsCfg = PHYSICS_CFG) -> None:
    """Step the simulation-owned ``satellite`` in place."""

    satellite.position, satellite.velocity = symplectic_euler_step(
        satellite.position, satellite.velocity, dt, cfg
    )


def circular_speed(radius: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return math.sqrt(cfg.mu / radius)


def radial_velocity(r: np.ndarray, v: np.ndarray) -> float:
    """Component of ``v`` along the outward radial direction."""

    rmag = norm(r)
    if rmag == 0.0:
        raise CentralBodyCollisionError(r)
    return float(np.dot(r, v)) / rmag


def energy_specific(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Specific orbital energy for position ``r`` and velocity ``v``."""

    rmag = norm(r)
    if rmag == 0.0:
        raise CentralBodyCollisionError(r)
    return 0.5 * float(np.dot(v, v)) - cfg.mu / rmag


def angular_momentum(r: np.ndarray, v: np.ndarray) -> float | np.ndarray:
    """Specific angular momentum: the z component in 2D, the full vector in 3D."""

    h = cross(as_3d(r), as_3d(v))
    if r.shape[0] == 2:
        return float(h[2])
    return h


def eccentricity(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Return the orbital eccentricity for state ``(r, v)``."""

    r3 = as_3d(r)
    v3 = as_3d(v)
    h = np.cross(r3, v3)
    e_vec = np.cross(v3, h) / cfg.mu - r3 / np.linalg.norm(r3)
    return float(np.linalg.norm(e_vec))


def semi_major_axis_from_energy(energy: float, mu: float) -> float | None:
    """Semi-major axis for specific energy ``energy``, ``None`` when unbound."""

    if energy >= 0.0:
        return None
    return -mu / (2.0 * energy)


def period_from_semi_major_axis(a: float | None, mu: float) -> float | None:
    if a is None:
        return None
    return 2.0 * math.pi * math.sqrt(a**3 / mu)


def semi_major_axis(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float | None:
    """Semi-major axis of a bound orbit, ``None`` for open trajectories."""

    return semi_major_axis_from_energy(energy_specific(r, v, cfg), cfg.mu)


def orbital_period(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float | None:
    return period_from_semi_major_axis(semi_major_axis(r, v, cfg), cfg.mu)


__all__ = [
    "acceleration",
    "advance",
    "angular_momentum",
    "circular_speed",
    "eccentricity",
    "energy_specific",
    "orbital_period",
    "period_from_semi_major_axis",
    "radial_velocity",
    "semi_major_axis",
    "semi_major_axis_from_energy",
    "symplectic_euler_step",
]
