"""Trajectory prediction and periapsis/apoapsis extraction."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg, Termination
from .physics import radial_velocity, symplectic_euler_step
from .vector import cross, norm

PERIAPSIS = "periapsis"
APOAPSIS = "apoapsis"


@dataclass(frozen=True)
class Extremes:
    """Closest and farthest points of a predicted trajectory."""

    periapsis: np.ndarray
    apoapsis: np.ndarray
    periapsis_index: int
    apoapsis_index: int

    @property
    def periapsis_distance(self) -> float:
        return norm(self.periapsis)

    @property
    def apoapsis_distance(self) -> float:
        return norm(self.apoapsis)

    def altitudes(self, cfg: PhysicsCfg = PHYSICS_CFG) -> tuple[float, float]:
        """Heights of periapsis and apoapsis above the central body surface."""

        return (
            self.periapsis_distance - cfg.central_body_radius,
            self.apoapsis_distance - cfg.central_body_radius,
        )


@dataclass(frozen=True)
class ApsisPassage:
    index: int
    kind: str


def _plane_axis(r0: np.ndarray, v0: np.ndarray) -> Optional[np.ndarray]:
    # 2D angles are measured about +z, so no axis is needed.
    if r0.shape[0] == 2:
        return None
    h = cross(r0, v0)
    hmag = norm(h)
    if hmag == 0.0:
        return np.zeros(3, dtype=float)
    return h / hmag


def _angle_from_start(r0: np.ndarray, r: np.ndarray, axis: Optional[np.ndarray]) -> float:
    """Signed angle of ``r`` relative to ``r0``, wrapped to ``(-pi, pi]``."""

    if axis is None:
        s = r0[0] * r[1] - r0[1] * r[0]
    else:
        s = float(np.dot(cross(r0, r), axis))
    return math.atan2(s, float(np.dot(r0, r)))


def _predict_closed_orbit(
    r: np.ndarray, v: np.ndarray, max_steps: int, cfg: PhysicsCfg
) -> list[np.ndarray]:
    r0 = r.copy()
    r0_mag = norm(r0)
    axis = _plane_axis(r0, v)
    points: list[np.ndarray] = []

    for i in range(max_steps):
        if i > cfg.closure_settle_steps:
            tolerance = norm(v) * cfg.closure_speed_tolerance
            if abs(norm(r) - r0_mag) < tolerance:
                angle = _angle_from_start(r0, r, axis)
                prev_angle = _angle_from_start(r0, points[-1], axis)
                if abs(angle) < cfg.closure_angle_tolerance and np.sign(angle) != np.sign(prev_angle):
                    break
        points.append(r.copy())
        r, v = symplectic_euler_step(r, v, cfg.dt, cfg)

    return points


def _predict_until_escape(
    r: np.ndarray, v: np.ndarray, max_steps: int, cfg: PhysicsCfg
) -> list[np.ndarray]:
    points: list[np.ndarray] = []

    for _ in range(max_steps):
        points.append(r.copy())
        if norm(r) > cfg.escape_radius and len(points) > cfg.escape_min_points:
            break
        r, v = symplectic_euler_step(r, v, cfg.dt, cfg)

    return points


def predict_trajectory(
    start_position: np.ndarray,
    start_velocity: np.ndarray,
    max_steps: Optional[int] = None,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> list[np.ndarray]:
    """Integrate a copy of the given state forward and return the positions.

    The caller's arrays are never modified. Prediction stops at
    ``max_steps`` (default ``cfg.max_prediction_steps``) or earlier, when the
    strategy chosen by ``cfg.termination`` decides the path is complete.
    """

    steps = cfg.max_prediction_steps if max_steps is None else max_steps
    r = np.array(start_position, dtype=float)
    v = np.array(start_velocity, dtype=float)

    if cfg.termination is Termination.ESCAPE:
        return _predict_until_escape(r, v, steps, cfg)
    return _predict_closed_orbit(r, v, steps, cfg)


def find_extremes(points: Sequence[np.ndarray]) -> Optional[Extremes]:
    """Scan ``points`` for the closest and farthest distance from the origin.

    Ties keep the first occurrence. Returns ``None`` for fewer than two points.
    """

    if len(points) < 2:
        return None

    min_dist = math.inf
    max_dist = -math.inf
    pe_index = -1
    ap_index = -1
    for index, point in enumerate(points):
        dist = norm(point)
        if dist < min_dist:
            min_dist = dist
            pe_index = index
        if dist > max_dist:
            max_dist = dist
            ap_index = index

    return Extremes(
        periapsis=points[pe_index],
        apoapsis=points[ap_index],
        periapsis_index=pe_index,
        apoapsis_index=ap_index,
    )


def apsis_kind(prev_vr: float, vr: float) -> Optional[str]:
    """Classify a radial-velocity sign change between two samples."""

    if prev_vr < 0.0 <= vr:
        return PERIAPSIS
    if prev_vr > 0.0 >= vr:
        return APOAPSIS
    return None


def is_apsis_crossing(prev_vr: float, vr: float) -> bool:
    return apsis_kind(prev_vr, vr) is not None


def apsis_passages(
    positions: Sequence[np.ndarray],
    velocities: Sequence[np.ndarray],
) -> list[ApsisPassage]:
    """Find every sample that follows a periapsis or apoapsis passage."""

    passages: list[ApsisPassage] = []
    prev_vr: Optional[float] = None
    for index, (r, v) in enumerate(zip(positions, velocities)):
        vr = radial_velocity(r, v)
        if prev_vr is not None:
            kind = apsis_kind(prev_vr, vr)
            if kind is not None:
                passages.append(ApsisPassage(index=index, kind=kind))
        prev_vr = vr
    return passages


__all__ = [
    "APOAPSIS",
    "ApsisPassage",
    "Extremes",
    "PERIAPSIS",
    "apsis_kind",
    "apsis_passages",
    "find_extremes",
    "is_apsis_crossing",
    "predict_trajectory",
]
