"""Burn planning: direction resolution, accumulation and commit."""
from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .errors import UnsupportedBurnError
from .model import PlannedBurn, SimState
from .vector import cross, perpendicular, unit


class BurnType(str, Enum):
    PROGRADE = "prograde"
    RETROGRADE = "retrograde"
    RADIAL_IN = "radialIn"
    RADIAL_OUT = "radialOut"
    NORMAL = "normal"
    ANTI_NORMAL = "antiNormal"


def _radial_in(direction: np.ndarray, cfg: PhysicsCfg) -> np.ndarray:
    if direction.shape[0] == 2:
        return perpendicular(direction)
    # Normalised so a tilted velocity still gets the full burn; a velocity
    # along the up axis has no radial direction and raises.
    return unit(cross(direction, cfg.up_axis))


def burn_direction(
    velocity: np.ndarray,
    burn_type: BurnType,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> np.ndarray:
    """Unit direction of a burn relative to the current velocity.

    Raises :class:`DegenerateVelocityError` when ``velocity`` is zero and
    :class:`UnsupportedBurnError` for normal burns in a planar simulation.
    """

    burn_type = BurnType(burn_type)
    if burn_type in (BurnType.NORMAL, BurnType.ANTI_NORMAL):
        if velocity.shape[0] != 3:
            raise UnsupportedBurnError(f"{burn_type.value} burns need a 3D simulation")
        up = np.array(cfg.up_axis, dtype=float)
        return up if burn_type is BurnType.NORMAL else -up

    direction = unit(velocity)
    if burn_type is BurnType.PROGRADE:
        return direction
    if burn_type is BurnType.RETROGRADE:
        return -direction
    radial_in = _radial_in(direction, cfg)
    if burn_type is BurnType.RADIAL_IN:
        return radial_in
    return -radial_in


def plan_burn(
    velocity: np.ndarray,
    burn_type: BurnType,
    delta_v: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> np.ndarray:
    return burn_direction(velocity, burn_type, cfg) * float(delta_v)


def accumulate(existing: Optional[PlannedBurn], burn_vector: np.ndarray) -> PlannedBurn:
    """Add ``burn_vector`` onto ``existing``; burns sum, they never replace."""

    if existing is None:
        return PlannedBurn(delta=burn_vector)
    return PlannedBurn(delta=existing.delta + burn_vector)


def execute_burn(state: SimState, burn: PlannedBurn) -> SimState:
    state.satellite.velocity = state.satellite.velocity + burn.delta
    state.cumulative_delta_v += burn.magnitude
    state.pending_burn = None
    return state


def cancel_burn(state: SimState) -> SimState:
    state.pending_burn = None
    return state


__all__ = [
    "BurnType",
    "accumulate",
    "burn_direction",
    "cancel_burn",
    "execute_burn",
    "plan_burn",
]
