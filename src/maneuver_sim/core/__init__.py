"""Numerical core of the maneuver simulator."""

from .config import PHYSICS_CFG, PHYSICS_CFG_3D, PhysicsCfg, Termination
from .errors import (
    CentralBodyCollisionError,
    ConfigError,
    DegenerateVelocityError,
    OrbitSimError,
    UnsupportedBurnError,
)
from .maneuver import (
    BurnType,
    accumulate,
    burn_direction,
    cancel_burn,
    execute_burn,
    plan_burn,
)
from .model import PlannedBurn, Satellite, SimState
from .physics import (
    advance,
    circular_speed,
    eccentricity,
    energy_specific,
    orbital_period,
    radial_velocity,
    semi_major_axis,
    symplectic_euler_step,
)
from .prediction import (
    ApsisPassage,
    Extremes,
    apsis_passages,
    find_extremes,
    is_apsis_crossing,
    predict_trajectory,
)
from .simulation import ExtremeWatch, SimEvent, SimPhase, Simulation, TickResult

__all__ = [
    "ApsisPassage",
    "BurnType",
    "CentralBodyCollisionError",
    "ConfigError",
    "DegenerateVelocityError",
    "ExtremeWatch",
    "Extremes",
    "OrbitSimError",
    "PHYSICS_CFG",
    "PHYSICS_CFG_3D",
    "PhysicsCfg",
    "PlannedBurn",
    "Satellite",
    "SimEvent",
    "SimPhase",
    "SimState",
    "Simulation",
    "Termination",
    "TickResult",
    "UnsupportedBurnError",
    "accumulate",
    "advance",
    "apsis_passages",
    "burn_direction",
    "cancel_burn",
    "circular_speed",
    "eccentricity",
    "energy_specific",
    "execute_burn",
    "find_extremes",
    "is_apsis_crossing",
    "orbital_period",
    "plan_burn",
    "predict_trajectory",
    "radial_velocity",
    "semi_major_axis",
    "symplectic_euler_step",
]
