"""Two-body orbit simulator with maneuver planning."""

from .core import (
    PHYSICS_CFG,
    PHYSICS_CFG_3D,
    BurnType,
    PhysicsCfg,
    SimEvent,
    SimPhase,
    Simulation,
    Termination,
    TickResult,
)
from .core.logging_utils import RunLogger
from .data import SCENARIOS, Scenario

__version__ = "0.1.0"

__all__ = [
    "BurnType",
    "PHYSICS_CFG",
    "PHYSICS_CFG_3D",
    "PhysicsCfg",
    "RunLogger",
    "SCENARIOS",
    "Scenario",
    "SimEvent",
    "SimPhase",
    "Simulation",
    "Termination",
    "TickResult",
]
