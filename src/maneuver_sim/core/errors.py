"""Exceptions raised for degenerate simulation input."""
from __future__ import annotations


class OrbitSimError(Exception):
    """Base class for errors raised by the simulation core."""


class ConfigError(OrbitSimError, ValueError):
    """A :class:`PhysicsCfg` holds values the integrator cannot work with."""


class CentralBodyCollisionError(OrbitSimError, ArithmeticError):
    """Gravity was requested at the centre of the central body."""

    def __init__(self, position) -> None:
        super().__init__(f"position {list(position)!r} coincides with the central body")
        self.position = position


class DegenerateVelocityError(OrbitSimError, ArithmeticError):
    """A burn direction was requested while the craft is at rest."""


class UnsupportedBurnError(OrbitSimError, ValueError):
    """The burn type has no meaning for the configured dimensionality."""


__all__ = [
    "CentralBodyCollisionError",
    "ConfigError",
    "DegenerateVelocityError",
    "OrbitSimError",
    "UnsupportedBurnError",
]
