"""Small numpy helpers for 2D/3D vectors."""
from __future__ import annotations

import numpy as np

from .errors import DegenerateVelocityError


def zeros(dimensions: int) -> np.ndarray:
    return np.zeros(dimensions, dtype=float)


def norm(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def unit(v: np.ndarray) -> np.ndarray:
    """Return ``v`` scaled to length one.

    Raises :class:`DegenerateVelocityError` for the zero vector instead of
    handing back NaNs.
    """

    length = norm(v)
    if length == 0.0 or not np.isfinite(length):
        raise DegenerateVelocityError("cannot normalise a zero-length vector")
    return v / length


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.cross(np.asarray(a, dtype=float), np.asarray(b, dtype=float))


def perpendicular(v: np.ndarray) -> np.ndarray:
    """Rotate a 2D vector a quarter turn: ``(x, y) -> (-y, x)``."""

    return np.array([-v[1], v[0]], dtype=float)


def as_3d(v: np.ndarray) -> np.ndarray:
    if v.shape == (3,):
        return np.asarray(v, dtype=float)
    return np.array([v[0], v[1], 0.0], dtype=float)


__all__ = ["as_3d", "cross", "norm", "perpendicular", "unit", "zeros"]
