"""Utility helpers shared across the analysis stages."""

from __future__ import annotations

from math import isfinite

from ..room import Vector3


def clamp(value: float, lower: float, upper: float) -> float:
    """Return ``value`` limited to the closed interval ``[lower, upper]``.

    Non-finite inputs collapse onto the nearest bound so scores stay usable
    even when an upstream term overflowed; NaN maps to ``lower``.
    """

    if value != value:  # NaN
        return lower
    if not isfinite(value):
        return upper if value > 0 else lower
    return min(upper, max(lower, value))


def planar_distance(a: Vector3, b: Vector3) -> float:
    """Return the floor-plan distance between two points, ignoring height."""

    return Vector3(a.x, 0.0, a.z).distance_to(Vector3(b.x, 0.0, b.z))


__all__ = ["clamp", "planar_distance"]
