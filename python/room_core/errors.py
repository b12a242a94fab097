"""Error taxonomy shared by the analysis stages."""

from __future__ import annotations


class DegenerateRoomError(ValueError):
    """Raised when room geometry cannot produce physical acoustic results.

    Zero or negative dimensions, and rooms whose surfaces absorb nothing at
    all, fall in this category. The analysis run that hits it produces no
    result.
    """


class EmptyGeometryWarning(UserWarning):
    """Issued when a room arrives without any surfaces.

    The analysis continues with a substituted absorption floor and reduced
    placement confidence.
    """


__all__ = ["DegenerateRoomError", "EmptyGeometryWarning"]
