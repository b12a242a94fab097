"""Closed-form room acoustics estimates.

The model trades fidelity for speed: reverberation follows Eyring's
statistical formula, modes are enumerated analytically for a rectangular
shoebox, and clarity/intelligibility are heuristic functions of the decay
time and volume. No impulse response is simulated.
"""

from __future__ import annotations

import logging
import warnings
from math import isfinite, log, sqrt

from ..errors import DegenerateRoomError, EmptyGeometryWarning
from ..room import AcousticProperties, RoomData, RoomDimensions
from ..settings import DEFAULT_SETTINGS, AnalysisSettings

logger = logging.getLogger(__name__)

SABINE_CONSTANT = 0.161  # s/m, metric form of 24·ln(10)/c
FULL_ABSORPTION_THRESHOLD = 0.99


def cube_equivalent_area(volume_m3: float) -> float:
    """Return the surface area of a cube holding ``volume_m3``."""

    return 6.0 * volume_m3 ** (2.0 / 3.0)


def reverberation_time(volume_m3: float, total_absorption: float, surface_area_m2: float) -> float:
    """Return the Eyring reverberation time in seconds.

    ``total_absorption`` is the equivalent absorption area ``Σ S_i·α_i``.
    Rooms whose mean absorption exceeds 0.99 are treated as anechoic and
    return ``0``.
    """

    if volume_m3 <= 0 or not isfinite(volume_m3):
        raise DegenerateRoomError(f"Room volume must be positive, got {volume_m3!r}")
    if surface_area_m2 <= 0:
        raise DegenerateRoomError("Surface area must be positive")
    if total_absorption <= 0:
        raise DegenerateRoomError("Room surfaces provide no absorption")

    mean_absorption = total_absorption / surface_area_m2
    if mean_absorption > FULL_ABSORPTION_THRESHOLD:
        return 0.0

    rt = SABINE_CONSTANT * volume_m3 / (-surface_area_m2 * log(1.0 - mean_absorption))
    if not isfinite(rt):
        raise DegenerateRoomError("Reverberation time is not finite")
    return rt


def room_modes(
    dimensions: RoomDimensions,
    *,
    speed_of_sound_ms: float = DEFAULT_SETTINGS.speed_of_sound_ms,
    max_order: int = DEFAULT_SETTINGS.max_mode_order,
) -> tuple[float, ...]:
    """Return every axial, tangential and oblique mode up to ``max_order``.

    Each index runs over ``0..max_order`` with the all-zero triple skipped,
    giving ``(max_order + 1)**3 - 1`` frequencies in ascending order.
    """

    _require_positive_dimensions(dimensions)

    half_c = speed_of_sound_ms / 2.0
    modes: list[float] = []
    for nx in range(max_order + 1):
        fx = nx * half_c / dimensions.width
        for ny in range(max_order + 1):
            fy = ny * half_c / dimensions.length
            for nz in range(max_order + 1):
                if nx == ny == nz == 0:
                    continue
                fz = nz * half_c / dimensions.height
                modes.append(sqrt(fx**2 + fy**2 + fz**2))
    modes.sort()
    return tuple(modes)


def clarity_index(reverberation_s: float, volume_m3: float) -> float:
    """Return the heuristic clarity figure (higher is clearer)."""

    base = max(0.0, 10.0 - reverberation_s * 3.0)
    volume_factor = min(1.0, volume_m3 / 100.0)
    return base * (0.8 + 0.2 * volume_factor)


def speech_transmission_index(reverberation_s: float, volume_m3: float) -> float:
    """Return the heuristic speech transmission index in ``[0, 1]``."""

    base = max(0.0, 1.0 - reverberation_s * 0.08)
    volume_factor = min(1.0, volume_m3 / 150.0)
    return base * (0.9 + 0.1 * volume_factor)


def _require_positive_dimensions(dimensions: RoomDimensions) -> None:
    for name in ("width", "length", "height"):
        value = getattr(dimensions, name)
        if not isfinite(value) or value <= 0:
            raise DegenerateRoomError(f"Room {name} must be positive, got {value!r}")


class AcousticModel:
    """Derives :class:`AcousticProperties` from a room description."""

    def __init__(self, settings: AnalysisSettings = DEFAULT_SETTINGS):
        self.settings = settings

    def surface_area(self, room: RoomData) -> float:
        """Return the surface area used by the Eyring estimate."""

        if self.settings.surface_area_strategy == "surfaces":
            supplied = room.surface_area
            if supplied > 0:
                return supplied
            return room.dimensions.surface_area
        return cube_equivalent_area(room.dimensions.volume)

    def total_absorption(self, room: RoomData) -> float:
        """Return ``Σ area·α``, substituting a floor when no surfaces were captured."""

        if room.surfaces:
            return room.total_absorption

        message = "Room has no surfaces; assuming a uniform absorption of %.2f"
        coefficient = self.settings.fallback_absorption_coefficient
        logger.warning(message, coefficient)
        warnings.warn(message % coefficient, EmptyGeometryWarning, stacklevel=3)
        return coefficient * self.surface_area(room)

    def compute_properties(self, room: RoomData) -> AcousticProperties:
        """Return freshly computed acoustic properties for ``room``."""

        dimensions = room.dimensions
        _require_positive_dimensions(dimensions)
        volume = dimensions.volume

        surface_area = self.surface_area(room)
        absorption = self.total_absorption(room)
        rt = reverberation_time(volume, absorption, surface_area)
        modes = room_modes(
            dimensions,
            speed_of_sound_ms=self.settings.speed_of_sound_ms,
            max_order=self.settings.max_mode_order,
        )
        logger.debug(
            "Acoustics: V=%.1f m³ S=%.1f m² A=%.2f sabins RT=%.2f s",
            volume,
            surface_area,
            absorption,
            rt,
        )

        return AcousticProperties(
            reverberation_time=rt,
            clarity_index=clarity_index(rt, volume),
            speech_transmission_index=speech_transmission_index(rt, volume),
            background_noise_level=self.settings.background_noise_db,
            room_modes=modes,
        )


__all__ = [
    "AcousticModel",
    "SABINE_CONSTANT",
    "cube_equivalent_area",
    "reverberation_time",
    "room_modes",
    "clarity_index",
    "speech_transmission_index",
]
