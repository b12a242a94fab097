"""Tunable constants for the analysis stages."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Literal

SurfaceAreaStrategy = Literal["cube", "surfaces"]

ENV_PREFIX = "ROOM_CORE_"


@dataclass(frozen=True, slots=True)
class AnalysisSettings:
    """Physical constants and heuristics used by one analysis run."""

    speed_of_sound_ms: float = 343.0
    """Speed of sound in air at 20°C (m/s)."""

    max_mode_order: int = 5
    """Highest modal index enumerated along each axis."""

    background_noise_db: float = 30.0
    """Assumed background noise level reported with every analysis (dB)."""

    fallback_absorption_coefficient: float = 0.1
    """Average absorption assumed when the room arrives without surfaces."""

    empty_geometry_confidence_scale: float = 0.9
    """Placement confidence multiplier applied when surfaces are missing."""

    listening_position_ratio: float = 0.38
    """Listening seat distance from the front wall as a fraction of room length."""

    surface_area_strategy: SurfaceAreaStrategy = "cube"
    """How the Eyring surface area is estimated (``cube`` or ``surfaces``)."""

    def replace(self, **updates: Any) -> AnalysisSettings:
        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AnalysisSettings:
        """Build settings from ``ROOM_CORE_*`` environment variables.

        Unset variables keep their defaults, e.g. ``ROOM_CORE_SPEED_OF_SOUND_MS=340``.
        """

        env = os.environ if environ is None else environ
        defaults = cls()
        updates: dict[str, Any] = {}
        for entry in fields(cls):
            raw = env.get(ENV_PREFIX + entry.name.upper())
            if raw is None or not raw.strip():
                continue
            current = getattr(defaults, entry.name)
            if isinstance(current, int) and not isinstance(current, bool):
                updates[entry.name] = int(raw)
            elif isinstance(current, float):
                updates[entry.name] = float(raw)
            else:
                updates[entry.name] = raw.strip().lower()
        settings = defaults.replace(**updates) if updates else defaults
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.speed_of_sound_ms <= 0:
            raise ValueError("speed_of_sound_ms must be positive")
        if self.max_mode_order < 1:
            raise ValueError("max_mode_order must be at least 1")
        if not 0.0 < self.fallback_absorption_coefficient < 1.0:
            raise ValueError("fallback_absorption_coefficient must lie in (0, 1)")
        if not 0.0 < self.empty_geometry_confidence_scale <= 1.0:
            raise ValueError("empty_geometry_confidence_scale must lie in (0, 1]")
        if not 0.0 < self.listening_position_ratio < 1.0:
            raise ValueError("listening_position_ratio must lie in (0, 1)")
        if self.surface_area_strategy not in ("cube", "surfaces"):
            raise ValueError("surface_area_strategy must be 'cube' or 'surfaces'")


DEFAULT_SETTINGS = AnalysisSettings()


__all__ = ["AnalysisSettings", "DEFAULT_SETTINGS", "SurfaceAreaStrategy", "ENV_PREFIX"]
