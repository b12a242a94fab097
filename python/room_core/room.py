"""Room description value types consumed by the analysis core."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from math import sqrt
from typing import Any, assert_never


@dataclass(frozen=True, slots=True)
class Vector3:
    """Point or direction in room coordinates.

    ``x`` runs across the room width, ``y`` is height above the floor and
    ``z`` runs along the room length away from the front wall.
    """

    x: float
    y: float
    z: float

    def distance_to(self, other: Vector3) -> float:
        """Return the Euclidean distance to ``other`` in metres."""

        return sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def length(self) -> float:
        return sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalized(self) -> Vector3:
        """Return a unit-length copy (zero vectors are returned unchanged)."""

        norm = self.length()
        if norm == 0.0:
            return self
        return Vector3(self.x / norm, self.y / norm, self.z / norm)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Vector3:
        return cls(x=float(payload["x"]), y=float(payload["y"]), z=float(payload["z"]))


class SurfaceType(Enum):
    WALL = "wall"
    FLOOR = "floor"
    CEILING = "ceiling"
    WINDOW = "window"
    DOOR = "door"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ObstacleType(Enum):
    FURNITURE = "furniture"
    COLUMN = "column"
    BEAM = "beam"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ScanQuality(Enum):
    """Capture quality reported by the sensing pipeline."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        match self:
            case ScanQuality.EXCELLENT:
                return "High quality scan with LiDAR support"
            case ScanQuality.GOOD:
                return "Good quality scan with depth sensing"
            case ScanQuality.FAIR:
                return "Basic scan with limited depth data"
            case ScanQuality.POOR:
                return "Low quality scan, manual input recommended"
            case _:
                assert_never(self)


@dataclass(frozen=True, slots=True)
class RoomDimensions:
    """Interior dimensions of a rectangular room."""

    width: float
    """Side-to-side extent (metres)."""

    length: float
    """Front-to-back extent (metres)."""

    height: float
    """Floor-to-ceiling extent (metres)."""

    @property
    def volume(self) -> float:
        return self.width * self.length * self.height

    @property
    def floor_area(self) -> float:
        return self.width * self.length

    @property
    def surface_area(self) -> float:
        """Return the combined area of the six bounding planes (m²)."""

        return 2.0 * (
            self.width * self.length + self.width * self.height + self.length * self.height
        )

    def to_dict(self) -> dict[str, float]:
        return {"width": self.width, "length": self.length, "height": self.height}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> RoomDimensions:
        return cls(
            width=float(payload["width"]),
            length=float(payload["length"]),
            height=float(payload["height"]),
        )


@dataclass(frozen=True, slots=True)
class Material:
    """Acoustic characteristics of a surface finish.

    Absorption and reflection are estimated independently, so they do not
    necessarily sum to one.
    """

    name: str
    absorption_coefficient: float
    reflection_coefficient: float
    density: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "absorption_coefficient": self.absorption_coefficient,
            "reflection_coefficient": self.reflection_coefficient,
            "density": self.density,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Material:
        return cls(
            name=str(payload["name"]),
            absorption_coefficient=float(payload["absorption_coefficient"]),
            reflection_coefficient=float(payload["reflection_coefficient"]),
            density=float(payload["density"]),
        )


@dataclass(frozen=True, slots=True)
class Surface:
    """A detected boundary surface."""

    type: SurfaceType
    area: float
    material: Material
    absorption_coefficient: float
    """Copied from ``material`` so the absorption sum avoids an indirection."""

    position: Vector3

    @classmethod
    def of(cls, type: SurfaceType, area: float, material: Material, position: Vector3) -> Surface:
        """Build a surface whose absorption mirrors its material."""

        return cls(
            type=type,
            area=area,
            material=material,
            absorption_coefficient=material.absorption_coefficient,
            position=position,
        )

    @property
    def absorption(self) -> float:
        """Return the equivalent absorption area in metric sabins."""

        return self.area * self.absorption_coefficient

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "area": self.area,
            "material": self.material.to_dict(),
            "absorption_coefficient": self.absorption_coefficient,
            "position": self.position.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Surface:
        return cls(
            type=SurfaceType(payload["type"]),
            area=float(payload["area"]),
            material=Material.from_dict(payload["material"]),
            absorption_coefficient=float(payload["absorption_coefficient"]),
            position=Vector3.from_dict(payload["position"]),
        )


@dataclass(frozen=True, slots=True)
class Obstacle:
    """Furniture or structure that may obstruct a loudspeaker."""

    type: ObstacleType
    position: Vector3
    dimensions: Vector3
    material: Material

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "position": self.position.to_dict(),
            "dimensions": self.dimensions.to_dict(),
            "material": self.material.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Obstacle:
        return cls(
            type=ObstacleType(payload["type"]),
            position=Vector3.from_dict(payload["position"]),
            dimensions=Vector3.from_dict(payload["dimensions"]),
            material=Material.from_dict(payload["material"]),
        )


@dataclass(frozen=True, slots=True)
class AcousticProperties:
    """Acoustic figures of merit for one room."""

    reverberation_time: float
    """RT60-equivalent decay time (seconds)."""

    clarity_index: float
    """Unitless clarity figure, higher is better."""

    speech_transmission_index: float
    """Speech intelligibility between 0 and 1."""

    background_noise_level: float
    """Assumed noise floor (dB SPL)."""

    room_modes: tuple[float, ...]
    """Modal frequencies in ascending order (Hz)."""

    @classmethod
    def placeholder(cls) -> AcousticProperties:
        """Return the zeroed properties callers attach before analysis."""

        return cls(
            reverberation_time=0.0,
            clarity_index=0.0,
            speech_transmission_index=0.0,
            background_noise_level=0.0,
            room_modes=(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "reverberation_time": self.reverberation_time,
            "clarity_index": self.clarity_index,
            "speech_transmission_index": self.speech_transmission_index,
            "background_noise_level": self.background_noise_level,
            "room_modes": list(self.room_modes),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AcousticProperties:
        return cls(
            reverberation_time=float(payload["reverberation_time"]),
            clarity_index=float(payload["clarity_index"]),
            speech_transmission_index=float(payload["speech_transmission_index"]),
            background_noise_level=float(payload["background_noise_level"]),
            room_modes=tuple(float(mode) for mode in payload.get("room_modes", ())),
        )


@dataclass(frozen=True, slots=True)
class RoomData:
    """Everything the sensing pipeline knows about a room.

    ``acoustic_properties`` is ignored on input; the analysis always
    recomputes it.
    """

    dimensions: RoomDimensions
    surfaces: tuple[Surface, ...] = ()
    obstacles: tuple[Obstacle, ...] = ()
    acoustic_properties: AcousticProperties = field(default_factory=AcousticProperties.placeholder)
    scan_quality: ScanQuality = ScanQuality.GOOD

    @property
    def total_absorption(self) -> float:
        """Return ``Σ area·α`` over all surfaces (metric sabins)."""

        return sum(surface.absorption for surface in self.surfaces)

    @property
    def surface_area(self) -> float:
        return sum(surface.area for surface in self.surfaces)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimensions": self.dimensions.to_dict(),
            "surfaces": [surface.to_dict() for surface in self.surfaces],
            "obstacles": [obstacle.to_dict() for obstacle in self.obstacles],
            "acoustic_properties": self.acoustic_properties.to_dict(),
            "scan_quality": self.scan_quality.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> RoomData:
        acoustics = payload.get("acoustic_properties")
        return cls(
            dimensions=RoomDimensions.from_dict(payload["dimensions"]),
            surfaces=tuple(Surface.from_dict(item) for item in payload.get("surfaces", ())),
            obstacles=tuple(Obstacle.from_dict(item) for item in payload.get("obstacles", ())),
            acoustic_properties=(
                AcousticProperties.from_dict(acoustics)
                if acoustics is not None
                else AcousticProperties.placeholder()
            ),
            scan_quality=ScanQuality(payload.get("scan_quality", ScanQuality.GOOD.value)),
        )


__all__ = [
    "Vector3",
    "SurfaceType",
    "ObstacleType",
    "ScanQuality",
    "RoomDimensions",
    "Material",
    "Surface",
    "Obstacle",
    "AcousticProperties",
    "RoomData",
]
