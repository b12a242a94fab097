"""Loudspeaker placement plans for the supported channel layouts.

Layouts nest strictly (stereo ⊂ 2.1 ⊂ 5.1 ⊂ 7.1 ⊂ Atmos). Each layout is
built by generating the next smaller one and appending its own channels, so
shared channels land in identical spots across every plan for a room.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from math import cos, radians, sin
from typing import Any, assert_never

from .acoustics._utils import planar_distance
from .room import RoomDimensions, Vector3
from .settings import DEFAULT_SETTINGS, AnalysisSettings

FRONT_TOE_IN_DEG = 15.0
FRONT_SPREAD_DEG = 30.0


class SpeakerType(Enum):
    LEFT_FRONT = "leftFront"
    RIGHT_FRONT = "rightFront"
    CENTER = "center"
    LEFT_SURROUND = "leftSurround"
    RIGHT_SURROUND = "rightSurround"
    SUBWOOFER = "subwoofer"
    HEIGHT = "height"

    @property
    def label(self) -> str:
        match self:
            case SpeakerType.LEFT_FRONT:
                return "Left Front"
            case SpeakerType.RIGHT_FRONT:
                return "Right Front"
            case SpeakerType.CENTER:
                return "Center"
            case SpeakerType.LEFT_SURROUND:
                return "Left Surround"
            case SpeakerType.RIGHT_SURROUND:
                return "Right Surround"
            case SpeakerType.SUBWOOFER:
                return "Subwoofer"
            case SpeakerType.HEIGHT:
                return "Height"
            case _:
                assert_never(self)


class SpeakerConfiguration(Enum):
    """Supported layouts, declared from smallest to largest."""

    STEREO = "stereo"
    STEREO_WITH_SUB = "stereoWithSub"
    SURROUND_51 = "surround51"
    SURROUND_71 = "surround71"
    DOLBY_ATMOS = "dolbyAtmos"

    @property
    def label(self) -> str:
        match self:
            case SpeakerConfiguration.STEREO:
                return "2.0 Stereo"
            case SpeakerConfiguration.STEREO_WITH_SUB:
                return "2.1 Stereo with Subwoofer"
            case SpeakerConfiguration.SURROUND_51:
                return "5.1 Surround"
            case SpeakerConfiguration.SURROUND_71:
                return "7.1 Surround"
            case SpeakerConfiguration.DOLBY_ATMOS:
                return "Dolby Atmos"
            case _:
                assert_never(self)

    @property
    def base(self) -> SpeakerConfiguration | None:
        """Return the next smaller layout this one extends."""

        match self:
            case SpeakerConfiguration.STEREO:
                return None
            case SpeakerConfiguration.STEREO_WITH_SUB:
                return SpeakerConfiguration.STEREO
            case SpeakerConfiguration.SURROUND_51:
                return SpeakerConfiguration.STEREO_WITH_SUB
            case SpeakerConfiguration.SURROUND_71:
                return SpeakerConfiguration.SURROUND_51
            case SpeakerConfiguration.DOLBY_ATMOS:
                return SpeakerConfiguration.SURROUND_71
            case _:
                assert_never(self)


@dataclass(frozen=True, slots=True)
class SpeakerPlacement:
    """Recommended position for a single loudspeaker."""

    speaker_type: SpeakerType
    position: Vector3
    orientation: Vector3
    """Direction the driver faces (approximately unit length)."""

    distance: float
    """Distance from the listening position (metres)."""

    angle: float
    """Horizontal angle relative to the listener's forward axis (degrees, left positive)."""

    confidence: float
    """Confidence in the recommendation between 0 and 1."""

    reasoning: str

    def with_confidence(self, confidence: float) -> SpeakerPlacement:
        return replace(self, confidence=confidence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "speaker_type": self.speaker_type.value,
            "position": self.position.to_dict(),
            "orientation": self.orientation.to_dict(),
            "distance": self.distance,
            "angle": self.angle,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SpeakerPlacement:
        return cls(
            speaker_type=SpeakerType(payload["speaker_type"]),
            position=Vector3.from_dict(payload["position"]),
            orientation=Vector3.from_dict(payload["orientation"]),
            distance=float(payload["distance"]),
            angle=float(payload["angle"]),
            confidence=float(payload["confidence"]),
            reasoning=str(payload["reasoning"]),
        )


@dataclass(frozen=True, slots=True)
class SpeakerSystem:
    """A scored placement plan for one layout."""

    configuration: SpeakerConfiguration
    placements: tuple[SpeakerPlacement, ...]
    overall_score: float
    recommendations: tuple[str, ...] = ()

    @property
    def speaker_count(self) -> int:
        return len(self.placements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "configuration": self.configuration.value,
            "placements": [placement.to_dict() for placement in self.placements],
            "overall_score": self.overall_score,
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SpeakerSystem:
        return cls(
            configuration=SpeakerConfiguration(payload["configuration"]),
            placements=tuple(SpeakerPlacement.from_dict(item) for item in payload["placements"]),
            overall_score=float(payload["overall_score"]),
            recommendations=tuple(str(item) for item in payload.get("recommendations", ())),
        )


LISTENING_TRIANGLE = (
    "Listening triangle: toed in 15° toward the seat at 38% of the room length "
    "for a stable stereo image"
)
MODE_AVOIDANCE = (
    "Mode avoidance: a one-third position along width and length keeps the subwoofer "
    "off the corner pressure maxima of the lowest room modes"
)
DIALOGUE_CLARITY = "Dialogue clarity: centre channel anchors on-screen speech between the front pair"
SIDE_IMMERSION = "Immersion: side surrounds just behind the seat wrap effects around the listener"
REAR_IMMERSION = "Immersion: rear surrounds close the sound field behind the listening position"
OVERHEAD_COVERAGE = "Overhead coverage: ceiling-height channels ahead of the seat carry height effects"


def listening_position(dimensions: RoomDimensions, ratio: float = DEFAULT_SETTINGS.listening_position_ratio) -> Vector3:
    """Return the assumed seat position on the floor plan."""

    return Vector3(0.5 * dimensions.width, 0.0, ratio * dimensions.length)


def generate_placements(
    configuration: SpeakerConfiguration,
    dimensions: RoomDimensions,
    *,
    listening_ratio: float = DEFAULT_SETTINGS.listening_position_ratio,
) -> tuple[SpeakerPlacement, ...]:
    """Return the ordered placements for ``configuration`` in a room of ``dimensions``.

    The placements of ``configuration.base`` come first, followed by the
    channels this layout adds.
    """

    base = configuration.base
    inherited = (
        ()
        if base is None
        else generate_placements(base, dimensions, listening_ratio=listening_ratio)
    )
    return inherited + _added_channels(configuration, dimensions, listening_ratio)


def _added_channels(
    configuration: SpeakerConfiguration,
    dims: RoomDimensions,
    ratio: float,
) -> tuple[SpeakerPlacement, ...]:
    match configuration:
        case SpeakerConfiguration.STEREO:
            return _front_pair(dims, ratio)
        case SpeakerConfiguration.STEREO_WITH_SUB:
            return (_subwoofer(dims, ratio),)
        case SpeakerConfiguration.SURROUND_51:
            return _centre_and_sides(dims, ratio)
        case SpeakerConfiguration.SURROUND_71:
            return _rear_pair(dims, ratio)
        case SpeakerConfiguration.DOLBY_ATMOS:
            return _height_pair(dims, ratio)
        case _:
            assert_never(configuration)


def _front_pair(dims: RoomDimensions, ratio: float) -> tuple[SpeakerPlacement, ...]:
    toe_x = cos(radians(FRONT_TOE_IN_DEG))
    toe_z = sin(radians(FRONT_TOE_IN_DEG))
    distance = ratio * dims.length
    return (
        SpeakerPlacement(
            speaker_type=SpeakerType.LEFT_FRONT,
            position=Vector3(0.2 * dims.width, 0.4 * dims.height, 0.1 * dims.length),
            orientation=Vector3(toe_x, 0.0, toe_z),
            distance=distance,
            angle=FRONT_SPREAD_DEG,
            confidence=0.95,
            reasoning=LISTENING_TRIANGLE,
        ),
        SpeakerPlacement(
            speaker_type=SpeakerType.RIGHT_FRONT,
            position=Vector3(0.8 * dims.width, 0.4 * dims.height, 0.1 * dims.length),
            orientation=Vector3(-toe_x, 0.0, toe_z),
            distance=distance,
            angle=-FRONT_SPREAD_DEG,
            confidence=0.95,
            reasoning=LISTENING_TRIANGLE,
        ),
    )


def _subwoofer(dims: RoomDimensions, ratio: float) -> SpeakerPlacement:
    position = Vector3(0.33 * dims.width, 0.1 * dims.height, 0.33 * dims.length)
    return SpeakerPlacement(
        speaker_type=SpeakerType.SUBWOOFER,
        position=position,
        orientation=Vector3(0.0, 1.0, 0.0),
        distance=planar_distance(position, listening_position(dims, ratio)),
        angle=0.0,
        confidence=0.9,
        reasoning=MODE_AVOIDANCE,
    )


def _centre_and_sides(dims: RoomDimensions, ratio: float) -> tuple[SpeakerPlacement, ...]:
    seat = listening_position(dims, ratio)
    centre = Vector3(0.5 * dims.width, 0.4 * dims.height, 0.1 * dims.length)
    left = Vector3(0.1 * dims.width, 0.4 * dims.height, 0.7 * dims.length)
    right = Vector3(0.9 * dims.width, 0.4 * dims.height, 0.7 * dims.length)
    return (
        SpeakerPlacement(
            speaker_type=SpeakerType.CENTER,
            position=centre,
            orientation=Vector3(0.0, 0.0, 1.0),
            distance=planar_distance(centre, seat),
            angle=0.0,
            confidence=0.95,
            reasoning=DIALOGUE_CLARITY,
        ),
        SpeakerPlacement(
            speaker_type=SpeakerType.LEFT_SURROUND,
            position=left,
            orientation=Vector3(1.0, 0.0, -1.0).normalized(),
            distance=planar_distance(left, seat),
            angle=90.0,
            confidence=0.9,
            reasoning=SIDE_IMMERSION,
        ),
        SpeakerPlacement(
            speaker_type=SpeakerType.RIGHT_SURROUND,
            position=right,
            orientation=Vector3(-1.0, 0.0, -1.0).normalized(),
            distance=planar_distance(right, seat),
            angle=-90.0,
            confidence=0.9,
            reasoning=SIDE_IMMERSION,
        ),
    )


def _rear_pair(dims: RoomDimensions, ratio: float) -> tuple[SpeakerPlacement, ...]:
    seat = listening_position(dims, ratio)
    left = Vector3(0.2 * dims.width, 0.4 * dims.height, 0.85 * dims.length)
    right = Vector3(0.8 * dims.width, 0.4 * dims.height, 0.85 * dims.length)
    return (
        SpeakerPlacement(
            speaker_type=SpeakerType.LEFT_SURROUND,
            position=left,
            orientation=Vector3(1.0, 0.0, -1.0).normalized(),
            distance=planar_distance(left, seat),
            angle=135.0,
            confidence=0.85,
            reasoning=REAR_IMMERSION,
        ),
        SpeakerPlacement(
            speaker_type=SpeakerType.RIGHT_SURROUND,
            position=right,
            orientation=Vector3(-1.0, 0.0, -1.0).normalized(),
            distance=planar_distance(right, seat),
            angle=-135.0,
            confidence=0.85,
            reasoning=REAR_IMMERSION,
        ),
    )


def _height_pair(dims: RoomDimensions, ratio: float) -> tuple[SpeakerPlacement, ...]:
    seat = listening_position(dims, ratio)
    placements: list[SpeakerPlacement] = []
    for fraction in (0.3, 0.7):
        position = Vector3(fraction * dims.width, 0.8 * dims.height, 0.3 * dims.length)
        placements.append(
            SpeakerPlacement(
                speaker_type=SpeakerType.HEIGHT,
                position=position,
                orientation=Vector3(0.0, -1.0, 0.0),
                distance=planar_distance(position, seat),
                angle=0.0,
                confidence=0.8,
                reasoning=OVERHEAD_COVERAGE,
            )
        )
    return tuple(placements)


class PlacementGenerator:
    """Produces placement plans using the listening position from ``settings``."""

    def __init__(self, settings: AnalysisSettings = DEFAULT_SETTINGS):
        self.settings = settings

    def generate(
        self,
        configuration: SpeakerConfiguration,
        dimensions: RoomDimensions,
    ) -> tuple[SpeakerPlacement, ...]:
        return generate_placements(
            configuration,
            dimensions,
            listening_ratio=self.settings.listening_position_ratio,
        )

    def generate_all(self, dimensions: RoomDimensions) -> dict[SpeakerConfiguration, tuple[SpeakerPlacement, ...]]:
        """Return plans for every layout keyed in enumeration order."""

        return {configuration: self.generate(configuration, dimensions) for configuration in SpeakerConfiguration}


__all__ = [
    "SpeakerType",
    "SpeakerConfiguration",
    "SpeakerPlacement",
    "SpeakerSystem",
    "PlacementGenerator",
    "generate_placements",
    "listening_position",
]
