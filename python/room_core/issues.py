"""Detection of common acoustic defects."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Any, assert_never

from .room import AcousticProperties, RoomData, Vector3

STANDING_WAVE_LIMIT_HZ = 80.0
STANDING_WAVE_SEVERE_HZ = 60.0
RT_CRITICAL_S = 0.8
RT_HIGH_S = 0.6
SQUARE_RATIO_MIN = 0.8
SQUARE_RATIO_MAX = 1.2
SMALL_ROOM_M3 = 50.0


class IssueType(Enum):
    STANDING_WAVES = "standingWaves"
    FLUTTER_ECHO = "flutterEcho"
    BASS_BUILD_UP = "bassBuildUp"
    REFLECTION = "reflection"
    ABSORPTION = "absorption"

    @property
    def label(self) -> str:
        match self:
            case IssueType.STANDING_WAVES:
                return "Standing Waves"
            case IssueType.FLUTTER_ECHO:
                return "Flutter Echo"
            case IssueType.BASS_BUILD_UP:
                return "Bass Build-up"
            case IssueType.REFLECTION:
                return "Early Reflection"
            case IssueType.ABSORPTION:
                return "Insufficient Absorption"
            case _:
                assert_never(self)


@total_ordering
class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        match self:
            case Severity.LOW:
                return 0
            case Severity.MEDIUM:
                return 1
            case Severity.HIGH:
                return 2
            case Severity.CRITICAL:
                return 3
            case _:
                assert_never(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


@dataclass(frozen=True, slots=True)
class AcousticIssue:
    """A detected defect together with a suggested remedy."""

    type: IssueType
    severity: Severity
    description: str
    position: Vector3 | None
    suggested_solution: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "position": self.position.to_dict() if self.position is not None else None,
            "suggested_solution": self.suggested_solution,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AcousticIssue:
        position = payload.get("position")
        return cls(
            type=IssueType(payload["type"]),
            severity=Severity(payload["severity"]),
            description=str(payload["description"]),
            position=Vector3.from_dict(position) if position is not None else None,
            suggested_solution=str(payload["suggested_solution"]),
        )


BASS_TRAP_SOLUTION = "Consider bass traps in corners or subwoofer placement optimization"
TREATMENT_SOLUTION = "Add acoustic treatment panels to walls and ceiling"
DIFFUSION_SOLUTION = "Add diffusers or acoustic panels to break up reflections"
SMALL_ROOM_SOLUTION = "Use a sealed subwoofer with room correction and keep bass output modest"


def standing_wave_issues(acoustics: AcousticProperties) -> list[AcousticIssue]:
    issues: list[AcousticIssue] = []
    for mode in acoustics.room_modes:
        if mode >= STANDING_WAVE_LIMIT_HZ:
            continue
        severity = Severity.HIGH if mode < STANDING_WAVE_SEVERE_HZ else Severity.MEDIUM
        issues.append(
            AcousticIssue(
                type=IssueType.STANDING_WAVES,
                severity=severity,
                description=f"Low frequency standing wave detected at {mode:.1f} Hz",
                position=None,
                suggested_solution=BASS_TRAP_SOLUTION,
            )
        )
    return issues


def absorption_issue(acoustics: AcousticProperties) -> AcousticIssue | None:
    rt = acoustics.reverberation_time
    if rt > RT_CRITICAL_S:
        severity = Severity.CRITICAL
    elif rt > RT_HIGH_S:
        severity = Severity.HIGH
    else:
        return None
    return AcousticIssue(
        type=IssueType.ABSORPTION,
        severity=severity,
        description=f"High reverberation time ({rt:.2f}s)",
        position=None,
        suggested_solution=TREATMENT_SOLUTION,
    )


def flutter_echo_issue(room: RoomData) -> AcousticIssue | None:
    ratio = room.dimensions.width / room.dimensions.length
    if not SQUARE_RATIO_MIN < ratio < SQUARE_RATIO_MAX:
        return None
    return AcousticIssue(
        type=IssueType.FLUTTER_ECHO,
        severity=Severity.MEDIUM,
        description=(
            f"Near-square floor plan (width/length {ratio:.2f}) - parallel walls may cause flutter echo"
        ),
        position=None,
        suggested_solution=DIFFUSION_SOLUTION,
    )


def bass_build_up_issue(room: RoomData) -> AcousticIssue | None:
    volume = room.dimensions.volume
    if volume >= SMALL_ROOM_M3:
        return None
    return AcousticIssue(
        type=IssueType.BASS_BUILD_UP,
        severity=Severity.MEDIUM,
        description=f"Small room volume ({volume:.1f} m³) - low frequencies will build up",
        position=None,
        suggested_solution=SMALL_ROOM_SOLUTION,
    )


def detect_issues(room: RoomData, acoustics: AcousticProperties) -> tuple[AcousticIssue, ...]:
    """Run every check and return the issues in detection order."""

    issues = standing_wave_issues(acoustics)
    for issue in (absorption_issue(acoustics), flutter_echo_issue(room), bass_build_up_issue(room)):
        if issue is not None:
            issues.append(issue)
    return tuple(issues)


def most_severe(issues: tuple[AcousticIssue, ...]) -> Severity | None:
    """Return the highest severity among ``issues``."""

    if not issues:
        return None
    return max(issue.severity for issue in issues)


__all__ = [
    "IssueType",
    "Severity",
    "AcousticIssue",
    "detect_issues",
    "most_severe",
]
