"""Improvement suggestions for a room and its loudspeaker plans."""

from __future__ import annotations

from collections.abc import Iterable
from typing import assert_never

from .issues import AcousticIssue
from .placement import SpeakerConfiguration
from .room import RoomData, ScanQuality

GENERAL_TIPS: tuple[str, ...] = (
    "Consider adding area rugs to reduce floor reflections",
    "Use heavy curtains on windows to reduce reflections",
    "Position listening seat at 38% of room length for optimal bass response",
)

NEAR_FIELD_NOTE = (
    "Small room: a near-field setup with speakers close to the listening position "
    "reduces the influence of room reflections"
)
MULTI_SUB_NOTE = (
    "Large room: multiple subwoofers smooth the bass response across seats "
    "and reduce modal peaks and nulls"
)

NEAR_FIELD_BELOW_M3 = 100.0
MULTI_SUB_ABOVE_M3 = 300.0


def build_suggestions(
    issues: Iterable[AcousticIssue],
    room: RoomData,
    *,
    deduplicate: bool = False,
) -> tuple[str, ...]:
    """Return remedies for ``issues`` followed by general and room-size advice.

    Solutions repeat when several issues share one; pass ``deduplicate`` to
    keep only the first occurrence of each string.
    """

    suggestions = [issue.suggested_solution for issue in issues]
    suggestions.extend(GENERAL_TIPS)

    volume = room.dimensions.volume
    if volume < NEAR_FIELD_BELOW_M3:
        suggestions.append(NEAR_FIELD_NOTE)
    elif volume > MULTI_SUB_ABOVE_M3:
        suggestions.append(MULTI_SUB_NOTE)

    if room.scan_quality is ScanQuality.POOR:
        suggestions.append(ScanQuality.POOR.description)

    if deduplicate:
        suggestions = list(dict.fromkeys(suggestions))
    return tuple(suggestions)


def system_recommendations(configuration: SpeakerConfiguration, room: RoomData) -> tuple[str, ...]:
    """Return setup advice specific to one layout in ``room``."""

    recommendations = [
        "Ensure speakers are at ear level for optimal listening experience",
        "Keep speakers away from walls to minimize reflections",
    ]

    volume = room.dimensions.volume
    if volume < 50:
        recommendations.append("Consider smaller speakers for this room size")
    elif volume > 200:
        recommendations.append("Consider larger speakers for better room filling")

    match configuration:
        case SpeakerConfiguration.STEREO:
            recommendations.append("Form an equilateral triangle between the speakers and the seat")
        case SpeakerConfiguration.STEREO_WITH_SUB | SpeakerConfiguration.SURROUND_51:
            recommendations.append("Run a subwoofer crawl to confirm the smoothest bass position")
        case SpeakerConfiguration.SURROUND_71:
            recommendations.append("Run a subwoofer crawl to confirm the smoothest bass position")
            recommendations.append("Aim rear surrounds at the listening position, slightly above ear level")
        case SpeakerConfiguration.DOLBY_ATMOS:
            recommendations.append("Run a subwoofer crawl to confirm the smoothest bass position")
            recommendations.append("Ensure ceiling height is sufficient for overhead speakers")
        case _:
            assert_never(configuration)

    return tuple(recommendations)


__all__ = [
    "GENERAL_TIPS",
    "build_suggestions",
    "system_recommendations",
]
