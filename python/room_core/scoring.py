"""Ranking of placement plans.

A plan's score blends the room's acoustics, the confidence of each
placement and the room volume, then subtracts a penalty for every
loudspeaker crowded by an obstacle. Only the final value is clamped to
``[0, 10]``; the placement term grows with channel count by construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .acoustics._utils import clamp
from .placement import SpeakerPlacement, SpeakerSystem
from .room import AcousticProperties, Obstacle, RoomData

ACOUSTIC_WEIGHT = 0.3
PLACEMENT_WEIGHT = 0.4
SIZE_WEIGHT = 0.2

OBSTACLE_NEAR_M = 0.5
OBSTACLE_CLOSE_M = 1.0
OBSTACLE_NEAR_PENALTY = 1.0
OBSTACLE_CLOSE_PENALTY = 0.5

MIN_SCORE = 0.0
MAX_SCORE = 10.0


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Individual terms behind a plan's overall score."""

    acoustic_score: float
    placement_score: float
    size_score: float
    obstacle_penalty: float
    total: float

    @property
    def raw_total(self) -> float:
        """Weighted sum before clamping."""

        return (
            ACOUSTIC_WEIGHT * self.acoustic_score
            + PLACEMENT_WEIGHT * self.placement_score
            + SIZE_WEIGHT * self.size_score
            - self.obstacle_penalty
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "acoustic_score": self.acoustic_score,
            "placement_score": self.placement_score,
            "size_score": self.size_score,
            "obstacle_penalty": self.obstacle_penalty,
            "total": self.total,
        }


def obstacle_penalty(placements: Iterable[SpeakerPlacement], obstacles: Sequence[Obstacle]) -> float:
    """Return the summed penalty over every (obstacle, placement) pair."""

    penalty = 0.0
    placement_list = list(placements)
    for obstacle in obstacles:
        for placement in placement_list:
            distance = placement.position.distance_to(obstacle.position)
            if distance < OBSTACLE_NEAR_M:
                penalty += OBSTACLE_NEAR_PENALTY
            elif distance < OBSTACLE_CLOSE_M:
                penalty += OBSTACLE_CLOSE_PENALTY
    return penalty


def score_breakdown(
    placements: Sequence[SpeakerPlacement],
    room: RoomData,
    acoustics: AcousticProperties,
) -> ScoreBreakdown:
    """Return every scoring term for ``placements`` in ``room``."""

    acoustic = max(0.0, 10.0 - acoustics.reverberation_time * 2.5)
    placement = sum(item.confidence * 2.0 for item in placements)
    size = min(10.0, room.dimensions.volume / 10.0)
    penalty = obstacle_penalty(placements, room.obstacles)

    raw = ACOUSTIC_WEIGHT * acoustic + PLACEMENT_WEIGHT * placement + SIZE_WEIGHT * size - penalty
    return ScoreBreakdown(
        acoustic_score=acoustic,
        placement_score=placement,
        size_score=size,
        obstacle_penalty=penalty,
        total=clamp(raw, MIN_SCORE, MAX_SCORE),
    )


def score_system(
    placements: Sequence[SpeakerPlacement],
    room: RoomData,
    acoustics: AcousticProperties,
) -> float:
    """Return the overall score of a plan in ``[0, 10]``."""

    return score_breakdown(placements, room, acoustics).total


def rank_systems(systems: Iterable[SpeakerSystem]) -> tuple[SpeakerSystem, ...]:
    """Return ``systems`` by descending score, keeping input order on ties."""

    return tuple(sorted(systems, key=lambda system: system.overall_score, reverse=True))


class SystemScorer:
    """Object wrapper over :func:`score_system` used by the pipeline."""

    def score(
        self,
        placements: Sequence[SpeakerPlacement],
        room: RoomData,
        acoustics: AcousticProperties,
    ) -> float:
        return score_system(placements, room, acoustics)

    def breakdown(
        self,
        placements: Sequence[SpeakerPlacement],
        room: RoomData,
        acoustics: AcousticProperties,
    ) -> ScoreBreakdown:
        return score_breakdown(placements, room, acoustics)


__all__ = [
    "ScoreBreakdown",
    "SystemScorer",
    "obstacle_penalty",
    "rank_systems",
    "score_breakdown",
    "score_system",
]
