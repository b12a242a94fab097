"""End-to-end room analysis.

The pipeline runs its stages in a fixed order and either returns a complete
:class:`RoomAnalysis` or raises; no partial result is ever produced.
Progress is reported through an optional callback scoped to one call.
Analyses cannot be cancelled once started: a caller that loses interest must
discard the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any

from .acoustics.model import AcousticModel
from .issues import AcousticIssue, detect_issues
from .placement import PlacementGenerator, SpeakerConfiguration, SpeakerPlacement, SpeakerSystem
from .recommendations import build_suggestions, system_recommendations
from .room import AcousticProperties, RoomData
from .scoring import SystemScorer, rank_systems
from .settings import DEFAULT_SETTINGS, AnalysisSettings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]

COMPLETE_LABEL = "complete"

STEREO_BELOW_M3 = 50.0
STEREO_WITH_SUB_BELOW_M3 = 100.0
SURROUND_51_BELOW_M3 = 200.0


@dataclass(frozen=True, slots=True)
class RoomAnalysis:
    """Complete result of analysing one room."""

    room_data: RoomData
    """The analysed room, carrying the computed acoustic properties."""

    speaker_systems: tuple[SpeakerSystem, ...]
    """One plan per layout, best score first."""

    best_configuration: SpeakerConfiguration
    acoustic_issues: tuple[AcousticIssue, ...]
    improvement_suggestions: tuple[str, ...]

    @property
    def acoustic_properties(self) -> AcousticProperties:
        return self.room_data.acoustic_properties

    def best_system(self) -> SpeakerSystem | None:
        """Return the plan matching :attr:`best_configuration`."""

        for system in self.speaker_systems:
            if system.configuration is self.best_configuration:
                return system
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "room_data": self.room_data.to_dict(),
            "speaker_systems": [system.to_dict() for system in self.speaker_systems],
            "best_configuration": self.best_configuration.value,
            "acoustic_issues": [issue.to_dict() for issue in self.acoustic_issues],
            "improvement_suggestions": list(self.improvement_suggestions),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> RoomAnalysis:
        return cls(
            room_data=RoomData.from_dict(payload["room_data"]),
            speaker_systems=tuple(SpeakerSystem.from_dict(item) for item in payload["speaker_systems"]),
            best_configuration=SpeakerConfiguration(payload["best_configuration"]),
            acoustic_issues=tuple(AcousticIssue.from_dict(item) for item in payload.get("acoustic_issues", ())),
            improvement_suggestions=tuple(str(item) for item in payload.get("improvement_suggestions", ())),
        )


def select_best_configuration(
    systems: Sequence[SpeakerSystem],
    room: RoomData,
) -> SpeakerConfiguration:
    """Pick the layout to recommend.

    Rooms below 200 m³ get a layout sized to their volume regardless of
    score; larger rooms take the top-ranked plan from ``systems``.
    """

    volume = room.dimensions.volume
    if volume < STEREO_BELOW_M3:
        return SpeakerConfiguration.STEREO
    if volume < STEREO_WITH_SUB_BELOW_M3:
        return SpeakerConfiguration.STEREO_WITH_SUB
    if volume < SURROUND_51_BELOW_M3:
        return SpeakerConfiguration.SURROUND_51
    if not systems:
        return SpeakerConfiguration.STEREO
    return systems[0].configuration


class AnalysisPipeline:
    """Runs acoustics, placement, scoring, issue detection and advice in order."""

    def __init__(self, settings: AnalysisSettings = DEFAULT_SETTINGS):
        self.settings = settings
        self.model = AcousticModel(settings)
        self.generator = PlacementGenerator(settings)
        self.scorer = SystemScorer()

    def placements_for(
        self,
        configuration: SpeakerConfiguration,
        room: RoomData,
    ) -> tuple[SpeakerPlacement, ...]:
        """Return the placements for ``configuration``.

        Rooms captured without surfaces get every confidence scaled by
        ``settings.empty_geometry_confidence_scale``.
        """

        placements = self.generator.generate(configuration, room.dimensions)
        if room.surfaces:
            return placements
        scale = self.settings.empty_geometry_confidence_scale
        return tuple(item.with_confidence(item.confidence * scale) for item in placements)

    def build_speaker_systems(self, room: RoomData, acoustics: AcousticProperties) -> tuple[SpeakerSystem, ...]:
        """Generate and score every layout, best first."""

        systems: list[SpeakerSystem] = []
        for configuration in SpeakerConfiguration:
            placements = self.placements_for(configuration, room)
            score = self.scorer.score(placements, room, acoustics)
            logger.debug("Scored %s: %.2f", configuration.value, score)
            systems.append(
                SpeakerSystem(
                    configuration=configuration,
                    placements=placements,
                    overall_score=score,
                    recommendations=system_recommendations(configuration, room),
                )
            )
        return rank_systems(systems)

    def analyze(self, room: RoomData, progress: ProgressCallback | None = None) -> RoomAnalysis:
        """Analyse ``room`` and return the complete result."""

        report = _ProgressReporter(progress)

        report(0.1, "Analyzing acoustic properties...")
        acoustics = self.model.compute_properties(room)
        analysed_room = replace(room, acoustic_properties=acoustics)

        report(0.3, "Generating speaker placement recommendations...")
        systems = self.build_speaker_systems(analysed_room, acoustics)

        report(0.6, "Identifying acoustic issues...")
        issues = detect_issues(analysed_room, acoustics)

        report(0.8, "Finalizing recommendations...")
        suggestions = build_suggestions(issues, analysed_room)

        report(0.9, "Selecting best configuration...")
        best = select_best_configuration(systems, analysed_room)

        analysis = RoomAnalysis(
            room_data=analysed_room,
            speaker_systems=systems,
            best_configuration=best,
            acoustic_issues=issues,
            improvement_suggestions=suggestions,
        )
        logger.info(
            "Analysed %.1f m³ room: RT=%.2f s, %d issues, best=%s",
            room.dimensions.volume,
            acoustics.reverberation_time,
            len(issues),
            best.value,
        )
        report(1.0, COMPLETE_LABEL)
        return analysis


class _ProgressReporter:
    """Forwards monotonic progress updates to an optional listener."""

    def __init__(self, callback: ProgressCallback | None) -> None:
        self._callback = callback
        self._last = 0.0

    def __call__(self, fraction: float, label: str) -> None:
        fraction = min(1.0, max(self._last, fraction))
        self._last = fraction
        logger.debug("Progress %.0f%%: %s", fraction * 100.0, label)
        if self._callback is None:
            return
        try:
            self._callback(fraction, label)
        except Exception:  # listener errors never abort the run
            logger.exception("Progress listener raised at %.2f (%s)", fraction, label)


def analyze_room(
    room: RoomData,
    progress: ProgressCallback | None = None,
    *,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> RoomAnalysis:
    """Analyse ``room`` with a fresh pipeline."""

    return AnalysisPipeline(settings).analyze(room, progress)


def analyze_in_background(
    room: RoomData,
    progress: ProgressCallback | None = None,
    *,
    executor: Executor | None = None,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> Future[RoomAnalysis]:
    """Run :func:`analyze_room` on a worker thread.

    Progress callbacks fire on the worker thread, in order, and the final
    ``(1.0, "complete")`` update is delivered before the future resolves.
    ``Future.cancel()`` only succeeds while the run is still queued.
    """

    if executor is not None:
        return executor.submit(analyze_room, room, progress, settings=settings)

    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="room-analysis")
    try:
        return pool.submit(analyze_room, room, progress, settings=settings)
    finally:
        pool.shutdown(wait=False)


__all__ = [
    "AnalysisPipeline",
    "COMPLETE_LABEL",
    "ProgressCallback",
    "RoomAnalysis",
    "analyze_in_background",
    "analyze_room",
    "select_best_configuration",
]
