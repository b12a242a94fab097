"""FastAPI gateway exposing room analysis endpoints and background analysis runs."""

from __future__ import annotations

import logging
import os
from typing import Any, Literal, cast

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, Field

from room_core import (
    DEFAULT_MATERIAL,
    AcousticModel,
    AnalysisPipeline,
    AnalysisSettings,
    DegenerateRoomError,
    Material,
    Obstacle,
    ObstacleType,
    RoomData,
    RoomDimensions,
    ScanQuality,
    SpeakerConfiguration,
    Surface,
    SurfaceType,
    Vector3,
    analysis_json_schemas,
    analyze_room,
    decode_room,
    encode_analysis,
    material_by_name,
    most_severe,
    system_recommendations,
)

from .store import VALID_STATUSES, AnalysisStore

logger = logging.getLogger(__name__)

_settings = AnalysisSettings.from_env()
_store: AnalysisStore | None = None


def _model_dump(model: BaseModel) -> dict[str, Any]:
    return cast(dict[str, Any], model.model_dump())


class VectorPayload(BaseModel):
    x: float
    y: float
    z: float

    def to_vector(self) -> Vector3:
        return Vector3(**_model_dump(self))


class MaterialPayload(BaseModel):
    name: str = Field(..., min_length=1)
    absorption_coefficient: float | None = Field(None, ge=0, le=1)
    reflection_coefficient: float | None = Field(None, ge=0, le=1)
    density: float | None = Field(None, ge=0)

    def to_material(self) -> Material:
        """Return the material, filling unspecified fields from the catalogue.

        Names outside the catalogue are accepted only with an explicit
        absorption coefficient.
        """

        try:
            known: Material | None = material_by_name(self.name)
        except ValueError:
            if self.absorption_coefficient is None:
                raise
            known = None

        if self.absorption_coefficient is not None:
            absorption = self.absorption_coefficient
            reflection = 1.0 - absorption
        else:
            assert known is not None
            absorption = known.absorption_coefficient
            reflection = known.reflection_coefficient
        if self.reflection_coefficient is not None:
            reflection = self.reflection_coefficient

        if self.density is not None:
            density = self.density
        elif known is not None:
            density = known.density
        else:
            density = DEFAULT_MATERIAL.density

        return Material(
            name=known.name if known is not None else self.name,
            absorption_coefficient=absorption,
            reflection_coefficient=reflection,
            density=density,
        )


class DimensionsPayload(BaseModel):
    width: float = Field(..., gt=0)
    length: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    def to_dimensions(self) -> RoomDimensions:
        return RoomDimensions(**_model_dump(self))


class SurfacePayload(BaseModel):
    type: Literal["wall", "floor", "ceiling", "window", "door"]
    area: float = Field(..., ge=0)
    material: MaterialPayload
    absorption_coefficient: float | None = Field(None, ge=0, le=1)
    position: VectorPayload = Field(default_factory=lambda: VectorPayload(x=0.0, y=0.0, z=0.0))

    def to_surface(self) -> Surface:
        material = self.material.to_material()
        absorption = (
            self.absorption_coefficient
            if self.absorption_coefficient is not None
            else material.absorption_coefficient
        )
        return Surface(
            type=SurfaceType(self.type),
            area=self.area,
            material=material,
            absorption_coefficient=absorption,
            position=self.position.to_vector(),
        )


class ObstaclePayload(BaseModel):
    type: Literal["furniture", "column", "beam", "other"]
    position: VectorPayload
    dimensions: VectorPayload
    material: MaterialPayload

    def to_obstacle(self) -> Obstacle:
        return Obstacle(
            type=ObstacleType(self.type),
            position=self.position.to_vector(),
            dimensions=self.dimensions.to_vector(),
            material=self.material.to_material(),
        )


class RoomPayload(BaseModel):
    dimensions: DimensionsPayload
    surfaces: list[SurfacePayload] = Field(default_factory=list)
    obstacles: list[ObstaclePayload] = Field(default_factory=list)
    scan_quality: Literal["excellent", "good", "fair", "poor"] = "good"

    def to_room_data(self) -> RoomData:
        return RoomData(
            dimensions=self.dimensions.to_dimensions(),
            surfaces=tuple(surface.to_surface() for surface in self.surfaces),
            obstacles=tuple(obstacle.to_obstacle() for obstacle in self.obstacles),
            scan_quality=ScanQuality(self.scan_quality),
        )


def _room_from_payload(payload: RoomPayload) -> RoomData:
    try:
        return payload.to_room_data()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _configuration_from_path(value: str) -> SpeakerConfiguration:
    for configuration in SpeakerConfiguration:
        if configuration.value.lower() == value.strip().lower():
            return configuration
    raise HTTPException(status_code=404, detail="Speaker configuration not found")


def _analysis_payload(room: RoomData) -> dict[str, Any]:
    try:
        analysis = analyze_room(room, settings=_settings)
    except DegenerateRoomError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    payload = encode_analysis(analysis)
    severity = most_severe(analysis.acoustic_issues)
    payload["summary"] = {
        "best_configuration": analysis.best_configuration.value,
        "best_configuration_label": analysis.best_configuration.label,
        "reverberation_time": analysis.acoustic_properties.reverberation_time,
        "issue_count": len(analysis.acoustic_issues),
        "most_severe_issue": severity.value if severity is not None else None,
    }
    return payload


def _placement_payload(configuration: SpeakerConfiguration, room: RoomData) -> dict[str, Any]:
    pipeline = AnalysisPipeline(_settings)
    try:
        acoustics = pipeline.model.compute_properties(room)
    except DegenerateRoomError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    placements = pipeline.placements_for(configuration, room)
    breakdown = pipeline.scorer.breakdown(placements, room, acoustics)
    return {
        "configuration": configuration.value,
        "label": configuration.label,
        "placements": [placement.to_dict() for placement in placements],
        "score": breakdown.to_dict(),
        "recommendations": list(system_recommendations(configuration, room)),
    }


def _run_analysis_task(run_id: str, room_payload: dict[str, Any]) -> None:
    if _store is None:  # pragma: no cover - store is created with the app
        return
    store = _store

    def report(fraction: float, label: str) -> None:
        store.update_progress(run_id, fraction, label)

    try:
        store.mark_running(run_id)
        room = decode_room(room_payload)
        analysis = analyze_room(room, report, settings=_settings)
        store.complete_run(run_id, encode_analysis(analysis))
        logger.info("Analysis run %s succeeded (%s)", run_id, analysis.best_configuration.value)
    except Exception as exc:
        logger.exception("Analysis run %s failed", run_id)
        store.mark_failed(run_id, str(exc))


_store = AnalysisStore(os.environ.get("ROOM_CORE_DB_PATH"))
app = FastAPI(title="Room Acoustics Gateway", version="0.1.0")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analyze")
async def analyze(payload: RoomPayload) -> dict[str, Any]:
    return _analysis_payload(_room_from_payload(payload))


@app.post("/acoustics")
async def acoustics(payload: RoomPayload) -> dict[str, Any]:
    room = _room_from_payload(payload)
    try:
        properties = AcousticModel(_settings).compute_properties(room)
    except DegenerateRoomError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return properties.to_dict()


@app.post("/placements/{configuration}")
async def placements(configuration: str, payload: RoomPayload) -> dict[str, Any]:
    resolved = _configuration_from_path(configuration)
    return _placement_payload(resolved, _room_from_payload(payload))


@app.post("/analysis/start")
async def start_analysis(payload: RoomPayload, background: BackgroundTasks) -> dict[str, Any]:
    room = _room_from_payload(payload)
    room_payload = room.to_dict()
    assert _store is not None
    record = _store.create_run(room_payload)
    logger.info("Queued analysis run %s", record.id)
    background.add_task(_run_analysis_task, record.id, room_payload)
    return record.to_dict()


@app.get("/analysis/runs")
async def list_runs(limit: int = 20, status: str | None = None) -> dict[str, Any]:
    assert _store is not None
    status_filter = None
    if status is not None:
        status_lower = status.lower()
        if status_lower not in VALID_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status filter")
        status_filter = status_lower
    runs = [record.to_dict() for record in _store.list_runs(limit=limit, status=status_filter)]
    return {"runs": runs}


@app.get("/analysis/stats")
async def analysis_stats() -> dict[str, Any]:
    assert _store is not None
    counts = _store.status_counts()
    total = sum(counts.values())
    return {"counts": counts, "total": total}


@app.get("/analysis/{run_id}")
async def fetch_run(run_id: str) -> dict[str, Any]:
    assert _store is not None
    record = _store.get_run(run_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return record.to_dict()


@app.get("/schemas")
async def list_schemas() -> dict[str, Any]:
    """Return the JSON schema catalog for the analysis data model."""

    return {"schemas": analysis_json_schemas()}


@app.get("/schemas/{name}")
async def fetch_schema(name: str) -> dict[str, Any]:
    catalog = analysis_json_schemas()
    key = name.lower()
    entry = catalog.get(key)
    if entry is None:
        raise HTTPException(status_code=404, detail="Schema not found")
    return {"name": key, "schema": entry}


__all__ = [
    "app",
    "RoomPayload",
    "DimensionsPayload",
    "SurfacePayload",
    "ObstaclePayload",
    "MaterialPayload",
    "VectorPayload",
]
