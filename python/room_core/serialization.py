"""Persistence helpers and JSON schemas for the analysis data model.

Every entity exposes ``to_dict``/``from_dict``; this module wraps them into
JSON text round trips and derives JSON Schema v2020-12 documents from the
dataclasses so other services (FastAPI gateway, CLI, presentation clients)
can consume the same contracts without duplicating structure.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import MISSING, fields, is_dataclass
from enum import Enum
from types import UnionType
from typing import Any, Union, get_args, get_origin, get_type_hints

from .analysis import RoomAnalysis
from .placement import SpeakerPlacement, SpeakerSystem
from .room import AcousticProperties, Material, RoomData, RoomDimensions, Surface

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def encode_room(room: RoomData) -> dict[str, Any]:
    return room.to_dict()


def decode_room(payload: Mapping[str, Any]) -> RoomData:
    return _decode(RoomData, payload)


def encode_analysis(analysis: RoomAnalysis) -> dict[str, Any]:
    return analysis.to_dict()


def decode_analysis(payload: Mapping[str, Any]) -> RoomAnalysis:
    return _decode(RoomAnalysis, payload)


def dumps_room(room: RoomData, *, indent: int | None = None) -> str:
    return json.dumps(encode_room(room), indent=indent)


def loads_room(text: str | bytes) -> RoomData:
    return decode_room(_load_object(text))


def dumps_analysis(analysis: RoomAnalysis, *, indent: int | None = None) -> str:
    """Return ``analysis`` as JSON text that :func:`loads_analysis` restores exactly."""

    return json.dumps(encode_analysis(analysis), indent=indent)


def loads_analysis(text: str | bytes) -> RoomAnalysis:
    return decode_analysis(_load_object(text))


def _load_object(text: str | bytes) -> Mapping[str, Any]:
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object")
    return payload


def _decode(cls: Any, payload: Mapping[str, Any]) -> Any:
    try:
        return cls.from_dict(payload)
    except KeyError as exc:
        raise ValueError(f"{cls.__name__} payload is missing field {exc.args[0]!r}") from exc
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed {cls.__name__} payload: {exc}") from exc


def dataclass_schema(
    cls: type[Any],
    *,
    field_overrides: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a JSON schema describing the given dataclass."""

    if not is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    overrides: Mapping[str, Mapping[str, Any]] | None = field_overrides or _DATACLASS_OVERRIDES.get(cls)
    type_hints = get_type_hints(cls)

    properties: dict[str, dict[str, Any]] = {}
    required: list[str] = []

    for field in fields(cls):
        field_type = type_hints.get(field.name, field.type)
        schema = _schema_for_type(field_type)
        properties[field.name] = schema
        if field.default is MISSING and field.default_factory is MISSING:
            required.append(field.name)

    schema_doc: dict[str, Any] = {
        "title": cls.__name__,
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": required,
    }

    if overrides:
        for name, override in overrides.items():
            prop = properties.get(name)
            if not prop:
                continue
            _apply_override(prop, override)

    return schema_doc


def room_data_schema() -> dict[str, Any]:
    """Return the JSON schema of the room description accepted by the analysis."""

    return _document(dataclass_schema(RoomData))


def acoustic_properties_schema() -> dict[str, Any]:
    return _document(dataclass_schema(AcousticProperties))


def room_analysis_schema() -> dict[str, Any]:
    """Return the JSON schema of a persisted analysis result."""

    return _document(dataclass_schema(RoomAnalysis))


def analysis_json_schemas() -> dict[str, dict[str, Any]]:
    """Return a catalog of schemas keyed by entity name."""

    return {
        "room_data": room_data_schema(),
        "acoustic_properties": acoustic_properties_schema(),
        "room_analysis": room_analysis_schema(),
    }


def _document(schema: dict[str, Any]) -> dict[str, Any]:
    return {"$schema": SCHEMA_DRAFT, **schema}


def _schema_for_type(tp: Any) -> dict[str, Any]:
    origin = get_origin(tp)

    if origin is None:
        if tp is float:
            return {"type": "number"}
        if tp is str:
            return {"type": "string"}
        if tp is type(None):
            return {"type": "null"}
        if isinstance(tp, type) and issubclass(tp, Enum):
            return {"type": "string", "enum": [member.value for member in tp]}
        if isinstance(tp, type) and is_dataclass(tp):
            return dataclass_schema(tp)
        return {}

    if origin is tuple:
        # Entity collections are always variadic ``tuple[X, ...]``.
        item_type, _ = get_args(tp)
        return {
            "type": "array",
            "items": _schema_for_type(item_type) or {},
        }

    if origin is Union or origin is UnionType:
        options = [_schema_for_type(arg) for arg in get_args(tp)]
        options = [opt for opt in options if opt]
        if not options:
            return {}
        if len(options) == 1:
            return options[0]
        return {"anyOf": options}

    return {}


def _apply_override(schema: dict[str, Any], override: Mapping[str, Any]) -> None:
    if "anyOf" in schema:
        for option in schema["anyOf"]:
            if option.get("type") == "null":
                continue
            option.update(override)
    else:
        schema.update(override)


_DIMENSION_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "width": {"exclusiveMinimum": 0.0},
    "length": {"exclusiveMinimum": 0.0},
    "height": {"exclusiveMinimum": 0.0},
}

_COEFFICIENT = {"minimum": 0.0, "maximum": 1.0}

_MATERIAL_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "absorption_coefficient": _COEFFICIENT,
    "reflection_coefficient": _COEFFICIENT,
    "density": {"minimum": 0.0},
}

_SURFACE_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "area": {"minimum": 0.0},
    "absorption_coefficient": _COEFFICIENT,
}

_PROPERTIES_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "reverberation_time": {"minimum": 0.0},
    "speech_transmission_index": _COEFFICIENT,
}

_PLACEMENT_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "distance": {"minimum": 0.0},
    "confidence": _COEFFICIENT,
}

_SYSTEM_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "overall_score": {"minimum": 0.0, "maximum": 10.0},
}

_DATACLASS_OVERRIDES: dict[type[Any], dict[str, dict[str, Any]]] = {
    RoomDimensions: _DIMENSION_FIELD_OVERRIDES,
    Material: _MATERIAL_FIELD_OVERRIDES,
    Surface: _SURFACE_FIELD_OVERRIDES,
    AcousticProperties: _PROPERTIES_FIELD_OVERRIDES,
    SpeakerPlacement: _PLACEMENT_FIELD_OVERRIDES,
    SpeakerSystem: _SYSTEM_FIELD_OVERRIDES,
}


__all__ = [
    "SCHEMA_DRAFT",
    "acoustic_properties_schema",
    "analysis_json_schemas",
    "dataclass_schema",
    "decode_analysis",
    "decode_room",
    "dumps_analysis",
    "dumps_room",
    "encode_analysis",
    "encode_room",
    "loads_analysis",
    "loads_room",
    "room_analysis_schema",
    "room_data_schema",
]
