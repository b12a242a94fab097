import json
import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from room_core import (
    Material,
    Obstacle,
    ObstacleType,
    RoomData,
    RoomDimensions,
    ScanQuality,
    Surface,
    SurfaceType,
    Vector3,
    analysis_json_schemas,
    analyze_room,
    dataclass_schema,
    decode_room,
    dumps_analysis,
    dumps_room,
    loads_analysis,
    loads_room,
)
from room_core.serialization import SCHEMA_DRAFT


def _room() -> RoomData:
    carpet = Material("Carpet", 0.3, 0.7, 0.4)
    drywall = Material("Drywall", 0.1, 0.9, 1.0)
    return RoomData(
        dimensions=RoomDimensions(4.5, 6.0, 2.7),
        surfaces=(
            Surface.of(SurfaceType.FLOOR, 27.0, carpet, Vector3(2.25, 0.0, 3.0)),
            Surface.of(SurfaceType.WALL, 16.2, drywall, Vector3(0.0, 1.35, 3.0)),
        ),
        obstacles=(
            Obstacle(ObstacleType.FURNITURE, Vector3(2.25, 0.4, 4.0), Vector3(2.0, 0.8, 0.9), carpet),
        ),
        scan_quality=ScanQuality.EXCELLENT,
    )


class SerializationTests(unittest.TestCase):
    def test_room_json_round_trip(self) -> None:
        room = _room()
        text = dumps_room(room, indent=2)
        self.assertEqual(json.loads(text)["dimensions"]["width"], 4.5)
        self.assertEqual(loads_room(text), room)

    def test_analysis_json_round_trip(self) -> None:
        analysis = analyze_room(_room())
        restored = loads_analysis(dumps_analysis(analysis))
        self.assertEqual(restored, analysis)
        self.assertEqual(restored.best_system(), analysis.best_system())

    def test_missing_field_reports_value_error(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            decode_room({"surfaces": []})
        self.assertIn("dimensions", str(ctx.exception))

    def test_unknown_enum_value_is_value_error(self) -> None:
        payload = _room().to_dict()
        payload["scan_quality"] = "blurry"
        with self.assertRaises(ValueError):
            decode_room(payload)

    def test_non_object_json_rejected(self) -> None:
        with self.assertRaises(ValueError):
            loads_room("[1, 2, 3]")


class SchemaTests(unittest.TestCase):
    def test_catalog_entries(self) -> None:
        catalog = analysis_json_schemas()
        self.assertEqual(set(catalog), {"room_data", "acoustic_properties", "room_analysis"})
        for schema in catalog.values():
            self.assertEqual(schema["$schema"], SCHEMA_DRAFT)
            self.assertEqual(schema["type"], "object")

    def test_room_data_schema_shape(self) -> None:
        schema = analysis_json_schemas()["room_data"]
        self.assertEqual(schema["title"], "RoomData")
        self.assertEqual(schema["required"], ["dimensions"])
        dimensions = schema["properties"]["dimensions"]
        self.assertEqual(dimensions["properties"]["width"]["exclusiveMinimum"], 0.0)
        scan_quality = schema["properties"]["scan_quality"]
        self.assertEqual(scan_quality["enum"], ["excellent", "good", "fair", "poor"])
        surfaces = schema["properties"]["surfaces"]
        self.assertEqual(surfaces["type"], "array")
        self.assertEqual(surfaces["items"]["properties"]["type"]["enum"][0], "wall")

    def test_analysis_schema_marks_nullable_position(self) -> None:
        schema = analysis_json_schemas()["room_analysis"]
        issue = schema["properties"]["acoustic_issues"]["items"]
        position = issue["properties"]["position"]
        self.assertIn("anyOf", position)
        self.assertIn({"type": "null"}, position["anyOf"])
        systems = schema["properties"]["speaker_systems"]["items"]
        self.assertEqual(systems["properties"]["overall_score"]["maximum"], 10.0)

    def test_variadic_tuple_fields_become_arrays(self) -> None:
        schema = analysis_json_schemas()["acoustic_properties"]
        self.assertEqual(schema["properties"]["room_modes"], {"type": "array", "items": {"type": "number"}})

    def test_rejects_non_dataclass(self) -> None:
        with self.assertRaises(TypeError):
            dataclass_schema(dict)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
