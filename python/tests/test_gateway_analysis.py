from __future__ import annotations

import os
import tempfile
import unittest
from unittest import mock

from fastapi.testclient import TestClient

import services.gateway.app.main as gateway_main
from services.gateway.app.store import AnalysisStore

LIVING_ROOM = {
    "dimensions": {"width": 5.0, "length": 6.0, "height": 2.8},
    "surfaces": [
        {
            "type": "wall",
            "area": 28.0,
            "material": {"name": "Drywall", "absorption_coefficient": 0.1},
            "position": {"x": 0.0, "y": 1.4, "z": 3.0},
        }
    ],
}


class RoomPayloadTests(unittest.TestCase):
    def test_material_filled_from_catalogue(self) -> None:
        payload = gateway_main.RoomPayload.model_validate(
            {
                "dimensions": {"width": 4.0, "length": 5.0, "height": 2.5},
                "surfaces": [{"type": "floor", "area": 20.0, "material": {"name": "carpet"}}],
                "scan_quality": "fair",
            }
        )
        room = payload.to_room_data()
        surface = room.surfaces[0]
        self.assertEqual(surface.material.name, "Carpet")
        self.assertAlmostEqual(surface.absorption_coefficient, 0.3)
        self.assertEqual(room.scan_quality.value, "fair")

    def test_surface_absorption_override(self) -> None:
        payload = gateway_main.SurfacePayload.model_validate(
            {"type": "wall", "area": 10.0, "material": {"name": "drywall"}, "absorption_coefficient": 0.25}
        )
        surface = payload.to_surface()
        self.assertAlmostEqual(surface.absorption_coefficient, 0.25)
        self.assertAlmostEqual(surface.material.absorption_coefficient, 0.1)

    def test_explicit_absorption_keeps_catalogue_density(self) -> None:
        material = gateway_main.MaterialPayload.model_validate(
            {"name": "carpet", "absorption_coefficient": 0.5}
        ).to_material()
        self.assertEqual(material.name, "Carpet")
        self.assertAlmostEqual(material.absorption_coefficient, 0.5)
        self.assertAlmostEqual(material.reflection_coefficient, 0.5)
        self.assertAlmostEqual(material.density, 0.4)

    def test_unknown_material_needs_absorption(self) -> None:
        material = gateway_main.MaterialPayload.model_validate(
            {"name": "Cork", "absorption_coefficient": 0.2}
        ).to_material()
        self.assertEqual(material.name, "Cork")
        self.assertAlmostEqual(material.density, 1.0)
        with self.assertRaises(ValueError):
            gateway_main.MaterialPayload.model_validate({"name": "Cork"}).to_material()


class GatewayAnalysisTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.NamedTemporaryFile(delete=False)
        self._tmp.close()
        self.store = AnalysisStore(self._tmp.name)
        patcher = mock.patch.object(gateway_main, "_store", self.store)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.client = TestClient(gateway_main.app)

    def tearDown(self) -> None:
        try:
            os.remove(self._tmp.name)
        except FileNotFoundError:
            pass

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_analyze_returns_summary(self) -> None:
        response = self.client.post("/analyze", json=LIVING_ROOM)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["best_configuration"], "stereoWithSub")
        summary = body["summary"]
        self.assertEqual(summary["best_configuration"], "stereoWithSub")
        self.assertEqual(summary["best_configuration_label"], "2.1 Stereo with Subwoofer")
        self.assertGreater(summary["reverberation_time"], 0.0)
        self.assertEqual(summary["issue_count"], len(body["acoustic_issues"]))
        self.assertEqual(len(body["speaker_systems"]), 5)

    def test_zero_absorption_is_unprocessable(self) -> None:
        payload = {
            "dimensions": {"width": 5.0, "length": 6.0, "height": 2.8},
            "surfaces": [
                {"type": "wall", "area": 28.0, "material": {"name": "Mirror", "absorption_coefficient": 0.0}}
            ],
        }
        response = self.client.post("/analyze", json=payload)
        self.assertEqual(response.status_code, 422)
        self.assertIn("absorption", response.json()["detail"])

    def test_non_positive_dimension_rejected(self) -> None:
        payload = {"dimensions": {"width": 0.0, "length": 6.0, "height": 2.8}}
        response = self.client.post("/analyze", json=payload)
        self.assertEqual(response.status_code, 422)

    def test_unknown_material_is_unprocessable(self) -> None:
        payload = {
            "dimensions": {"width": 5.0, "length": 6.0, "height": 2.8},
            "surfaces": [{"type": "wall", "area": 28.0, "material": {"name": "unobtainium"}}],
        }
        response = self.client.post("/analyze", json=payload)
        self.assertEqual(response.status_code, 422)

    def test_acoustics_endpoint(self) -> None:
        response = self.client.post("/acoustics", json=LIVING_ROOM)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["room_modes"]), 215)
        self.assertEqual(body["background_noise_level"], 30.0)

    def test_placements_endpoint(self) -> None:
        response = self.client.post("/placements/surround51", json=LIVING_ROOM)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["label"], "5.1 Surround")
        self.assertEqual(len(body["placements"]), 6)
        self.assertLessEqual(body["score"]["total"], 10.0)
        self.assertIn("recommendations", body)

        missing = self.client.post("/placements/quadraphonic", json=LIVING_ROOM)
        self.assertEqual(missing.status_code, 404)

    def test_placements_match_analysis_for_surface_less_room(self) -> None:
        bare_room = {"dimensions": LIVING_ROOM["dimensions"]}
        analysis = self.client.post("/analyze", json=bare_room).json()
        placement = self.client.post("/placements/surround51", json=bare_room).json()

        analysed = next(
            system for system in analysis["speaker_systems"] if system["configuration"] == "surround51"
        )
        self.assertAlmostEqual(placement["score"]["total"], analysed["overall_score"])
        self.assertEqual(placement["placements"], analysed["placements"])
        self.assertAlmostEqual(placement["placements"][0]["confidence"], 0.95 * 0.9)

    def test_background_run_lifecycle(self) -> None:
        response = self.client.post("/analysis/start", json=LIVING_ROOM)
        self.assertEqual(response.status_code, 200)
        run_id = response.json()["id"]

        fetched = self.client.get(f"/analysis/{run_id}")
        self.assertEqual(fetched.status_code, 200)
        body = fetched.json()
        self.assertEqual(body["status"], "succeeded")
        self.assertEqual(body["progress"], 1.0)
        self.assertEqual(body["progress_label"], "complete")
        self.assertEqual(body["result"]["best_configuration"], "stereoWithSub")

        runs = self.client.get("/analysis/runs", params={"status": "succeeded"}).json()["runs"]
        self.assertTrue(any(run["id"] == run_id for run in runs))

        stats = self.client.get("/analysis/stats").json()
        self.assertEqual(stats["counts"]["succeeded"], 1)
        self.assertEqual(stats["total"], 1)

    def test_failed_run_records_error(self) -> None:
        payload = {
            "dimensions": {"width": 5.0, "length": 6.0, "height": 2.8},
            "surfaces": [
                {"type": "wall", "area": 28.0, "material": {"name": "Mirror", "absorption_coefficient": 0.0}}
            ],
        }
        with self.assertLogs("services.gateway.app.main", level="ERROR"):
            run_id = self.client.post("/analysis/start", json=payload).json()["id"]
        record = self.client.get(f"/analysis/{run_id}").json()
        self.assertEqual(record["status"], "failed")
        self.assertIn("absorption", record["error"])

    def test_unknown_run_and_bad_filter(self) -> None:
        self.assertEqual(self.client.get("/analysis/missing").status_code, 404)
        self.assertEqual(self.client.get("/analysis/runs", params={"status": "bogus"}).status_code, 400)

    def test_schema_endpoints(self) -> None:
        catalog = self.client.get("/schemas").json()["schemas"]
        self.assertIn("room_data", catalog)
        entry = self.client.get("/schemas/ROOM_ANALYSIS").json()
        self.assertEqual(entry["name"], "room_analysis")
        self.assertEqual(entry["schema"]["title"], "RoomAnalysis")
        self.assertEqual(self.client.get("/schemas/unknown").status_code, 404)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
