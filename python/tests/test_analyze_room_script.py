import json
import pathlib
import subprocess
import sys
import tempfile
import unittest

ROOM = {
    "dimensions": {"width": 5.0, "length": 6.0, "height": 2.8},
    "surfaces": [
        {
            "type": "wall",
            "area": 28.0,
            "material": {
                "name": "Drywall",
                "absorption_coefficient": 0.1,
                "reflection_coefficient": 0.9,
                "density": 1.0,
            },
            "absorption_coefficient": 0.1,
            "position": {"x": 0.0, "y": 1.4, "z": 3.0},
        }
    ],
    "obstacles": [],
    "scan_quality": "good",
}


class AnalyzeRoomScriptTests(unittest.TestCase):
    def setUp(self) -> None:
        project_root = pathlib.Path(__file__).resolve().parents[1]
        self.script_path = project_root / "scripts" / "analyze_room.py"
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.tmp = pathlib.Path(self._tmpdir.name)

    def _write_room(self, payload: dict) -> pathlib.Path:
        path = self.tmp / "room.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_cli_prints_report_and_writes_output(self) -> None:
        room_path = self._write_room(ROOM)
        output_path = self.tmp / "out" / "analysis.json"
        completed = subprocess.run(
            [sys.executable, str(self.script_path), str(room_path), "--output", str(output_path), "--pretty"],
            check=True,
            capture_output=True,
            text=True,
        )

        self.assertIn("Best configuration: 2.1 Stereo with Subwoofer", completed.stdout)
        self.assertIn("complete", completed.stderr)
        analysis = json.loads(output_path.read_text())
        self.assertEqual(analysis["best_configuration"], "stereoWithSub")
        self.assertEqual(len(analysis["speaker_systems"]), 5)

    def test_cli_json_mode(self) -> None:
        room_path = self._write_room(ROOM)
        completed = subprocess.run(
            [sys.executable, str(self.script_path), str(room_path), "--json", "--quiet"],
            check=True,
            capture_output=True,
            text=True,
        )
        payload = json.loads(completed.stdout)
        self.assertEqual(payload["best_configuration"], "stereoWithSub")
        self.assertEqual(completed.stderr, "")

    def test_degenerate_room_exits_with_error(self) -> None:
        payload = json.loads(json.dumps(ROOM))
        payload["surfaces"][0]["absorption_coefficient"] = 0.0
        room_path = self._write_room(payload)
        completed = subprocess.run(
            [sys.executable, str(self.script_path), str(room_path), "--quiet"],
            capture_output=True,
            text=True,
        )
        self.assertEqual(completed.returncode, 1)
        self.assertIn("Analysis failed", completed.stderr)

    def test_missing_file_is_usage_error(self) -> None:
        completed = subprocess.run(
            [sys.executable, str(self.script_path), str(self.tmp / "nope.json")],
            capture_output=True,
            text=True,
        )
        self.assertEqual(completed.returncode, 2)
        self.assertIn("Room file not found", completed.stderr)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
