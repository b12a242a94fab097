import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from room_core import (
    AcousticIssue,
    IssueType,
    RoomData,
    RoomDimensions,
    ScanQuality,
    Severity,
    SpeakerConfiguration,
    build_suggestions,
    system_recommendations,
)
from room_core.recommendations import GENERAL_TIPS, MULTI_SUB_NOTE, NEAR_FIELD_NOTE


def _issue(solution: str) -> AcousticIssue:
    return AcousticIssue(IssueType.STANDING_WAVES, Severity.MEDIUM, "mode", None, solution)


class SuggestionTests(unittest.TestCase):
    def test_issue_solutions_come_first(self) -> None:
        room = RoomData(dimensions=RoomDimensions(5.0, 6.0, 5.0))
        suggestions = build_suggestions([_issue("fix a"), _issue("fix b")], room)
        self.assertEqual(suggestions[:2], ("fix a", "fix b"))
        self.assertEqual(suggestions[2:5], GENERAL_TIPS)
        self.assertEqual(len(suggestions), 5)

    def test_room_size_notes(self) -> None:
        small = build_suggestions([], RoomData(dimensions=RoomDimensions(4.0, 5.0, 2.5)))
        self.assertEqual(small[-1], NEAR_FIELD_NOTE)

        large = build_suggestions([], RoomData(dimensions=RoomDimensions(10.0, 12.0, 3.0)))
        self.assertEqual(large[-1], MULTI_SUB_NOTE)

        medium = build_suggestions([], RoomData(dimensions=RoomDimensions(6.0, 8.0, 3.0)))
        self.assertEqual(medium, GENERAL_TIPS)

    def test_poor_scan_adds_manual_input_hint(self) -> None:
        room = RoomData(dimensions=RoomDimensions(6.0, 8.0, 3.0), scan_quality=ScanQuality.POOR)
        suggestions = build_suggestions([], room)
        self.assertEqual(suggestions[-1], ScanQuality.POOR.description)

    def test_duplicates_kept_unless_requested(self) -> None:
        room = RoomData(dimensions=RoomDimensions(6.0, 8.0, 3.0))
        issues = [_issue("same"), _issue("same")]
        self.assertEqual(build_suggestions(issues, room).count("same"), 2)
        self.assertEqual(build_suggestions(issues, room, deduplicate=True).count("same"), 1)


class SystemRecommendationTests(unittest.TestCase):
    def test_common_advice_for_every_layout(self) -> None:
        room = RoomData(dimensions=RoomDimensions(5.0, 6.0, 2.8))
        for configuration in SpeakerConfiguration:
            with self.subTest(configuration=configuration):
                advice = system_recommendations(configuration, room)
                self.assertIn("Ensure speakers are at ear level for optimal listening experience", advice)
                self.assertIn("Keep speakers away from walls to minimize reflections", advice)

    def test_room_size_drives_speaker_size_advice(self) -> None:
        small = system_recommendations(
            SpeakerConfiguration.STEREO, RoomData(dimensions=RoomDimensions(3.0, 4.0, 2.5))
        )
        self.assertIn("Consider smaller speakers for this room size", small)

        large = system_recommendations(
            SpeakerConfiguration.STEREO, RoomData(dimensions=RoomDimensions(8.0, 10.0, 3.0))
        )
        self.assertIn("Consider larger speakers for better room filling", large)

    def test_layout_specific_advice(self) -> None:
        room = RoomData(dimensions=RoomDimensions(5.0, 6.0, 2.8))
        atmos = system_recommendations(SpeakerConfiguration.DOLBY_ATMOS, room)
        self.assertEqual(atmos[-1], "Ensure ceiling height is sufficient for overhead speakers")
        stereo = system_recommendations(SpeakerConfiguration.STEREO, room)
        self.assertTrue(any("triangle" in line for line in stereo))
        self.assertFalse(any("subwoofer" in line for line in stereo))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
