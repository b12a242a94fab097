"""CLI for analysing a room description and recommending a loudspeaker layout."""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from collections.abc import Mapping, Sequence

SCRIPT_PATH = pathlib.Path(__file__).resolve()
PYTHON_ROOT = SCRIPT_PATH.parent.parent
PROJECT_ROOT = PYTHON_ROOT.parent

for candidate in (PROJECT_ROOT, PYTHON_ROOT):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from room_core import (  # noqa: E402 - path adjusted above
    AnalysisSettings,
    DegenerateRoomError,
    RoomAnalysis,
    analyze_room,
    encode_analysis,
    loads_room,
    most_severe,
)


def _write_json(path: pathlib.Path | None, payload: Mapping[str, object], pretty: bool) -> None:
    if path is None:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dict(payload), indent=2 if pretty else None), encoding="utf-8")


def _print_progress(fraction: float, label: str) -> None:
    print(f"[{fraction * 100:5.1f}%] {label}", file=sys.stderr)


def _print_report(analysis: RoomAnalysis) -> None:
    dims = analysis.room_data.dimensions
    props = analysis.acoustic_properties
    print(f"Room: {dims.width:g} x {dims.length:g} x {dims.height:g} m ({dims.volume:.1f} m^3)")
    print(f"Reverberation time: {props.reverberation_time:.2f} s")
    print(f"Clarity index: {props.clarity_index:.2f}")
    print(f"Speech transmission index: {props.speech_transmission_index:.2f}")
    print(f"Best configuration: {analysis.best_configuration.label}")
    print("Ranking:")
    for system in analysis.speaker_systems:
        print(f"  {system.configuration.label:<28} {system.overall_score:5.2f} ({system.speaker_count} speakers)")
    severity = most_severe(analysis.acoustic_issues)
    worst = severity.label if severity is not None else "none"
    print(f"Issues: {len(analysis.acoustic_issues)} (most severe: {worst})")
    print("Suggestions:")
    for suggestion in analysis.improvement_suggestions:
        print(f"  - {suggestion}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("room", type=pathlib.Path, help="Path to a RoomData JSON document")
    parser.add_argument("--output", type=pathlib.Path, help="Write the full analysis to a JSON file")
    parser.add_argument("--json", action="store_true", help="Emit the full analysis as JSON on stdout")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON outputs")
    parser.add_argument(
        "--surface-area",
        choices=("cube", "surfaces"),
        help="Surface area estimate used for reverberation (default: cube-equivalent)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress lines on stderr")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.room.exists():
        parser.error(f"Room file not found: {args.room}")

    try:
        room = loads_room(args.room.read_text(encoding="utf-8"))
    except ValueError as exc:
        parser.error(f"Invalid room description: {exc}")

    settings = AnalysisSettings.from_env()
    if args.surface_area:
        settings = settings.replace(surface_area_strategy=args.surface_area)

    progress = None if args.quiet else _print_progress
    try:
        analysis = analyze_room(room, progress, settings=settings)
    except DegenerateRoomError as exc:
        print(f"Analysis failed: {exc}", file=sys.stderr)
        return 1

    payload = encode_analysis(analysis)
    _write_json(args.output, payload, args.pretty)

    if args.json:
        print(json.dumps(payload, indent=2 if args.pretty else None))
    else:
        _print_report(analysis)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
