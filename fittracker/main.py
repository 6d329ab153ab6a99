"""Command line entry point for inspecting workouts and GPS traces.

Usage:
    python -m fittracker validate workout.json
    python -m fittracker stats points.json --segment-size 50
    python -m fittracker prefs [preferences.json]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List

from . import config
from .activity_types import profile_for
from .errors import PayloadFormatError
from .filters import (
    encode_route,
    filter_by_accuracy,
    filter_by_speed,
    simplify_route,
    smooth_points,
)
from .io import load_points, load_preferences, load_workout
from .models import ActivityType, LocationPoint
from .stats import combine_segments, compute_segment_stats, compute_stats
from .utils import json_dumps_sorted
from .validation import (
    create_default_user_preferences,
    validate_location_points,
    validate_user_preferences,
    validate_workout,
)

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_INPUT_ERROR = 2


def _setup_logging(verbose: bool) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _emit(payload: Dict[str, Any]) -> None:
    sys.stdout.write(json_dumps_sorted(payload, indent=2) + "\n")


def _cmd_validate(args: argparse.Namespace) -> int:
    workout = load_workout(args.path)
    result = validate_workout(workout)
    payload: Dict[str, Any] = {"is_valid": result.is_valid, "error": result.error}
    if result.is_valid:
        payload["stats"] = compute_stats(workout.gps_points).to_dict()
    else:
        LOGGER.warning("Workout %s rejected: %s", workout.id or "?", result.error)
    _emit(payload)
    return EXIT_OK if result.is_valid else EXIT_INVALID


def _clean_points(
    points: List[LocationPoint], args: argparse.Namespace
) -> List[LocationPoint]:
    cleaned = filter_by_accuracy(points, args.max_accuracy)
    if args.activity:
        cleaned = filter_by_speed(cleaned, profile_for(args.activity).max_reasonable_speed)
    if args.smooth:
        cleaned = smooth_points(cleaned)
    return cleaned


def _cmd_stats(args: argparse.Namespace) -> int:
    raw_points = load_points(args.path)
    result = validate_location_points(raw_points)
    if not result.is_valid:
        LOGGER.warning("GPS trace %s rejected: %s", args.path, result.error)
        _emit({"is_valid": False, "error": result.error})
        return EXIT_INVALID

    points = _clean_points(raw_points, args)
    if len(points) < len(raw_points):
        LOGGER.info(
            "Filtered %d of %d samples from %s",
            len(raw_points) - len(points),
            len(raw_points),
            args.path,
        )
    segments = compute_segment_stats(points, args.segment_size)
    route = simplify_route(points, args.simplify)
    _emit(
        {
            "is_valid": True,
            "dropped_points": len(raw_points) - len(points),
            "stats": compute_stats(points).to_dict(),
            "combined": combine_segments(segments).to_dict(),
            "segments": [
                {
                    "index": seg.index,
                    "start_index": seg.start_index,
                    "end_index": seg.end_index,
                    "stats": seg.stats.to_dict(),
                }
                for seg in segments
            ],
            "route_points": len(route),
            "polyline": encode_route(route),
        }
    )
    return EXIT_OK


def _cmd_prefs(args: argparse.Namespace) -> int:
    if args.path:
        prefs = load_preferences(args.path)
    else:
        prefs = create_default_user_preferences()
    result = validate_user_preferences(prefs)
    _emit(
        {
            "is_valid": result.is_valid,
            "error": result.error,
            "preferences": prefs.to_dict(),
        }
    )
    return EXIT_OK if result.is_valid else EXIT_INVALID


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fittracker", description="Validate workouts and derive GPS stats"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate a workout JSON file")
    validate.add_argument("path")
    validate.set_defaults(handler=_cmd_validate)

    stats = sub.add_parser("stats", help="Compute statistics for a GPS trace")
    stats.add_argument("path")
    stats.add_argument(
        "--segment-size",
        type=int,
        default=config.STATS_SEGMENT_SIZE,
        help=f"Points per route segment (default: {config.STATS_SEGMENT_SIZE})",
    )
    stats.add_argument(
        "--simplify",
        type=float,
        default=config.ROUTE_SIMPLIFICATION_TOLERANCE_M,
        help="Route simplification tolerance in metres (0 disables)",
    )
    stats.add_argument(
        "--max-accuracy",
        type=float,
        default=config.MAX_ACCEPTED_ACCURACY_M,
        help="Drop samples with a larger accuracy radius in metres",
    )
    stats.add_argument(
        "--activity",
        choices=[item.value for item in ActivityType],
        help="Drop implausible jumps for this activity type",
    )
    stats.add_argument(
        "--smooth", action="store_true", help="Kalman-smooth coordinates"
    )
    stats.set_defaults(handler=_cmd_stats)

    prefs = sub.add_parser("prefs", help="Validate preferences (or show defaults)")
    prefs.add_argument("path", nargs="?")
    prefs.set_defaults(handler=_cmd_prefs)

    args = parser.parse_args(argv)
    if getattr(args, "segment_size", 1) < 1:
        parser.error("--segment-size must be >= 1")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return args.handler(args)
    except (PayloadFormatError, FileNotFoundError) as exc:
        LOGGER.error("Failed to load input '%s': %s", args.path, exc)
        return EXIT_INPUT_ERROR
