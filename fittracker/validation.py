"""Domain validation for GPS samples, workouts and user preferences.

Every validator is a pure function returning a ``ValidationResult``; bad data
is reported, never raised. Rules are checked in a fixed order and the first
failure wins so callers always see the most fundamental problem first.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Sequence

from . import config
from .models import (
    ActivityType,
    LocationPoint,
    ThemeMode,
    UnitSystem,
    UserPreferences,
    ValidationResult,
    Workout,
)
from .utils import to_utc_aware

_LOG = logging.getLogger(__name__)

_ACTIVITY_TYPES = tuple(item.value for item in ActivityType)
_UNIT_SYSTEMS = tuple(item.value for item in UnitSystem)
_THEMES = tuple(item.value for item in ThemeMode)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _in_range(value: Any, low: float, high: float) -> bool:
    # NaN fails every comparison and therefore every range check.
    return _is_number(value) and low <= value <= high


def _non_negative(value: Any) -> bool:
    return _is_number(value) and not math.isnan(value) and value >= 0


def validate_location_point(point: LocationPoint) -> ValidationResult:
    """Check a single GPS sample against physical bounds."""

    if not isinstance(point.timestamp, datetime):
        return ValidationResult.fail("Location point must have a valid timestamp")
    if not _in_range(point.latitude, -90.0, 90.0):
        return ValidationResult.fail("Latitude must be between -90 and 90 degrees")
    if not _in_range(point.longitude, -180.0, 180.0):
        return ValidationResult.fail(
            "Longitude must be between -180 and 180 degrees"
        )
    if not _non_negative(point.accuracy):
        return ValidationResult.fail("Accuracy must be a positive number")
    if point.altitude is not None and not _is_number(point.altitude):
        return ValidationResult.fail("Altitude must be a number")
    if point.speed is not None and not _non_negative(point.speed):
        return ValidationResult.fail("Speed must be a positive number")
    if point.heading is not None and not _in_range(point.heading, 0.0, 360.0):
        return ValidationResult.fail("Heading must be between 0 and 360 degrees")
    return ValidationResult.ok()


def validate_location_points(points: Sequence[LocationPoint]) -> ValidationResult:
    """Validate each sample, then require non-decreasing timestamps.

    An empty sequence is valid (a workout that has not recorded a fix yet).
    Out-of-order input is reported, not reordered.
    """

    if not isinstance(points, Sequence) or isinstance(points, (str, bytes)):
        return ValidationResult.fail("GPS points must be an array")

    for index, point in enumerate(points):
        result = validate_location_point(point)
        if not result.is_valid:
            return ValidationResult.fail(
                f"Invalid GPS point at index {index}: {result.error}"
            )

    for previous, current in zip(points, points[1:]):
        if to_utc_aware(current.timestamp) < to_utc_aware(previous.timestamp):
            return ValidationResult.fail("GPS points must be in chronological order")
    return ValidationResult.ok()


def validate_activity_type(value: Any) -> ValidationResult:
    if isinstance(value, str) and value in _ACTIVITY_TYPES:
        return ValidationResult.ok()
    return ValidationResult.fail(
        f"Activity type must be one of: {', '.join(_ACTIVITY_TYPES)}"
    )


def _duration_mismatch(declared: float, observed: float) -> bool:
    return abs(observed - declared) > config.WORKOUT_DURATION_TOLERANCE_S


def validate_workout(workout: Workout) -> ValidationResult:
    """Terminal gate a completed workout must pass before it is persisted.

    Beyond field checks, the declared ``duration`` must agree with both
    ``end_time - start_time`` and, when at least two GPS samples exist, the
    span between the first and last sample, within
    ``config.WORKOUT_DURATION_TOLERANCE_S`` seconds.
    """

    if not workout.id:
        return ValidationResult.fail("Workout must have an ID")

    type_result = validate_activity_type(workout.type)
    if not type_result.is_valid:
        return type_result

    if not isinstance(workout.start_time, datetime):
        return ValidationResult.fail("Workout must have a valid start time")
    if not isinstance(workout.end_time, datetime):
        return ValidationResult.fail("Workout must have a valid end time")
    start = to_utc_aware(workout.start_time)
    end = to_utc_aware(workout.end_time)
    if end <= start:
        return ValidationResult.fail("End time must be after start time")

    if not _non_negative(workout.distance):
        return ValidationResult.fail("Distance must be a non-negative number")
    if not _is_number(workout.duration) or not workout.duration > 0:
        return ValidationResult.fail("Duration must be a positive number")
    if not _non_negative(workout.avg_pace):
        return ValidationResult.fail("Average pace must be a non-negative number")
    if not _non_negative(workout.max_speed):
        return ValidationResult.fail("Maximum speed must be a non-negative number")
    if workout.calories is not None and not _non_negative(workout.calories):
        return ValidationResult.fail("Calories must be a non-negative number")

    points_result = validate_location_points(workout.gps_points)
    if not points_result.is_valid:
        return points_result

    declared = float(workout.duration)
    calculated = (end - start).total_seconds()
    if _duration_mismatch(declared, calculated):
        _LOG.debug(
            "Workout %s duration %.1fs disagrees with start/end span %.1fs",
            workout.id,
            declared,
            calculated,
        )
        return ValidationResult.fail(
            f"Duration ({declared:g}s) doesn't match time difference between "
            f"start and end ({calculated:g}s)"
        )

    if len(workout.gps_points) >= 2:
        first = to_utc_aware(workout.gps_points[0].timestamp)
        last = to_utc_aware(workout.gps_points[-1].timestamp)
        span = (last - first).total_seconds()
        if _duration_mismatch(declared, span):
            _LOG.debug(
                "Workout %s duration %.1fs disagrees with GPS span %.1fs",
                workout.id,
                declared,
                span,
            )
            return ValidationResult.fail(
                f"Duration ({declared:g}s) doesn't match the GPS timeline "
                f"({span:g}s)"
            )

    return ValidationResult.ok()


def validate_user_preferences(prefs: UserPreferences) -> ValidationResult:
    if not (isinstance(prefs.units, str) and prefs.units in _UNIT_SYSTEMS):
        return ValidationResult.fail('Units must be either "metric" or "imperial"')

    type_result = validate_activity_type(prefs.default_activity_type)
    if not type_result.is_valid:
        return type_result

    if not isinstance(prefs.auto_background_tracking, bool):
        return ValidationResult.fail("autoBackgroundTracking must be a boolean")
    if not isinstance(prefs.enable_haptic_feedback, bool):
        return ValidationResult.fail("enableHapticFeedback must be a boolean")
    if not isinstance(prefs.enable_animations, bool):
        return ValidationResult.fail("enableAnimations must be a boolean")

    if not (isinstance(prefs.theme, str) and prefs.theme in _THEMES):
        return ValidationResult.fail('Theme must be "light", "dark", or "auto"')

    if not _is_number(prefs.gps_update_interval) or not prefs.gps_update_interval > 0:
        return ValidationResult.fail("GPS update interval must be a positive number")

    if prefs.min_distance_filter is not None and not _non_negative(
        prefs.min_distance_filter
    ):
        return ValidationResult.fail(
            "Minimum distance filter must be a non-negative number"
        )
    if prefs.show_character is not None and not isinstance(prefs.show_character, bool):
        return ValidationResult.fail("showCharacter must be a boolean")
    return ValidationResult.ok()


def create_default_user_preferences() -> UserPreferences:
    """Return the documented default preferences (always valid)."""

    return UserPreferences(
        units=UnitSystem.METRIC,
        default_activity_type=ActivityType.WALK,
        auto_background_tracking=True,
        gps_update_interval=5.0,
        theme=ThemeMode.AUTO,
        enable_haptic_feedback=True,
        enable_animations=True,
        min_distance_filter=5.0,
        show_character=True,
    )


__all__ = [
    "validate_location_point",
    "validate_location_points",
    "validate_activity_type",
    "validate_workout",
    "validate_user_preferences",
    "create_default_user_preferences",
]
