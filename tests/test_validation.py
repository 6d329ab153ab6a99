"""Tests for GPS sample, workout and preference validators."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from conftest import T0, make_point, make_track, make_workout
from fittracker.models import ActivityType, UnitSystem
from fittracker.validation import (
    create_default_user_preferences,
    validate_activity_type,
    validate_location_point,
    validate_location_points,
    validate_user_preferences,
    validate_workout,
)


@pytest.mark.parametrize("lat", [-90.0, 0.0, 90.0])
def test_latitude_bounds_are_inclusive(lat: float) -> None:
    assert validate_location_point(make_point(lat=lat)).is_valid


@pytest.mark.parametrize("lat", [-90.0001, 90.0001, float("nan")])
def test_latitude_out_of_range_fails(lat: float) -> None:
    result = validate_location_point(make_point(lat=lat))
    assert result.is_valid is False
    assert result.error == "Latitude must be between -90 and 90 degrees"


@pytest.mark.parametrize("lon", [-180.0, 180.0])
def test_longitude_bounds_are_inclusive(lon: float) -> None:
    assert validate_location_point(make_point(lon=lon)).is_valid


def test_longitude_out_of_range_fails() -> None:
    result = validate_location_point(make_point(lon=180.5))
    assert result.error == "Longitude must be between -180 and 180 degrees"


def test_negative_accuracy_fails() -> None:
    result = validate_location_point(make_point(accuracy=-1.0))
    assert result.error == "Accuracy must be a positive number"


def test_zero_accuracy_and_speed_are_accepted() -> None:
    assert validate_location_point(make_point(accuracy=0.0, speed=0.0)).is_valid


def test_negative_speed_fails() -> None:
    result = validate_location_point(make_point(speed=-0.1))
    assert result.error == "Speed must be a positive number"


@pytest.mark.parametrize("heading,valid", [(0.0, True), (360.0, True), (360.5, False)])
def test_heading_range(heading: float, valid: bool) -> None:
    assert validate_location_point(make_point(heading=heading)).is_valid is valid


def test_missing_timestamp_fails() -> None:
    point = replace(make_point(), timestamp=None)
    result = validate_location_point(point)
    assert result.error == "Location point must have a valid timestamp"


def test_empty_point_list_is_valid() -> None:
    assert validate_location_points([]).is_valid


def test_invalid_point_reports_index() -> None:
    points = make_track(3)
    points[1] = replace(points[1], latitude=95.0)
    result = validate_location_points(points)
    assert result.error == (
        "Invalid GPS point at index 1: Latitude must be between -90 and 90 degrees"
    )


def test_swapping_adjacent_timestamps_breaks_chronology() -> None:
    points = make_track(5)
    assert validate_location_points(points).is_valid
    points[2], points[3] = (
        replace(points[2], timestamp=points[3].timestamp),
        replace(points[3], timestamp=points[2].timestamp),
    )
    result = validate_location_points(points)
    assert result.error == "GPS points must be in chronological order"


def test_equal_timestamps_are_allowed() -> None:
    points = [make_point(seconds=0), make_point(lat=51.5001, seconds=0)]
    assert validate_location_points(points).is_valid


def test_activity_type_must_be_supported() -> None:
    assert validate_activity_type("run").is_valid
    assert validate_activity_type(ActivityType.BIKE).is_valid
    result = validate_activity_type("swim")
    assert result.error == "Activity type must be one of: walk, run, bike"


def test_consistent_workout_is_valid(workout) -> None:
    assert validate_workout(workout).is_valid


def test_workout_requires_id() -> None:
    result = validate_workout(make_workout(id=""))
    assert result.error == "Workout must have an ID"


def test_workout_end_must_follow_start() -> None:
    result = validate_workout(make_workout(end_time=T0))
    assert result.error == "End time must be after start time"


def test_workout_negative_distance_fails() -> None:
    result = validate_workout(make_workout(distance=-1.0))
    assert result.error == "Distance must be a non-negative number"


def test_workout_with_bad_point_surfaces_point_error() -> None:
    points = [make_point(seconds=0), make_point(lon=200.0, seconds=1800)]
    result = validate_workout(make_workout(gps_points=points))
    assert result.error == (
        "Invalid GPS point at index 1: Longitude must be between -180 and 180 degrees"
    )


def test_declared_duration_must_match_start_end_span() -> None:
    workout = make_workout(end_time=T0 + timedelta(seconds=3600), duration=1800)
    result = validate_workout(workout)
    assert result.is_valid is False
    assert result.error == (
        "Duration (1800s) doesn't match time difference between start and end (3600s)"
    )


def test_declared_duration_must_match_gps_timeline() -> None:
    points = [make_point(seconds=0), make_point(lat=51.51, seconds=1000)]
    result = validate_workout(make_workout(gps_points=points))
    assert result.error == "Duration (1800s) doesn't match the GPS timeline (1000s)"


def test_sub_second_duration_drift_is_tolerated() -> None:
    assert validate_workout(make_workout(duration=1800.5)).is_valid


def test_gps_timeline_ignored_for_single_point() -> None:
    workout = make_workout(gps_points=[make_point(seconds=300)])
    assert validate_workout(workout).is_valid


def test_default_preferences_are_valid() -> None:
    prefs = create_default_user_preferences()
    assert validate_user_preferences(prefs).is_valid
    assert prefs.units is UnitSystem.METRIC
    assert prefs.default_activity_type is ActivityType.WALK
    assert prefs.gps_update_interval == 5.0
    assert prefs.min_distance_filter == 5.0
    assert prefs.show_character is True


def test_preferences_reject_unknown_units() -> None:
    prefs = replace(create_default_user_preferences(), units="kelvin")
    result = validate_user_preferences(prefs)
    assert result.error == 'Units must be either "metric" or "imperial"'


def test_preferences_reject_non_boolean_flags() -> None:
    prefs = replace(create_default_user_preferences(), enable_animations="yes")
    assert validate_user_preferences(prefs).error == "enableAnimations must be a boolean"


def test_preferences_reject_non_positive_interval() -> None:
    prefs = replace(create_default_user_preferences(), gps_update_interval=0)
    assert (
        validate_user_preferences(prefs).error
        == "GPS update interval must be a positive number"
    )


def test_preferences_optional_fields_may_be_absent() -> None:
    prefs = replace(
        create_default_user_preferences(), min_distance_filter=None, show_character=None
    )
    assert validate_user_preferences(prefs).is_valid


def test_preferences_reject_unknown_theme() -> None:
    prefs = replace(create_default_user_preferences(), theme="sepia")
    assert validate_user_preferences(prefs).error == 'Theme must be "light", "dark", or "auto"'


def test_preferences_reject_negative_distance_filter() -> None:
    prefs = replace(create_default_user_preferences(), min_distance_filter=-1.0)
    assert (
        validate_user_preferences(prefs).error
        == "Minimum distance filter must be a non-negative number"
    )


def test_preferences_reject_unknown_default_activity() -> None:
    prefs = replace(create_default_user_preferences(), default_activity_type="swim")
    assert (
        validate_user_preferences(prefs).error
        == "Activity type must be one of: walk, run, bike"
    )
