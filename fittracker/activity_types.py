"""Utilities for classifying activity types and their tracking profiles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .models import ActivityType

__all__ = [
    "ActivityProfile",
    "ACTIVITY_PROFILES",
    "normalize_activity_type",
    "profile_for",
]


@dataclass(frozen=True, slots=True)
class ActivityProfile:
    """Tracking thresholds for one activity type."""

    activity_type: ActivityType
    # Below this speed (m/s) the current pace is reported as 0.
    min_speed: float
    # Samples implying a faster move (m/s) are treated as GPS jumps.
    max_reasonable_speed: float
    calories_per_km: float
    gps_update_interval: float
    distance_filter: float


ACTIVITY_PROFILES: Dict[ActivityType, ActivityProfile] = {
    ActivityType.WALK: ActivityProfile(
        activity_type=ActivityType.WALK,
        min_speed=0.5,
        max_reasonable_speed=3.0,
        calories_per_km=50.0,
        gps_update_interval=5.0,
        distance_filter=3.0,
    ),
    ActivityType.RUN: ActivityProfile(
        activity_type=ActivityType.RUN,
        min_speed=1.5,
        max_reasonable_speed=8.0,
        calories_per_km=80.0,
        gps_update_interval=3.0,
        distance_filter=5.0,
    ),
    ActivityType.BIKE: ActivityProfile(
        activity_type=ActivityType.BIKE,
        min_speed=2.0,
        max_reasonable_speed=20.0,
        calories_per_km=30.0,
        gps_update_interval=5.0,
        distance_filter=10.0,
    ),
}


def normalize_activity_type(value: Any) -> ActivityType | None:
    """Return the matching ``ActivityType`` or ``None`` when unrecognised.

    Payloads may carry enum members or strings with inconsistent casing and
    surrounding whitespace. Normalising once keeps downstream comparisons
    cheap and deterministic.
    """

    if isinstance(value, ActivityType):
        return value
    if value is None:
        return None
    normalized = str(value).strip().lower()
    try:
        return ActivityType(normalized)
    except ValueError:
        return None


def profile_for(activity_type: ActivityType | str) -> ActivityProfile:
    """Return the tracking profile for ``activity_type``.

    Raises:
        ValueError: when the value is not one of the supported activity types.
    """

    normalized = normalize_activity_type(activity_type)
    if normalized is None:
        raise ValueError(f"Unsupported activity type: {activity_type!r}")
    return ACTIVITY_PROFILES[normalized]
