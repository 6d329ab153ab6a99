"""Great-circle distance and speed helpers for GPS samples."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from .models import LocationPoint
from .utils import to_utc_aware

EARTH_RADIUS_M = 6_371_000.0

MetricArray = NDArray[np.float64]


def haversine_m(first: LocationPoint, second: LocationPoint) -> float:
    """Return the great-circle distance between two samples in metres."""

    sin = math.sin
    cos = math.cos
    radians = math.radians
    lat1_rad = radians(first.latitude)
    lat2_rad = radians(second.latitude)
    delta_lat = lat2_rad - lat1_rad
    delta_lon = radians(second.longitude - first.longitude)
    sin_half_lat = sin(delta_lat / 2.0)
    sin_half_lon = sin(delta_lon / 2.0)
    a = sin_half_lat**2 + cos(lat1_rad) * cos(lat2_rad) * sin_half_lon**2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def haversine_array_m(latitudes: MetricArray, longitudes: MetricArray) -> MetricArray:
    """Vectorised haversine distances between consecutive coordinates.

    Returns an array one element shorter than the inputs.
    """

    lat_rad = np.radians(latitudes)
    lon_rad = np.radians(longitudes)
    delta_lat = np.diff(lat_rad)
    delta_lon = np.diff(lon_rad)
    a = (
        np.sin(delta_lat / 2.0) ** 2
        + np.cos(lat_rad[:-1]) * np.cos(lat_rad[1:]) * np.sin(delta_lon / 2.0) ** 2
    )
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def elapsed_seconds(first: LocationPoint, second: LocationPoint) -> float:
    return (
        to_utc_aware(second.timestamp) - to_utc_aware(first.timestamp)
    ).total_seconds()


def pair_speed_mps(first: LocationPoint, second: LocationPoint) -> float:
    """Instantaneous speed between two samples; 0 when no time has elapsed."""

    elapsed = elapsed_seconds(first, second)
    if elapsed <= 0:
        return 0.0
    return haversine_m(first, second) / elapsed


def speed_to_pace(speed_mps: float) -> float:
    """Convert a speed in m/s into a pace in seconds per kilometre."""

    if speed_mps <= 0:
        return 0.0
    return 1000.0 / speed_mps


__all__ = [
    "EARTH_RADIUS_M",
    "haversine_m",
    "haversine_array_m",
    "elapsed_seconds",
    "pair_speed_mps",
    "speed_to_pace",
]
