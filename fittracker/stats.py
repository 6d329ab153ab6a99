"""Workout statistics derived from validated GPS point sequences.

Three invocation modes share one set of formulas and agree to within
floating-point tolerance:

* ``compute_stats`` - one-shot over a full sequence (vectorised with numpy).
* ``StatsAccumulator`` - streaming, one sample at a time during a session.
* ``compute_segment_stats`` - fixed-size contiguous chunks for incremental
  rendering; ``combine_segments`` folds them back into whole-route stats.

Inputs are assumed to have passed ``validate_location_points``.
"""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import List, Optional, Sequence

import numpy as np

from . import config
from .geo import elapsed_seconds, haversine_array_m, haversine_m
from .models import LocationPoint, RouteSegment, WorkoutStats
from .utils import to_utc_aware

_LOG = logging.getLogger(__name__)


def compute_stats(points: Sequence[LocationPoint]) -> WorkoutStats:
    """Return distance, speed and elevation metrics for ``points``.

    Pair speeds are only computed for pairs with positive elapsed time, and
    the average speed is total distance over the summed positive elapsed time
    rather than a mean of pair speeds, so irregular sampling does not skew it.
    Elevation gain counts climbs only; descents are ignored.
    """

    count = len(points)
    if count < 2:
        return WorkoutStats(point_count=count)

    latitudes = np.fromiter((p.latitude for p in points), dtype=float, count=count)
    longitudes = np.fromiter((p.longitude for p in points), dtype=float, count=count)
    times = np.fromiter(
        (to_utc_aware(p.timestamp).timestamp() for p in points),
        dtype=float,
        count=count,
    )
    altitudes = np.fromiter(
        (np.nan if p.altitude is None else p.altitude for p in points),
        dtype=float,
        count=count,
    )

    distances = haversine_array_m(latitudes, longitudes)
    elapsed = np.diff(times)
    moving = elapsed > 0

    total_distance = float(np.sum(distances))
    total_elapsed = float(np.sum(elapsed[moving]))
    max_speed = 0.0
    if np.any(moving):
        max_speed = float(np.max(distances[moving] / elapsed[moving]))

    climbs = np.diff(altitudes)
    climbs = climbs[np.isfinite(climbs) & (climbs > 0)]
    elevation_gain = float(np.sum(climbs)) if climbs.size else 0.0

    return WorkoutStats(
        total_distance=total_distance,
        average_speed=total_distance / total_elapsed if total_elapsed > 0 else 0.0,
        max_speed=max_speed,
        elevation_gain=elevation_gain,
        point_count=count,
        elapsed_seconds=total_elapsed,
    )


class StatsAccumulator:
    """Incrementally maintained statistics for a growing point sequence."""

    def __init__(self) -> None:
        self._count = 0
        self._distance = 0.0
        self._elapsed = 0.0
        self._max_speed = 0.0
        self._elevation_gain = 0.0
        self._last: Optional[LocationPoint] = None
        self._last_altitude: Optional[float] = None
        self._current_speed = 0.0

    @property
    def last_point(self) -> Optional[LocationPoint]:
        return self._last

    @property
    def current_speed(self) -> float:
        """Speed of the most recent pair with positive elapsed time."""

        return self._current_speed

    def add(self, point: LocationPoint) -> None:
        previous = self._last
        if previous is not None:
            distance = haversine_m(previous, point)
            elapsed = elapsed_seconds(previous, point)
            self._distance += distance
            if elapsed > 0:
                self._elapsed += elapsed
                self._current_speed = distance / elapsed
                self._max_speed = max(self._max_speed, self._current_speed)
            if (
                point.altitude is not None
                and previous.altitude is not None
                and point.altitude > previous.altitude
            ):
                self._elevation_gain += point.altitude - previous.altitude
        self._last = point
        self._count += 1

    def extend(self, points: Sequence[LocationPoint]) -> None:
        for point in points:
            self.add(point)

    def snapshot(self) -> WorkoutStats:
        if self._count < 2:
            return WorkoutStats(point_count=self._count)
        return WorkoutStats(
            total_distance=self._distance,
            average_speed=self._distance / self._elapsed if self._elapsed > 0 else 0.0,
            max_speed=self._max_speed,
            elevation_gain=self._elevation_gain,
            point_count=self._count,
            elapsed_seconds=self._elapsed,
        )


def compute_segment_stats(
    points: Sequence[LocationPoint],
    segment_size: int = config.STATS_SEGMENT_SIZE,
) -> List[RouteSegment]:
    """Split ``points`` into chunks of ``segment_size`` and compute each chunk.

    Each chunk after the first is evaluated with the previous chunk's last
    point as a leading anchor, so the pair bridging two chunks is counted
    exactly once (in the later chunk). The anchor is not part of the chunk's
    ``point_count``. Summing the segments reproduces the whole-route stats.
    """

    if segment_size < 1:
        raise ValueError("segment_size must be >= 1")

    segments: List[RouteSegment] = []
    total = len(points)
    for index, start in enumerate(range(0, total, segment_size)):
        end = min(start + segment_size, total)
        anchor = start - 1 if start > 0 else start
        stats = compute_stats(points[anchor:end])
        segments.append(
            RouteSegment(
                index=index,
                start_index=start,
                end_index=end - 1,
                stats=replace(stats, point_count=end - start),
            )
        )
    _LOG.debug(
        "Computed %d route segments for %d points (segment_size=%d)",
        len(segments),
        total,
        segment_size,
    )
    return segments


def combine_segments(segments: Sequence[RouteSegment]) -> WorkoutStats:
    """Fold per-segment stats back into stats for the whole route."""

    distance = sum(seg.stats.total_distance for seg in segments)
    elapsed = sum(seg.stats.elapsed_seconds for seg in segments)
    count = sum(seg.stats.point_count for seg in segments)
    if count < 2:
        return WorkoutStats(point_count=count)
    return WorkoutStats(
        total_distance=distance,
        average_speed=distance / elapsed if elapsed > 0 else 0.0,
        max_speed=max((seg.stats.max_speed for seg in segments), default=0.0),
        elevation_gain=sum(seg.stats.elevation_gain for seg in segments),
        point_count=count,
        elapsed_seconds=elapsed,
    )


__all__ = [
    "compute_stats",
    "StatsAccumulator",
    "compute_segment_stats",
    "combine_segments",
]
