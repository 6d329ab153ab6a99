"""Recording session that turns a stream of GPS samples into a Workout.

Samples are validated and filtered as they arrive, live statistics are kept
with a ``StatsAccumulator``, and ``finish`` builds the final ``Workout`` and
refuses to hand it over unless it passes ``validate_workout``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import math
from typing import List, Optional, Tuple
from uuid import uuid4

from . import config
from .activity_types import ActivityProfile, normalize_activity_type, profile_for
from .errors import SessionClosedError, WorkoutRejectedError
from .filters import is_accurate, is_plausible_move
from .geo import elapsed_seconds, haversine_m, pair_speed_mps, speed_to_pace
from .models import (
    ActivityType,
    LocationPoint,
    UserPreferences,
    ValidationResult,
    Workout,
)
from .stats import StatsAccumulator, combine_segments, compute_segment_stats
from .utils import format_duration, to_utc_aware
from .validation import validate_location_point, validate_workout

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionStats:
    """Live metrics for an in-progress session."""

    distance: float = 0.0
    elapsed_seconds: float = 0.0
    current_speed: float = 0.0
    current_pace: float = 0.0
    average_pace: float = 0.0
    max_speed: float = 0.0
    elevation_gain: float = 0.0
    calories: float = 0.0
    point_count: int = 0


class WorkoutSession:
    """Accumulates accepted samples for one workout."""

    def __init__(
        self,
        activity_type: ActivityType | str,
        *,
        session_id: str | None = None,
        started_at: datetime | None = None,
        preferences: UserPreferences | None = None,
        profile: ActivityProfile | None = None,
    ) -> None:
        normalized = normalize_activity_type(activity_type)
        if normalized is None:
            raise ValueError(f"Unsupported activity type: {activity_type!r}")
        self.id = session_id or uuid4().hex
        self.activity_type = normalized
        self.profile = profile or profile_for(normalized)
        self.started_at = to_utc_aware(started_at or datetime.now(timezone.utc))
        self._min_distance_m = 0.0
        if preferences is not None and preferences.min_distance_filter is not None:
            self._min_distance_m = float(preferences.min_distance_filter)
        self._points: List[LocationPoint] = []
        self._accumulator = StatsAccumulator()
        self._finished = False
        self.rejected_count = 0

    @property
    def points(self) -> Tuple[LocationPoint, ...]:
        return tuple(self._points)

    @property
    def finished(self) -> bool:
        return self._finished

    def add_point(self, point: LocationPoint) -> bool:
        """Accept ``point`` into the session; return False when it is dropped.

        Dropped samples: invalid ones, accuracy worse than
        ``config.MAX_ACCEPTED_ACCURACY_M``, samples older than the last
        accepted one, implausible jumps for the activity profile, and moves
        shorter than the preferences' minimum distance filter.
        """

        if self._finished:
            raise SessionClosedError(f"Session {self.id} has already finished")

        reason = self._rejection_reason(point)
        if reason is not None:
            self.rejected_count += 1
            _LOG.debug("Session %s dropped sample: %s", self.id, reason)
            return False
        self._points.append(point)
        self._accumulator.add(point)
        return True

    def _rejection_reason(self, point: LocationPoint) -> Optional[str]:
        result = validate_location_point(point)
        if not result.is_valid:
            return result.error
        if not is_accurate(point, config.MAX_ACCEPTED_ACCURACY_M):
            return f"accuracy {point.accuracy:.1f}m"
        last = self._accumulator.last_point
        if last is None:
            return None
        if elapsed_seconds(last, point) < 0:
            return "out of chronological order"
        if config.SESSION_SPEED_FILTER_ENABLED and not is_plausible_move(
            last, point, self.profile.max_reasonable_speed
        ):
            return f"implausible speed {pair_speed_mps(last, point):.1f} m/s"
        distance = haversine_m(last, point)
        if distance < self._min_distance_m:
            return f"moved {distance:.1f}m (< {self._min_distance_m:.1f}m filter)"
        return None

    @property
    def stats(self) -> SessionStats:
        snapshot = self._accumulator.snapshot()
        current_speed = self._accumulator.current_speed if snapshot.point_count >= 2 else 0.0
        current_pace = 0.0
        if current_speed > self.profile.min_speed:
            current_pace = speed_to_pace(current_speed)
        return SessionStats(
            distance=snapshot.total_distance,
            elapsed_seconds=snapshot.elapsed_seconds,
            current_speed=current_speed,
            current_pace=current_pace,
            average_pace=snapshot.average_pace,
            max_speed=snapshot.max_speed,
            elevation_gain=snapshot.elevation_gain,
            calories=self._estimate_calories(snapshot.total_distance),
            point_count=snapshot.point_count,
        )

    def _estimate_calories(self, distance_m: float) -> float:
        if distance_m <= 0:
            return 0.0
        return float(round(distance_m / 1000.0 * self.profile.calories_per_km))

    def finish(
        self,
        ended_at: datetime | None = None,
        *,
        name: str | None = None,
        notes: str | None = None,
    ) -> Workout:
        """Close the session and return its validated ``Workout``.

        With two or more samples the workout spans the GPS timeline (first to
        last sample); otherwise it spans ``started_at`` to ``ended_at`` (now
        by default).

        Raises:
            WorkoutRejectedError: when the workout fails validation; the
                session is closed either way.
        """

        if self._finished:
            raise SessionClosedError(f"Session {self.id} has already finished")
        self._finished = True

        points = list(self._points)
        if len(points) >= 2:
            start_time = to_utc_aware(points[0].timestamp)
            end_time = to_utc_aware(points[-1].timestamp)
        else:
            start_time = self.started_at
            end_time = to_utc_aware(ended_at or datetime.now(timezone.utc))
        stats = self.stats
        workout = Workout(
            id=self.id,
            type=self.activity_type,
            start_time=start_time,
            end_time=end_time,
            distance=stats.distance,
            duration=round((end_time - start_time).total_seconds()),
            avg_pace=stats.average_pace,
            max_speed=stats.max_speed,
            gps_points=points,
            calories=stats.calories,
            notes=notes,
            name=name,
        )

        result = validate_workout(workout)
        if result.is_valid:
            result = self._check_distance_consistency(points, stats.distance)
        if not result.is_valid:
            _LOG.warning("Session %s rejected: %s", self.id, result.error)
            raise WorkoutRejectedError(result)

        _LOG.info(
            "Session %s finished: %s %.0fm in %s (%d points, %d dropped)",
            self.id,
            self.activity_type.value,
            workout.distance,
            format_duration(workout.duration),
            len(points),
            self.rejected_count,
        )
        return workout

    @staticmethod
    def _check_distance_consistency(
        points: List[LocationPoint], live_distance: float
    ) -> ValidationResult:
        combined = combine_segments(compute_segment_stats(points))
        if not math.isclose(
            combined.total_distance, live_distance, rel_tol=1e-6, abs_tol=1e-6
        ):
            return ValidationResult.fail(
                f"Distance ({live_distance:.3f}m) doesn't match the recorded "
                f"route ({combined.total_distance:.3f}m)"
            )
        return ValidationResult.ok()


__all__ = ["SessionStats", "WorkoutSession"]
