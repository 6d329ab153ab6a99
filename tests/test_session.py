"""Tests for live workout recording sessions."""

from __future__ import annotations

from datetime import timedelta
import logging

import pytest

from conftest import T0, make_point, make_track
from fittracker.errors import SessionClosedError, WorkoutRejectedError
from fittracker.models import ActivityType
from fittracker.session import WorkoutSession
from fittracker.stats import compute_stats
from fittracker.validation import create_default_user_preferences, validate_workout


def _recording(activity: str = "run", **kwargs) -> WorkoutSession:
    return WorkoutSession(activity, session_id="session-1", started_at=T0, **kwargs)


def test_session_accepts_plausible_track() -> None:
    session = _recording()
    points = make_track(10)
    assert all(session.add_point(point) for point in points)
    assert session.rejected_count == 0
    assert session.stats.distance == pytest.approx(
        compute_stats(points).total_distance, abs=1e-6
    )
    assert session.stats.point_count == 10


def test_finish_builds_valid_workout(caplog: pytest.LogCaptureFixture) -> None:
    session = _recording()
    points = make_track(10)
    for point in points:
        session.add_point(point)

    with caplog.at_level(logging.INFO, logger="fittracker.session"):
        workout = session.finish(name="Morning run")

    assert validate_workout(workout).is_valid
    assert workout.id == "session-1"
    assert workout.type is ActivityType.RUN
    assert workout.duration == 45
    assert isinstance(workout.duration, int)
    assert workout.start_time == points[0].timestamp
    assert workout.end_time == points[-1].timestamp
    assert workout.calories == round(workout.distance / 1000.0 * 80.0)
    assert workout.name == "Morning run"
    assert session.finished is True
    assert "Session session-1 finished" in caplog.text


def test_inaccurate_samples_are_dropped() -> None:
    session = _recording()
    assert session.add_point(make_point(accuracy=80.0)) is False
    assert session.rejected_count == 1
    assert session.points == ()


def test_invalid_samples_are_dropped() -> None:
    session = _recording()
    assert session.add_point(make_point(lat=95.0)) is False


def test_out_of_order_samples_are_dropped() -> None:
    session = _recording()
    session.add_point(make_point(seconds=10))
    assert session.add_point(make_point(lat=51.5001, seconds=5)) is False


def test_gps_jumps_are_dropped_for_walks() -> None:
    session = _recording("walk")
    session.add_point(make_point(seconds=0))
    # ~1.1 km in five seconds.
    assert session.add_point(make_point(lat=51.51, seconds=5)) is False
    assert session.add_point(make_point(lat=51.5001, seconds=10)) is True


def test_min_distance_filter_from_preferences() -> None:
    session = _recording(preferences=create_default_user_preferences())
    session.add_point(make_point(seconds=0))
    # ~1 m move is below the 5 m default filter.
    assert session.add_point(make_point(lat=51.50001, seconds=5)) is False
    assert session.add_point(make_point(lat=51.5001, seconds=10)) is True


def test_current_pace_is_zero_below_min_speed() -> None:
    session = _recording("walk")
    session.add_point(make_point(seconds=0))
    session.add_point(make_point(lat=51.500001, seconds=5))
    stats = session.stats
    assert stats.current_speed < 0.5
    assert stats.current_pace == 0.0


def test_current_pace_reported_when_moving() -> None:
    session = _recording("run")
    session.add_point(make_point(seconds=0))
    session.add_point(make_point(lat=51.5002, seconds=5))
    stats = session.stats
    assert stats.current_speed > 1.5
    assert stats.current_pace == pytest.approx(1000.0 / stats.current_speed)


def test_finished_session_rejects_new_samples() -> None:
    session = _recording()
    session.add_point(make_point(seconds=0))
    session.finish(ended_at=T0 + timedelta(seconds=60))
    with pytest.raises(SessionClosedError):
        session.add_point(make_point(seconds=90))
    with pytest.raises(SessionClosedError):
        session.finish()


def test_single_point_session_spans_start_to_end() -> None:
    session = _recording()
    session.add_point(make_point(seconds=0))
    workout = session.finish(ended_at=T0 + timedelta(seconds=60))
    assert workout.duration == pytest.approx(60.0)
    assert workout.distance == 0.0


def test_empty_session_ending_before_start_is_rejected() -> None:
    session = _recording()
    with pytest.raises(WorkoutRejectedError) as excinfo:
        session.finish(ended_at=T0 - timedelta(seconds=1))
    assert excinfo.value.result.error == "End time must be after start time"
    assert session.finished is True


def test_unknown_activity_type_rejected() -> None:
    with pytest.raises(ValueError):
        WorkoutSession("swim")


def test_sub_second_span_rounds_to_whole_seconds() -> None:
    session = _recording()
    session.add_point(make_point(seconds=0))
    session.add_point(make_point(lat=51.5001, seconds=30.4))
    assert session.finish().duration == 30
