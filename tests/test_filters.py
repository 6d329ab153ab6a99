"""Tests for GPS noise filters, smoothing and route simplification."""

from __future__ import annotations

import pytest

from conftest import make_point, make_track
from fittracker.filters import (
    KalmanFilter,
    encode_route,
    filter_by_accuracy,
    filter_by_speed,
    is_accurate,
    is_plausible_move,
    simplify_route,
    smooth_points,
)


def test_accuracy_filter_keeps_precise_samples() -> None:
    points = [make_point(accuracy=5.0), make_point(accuracy=60.0, seconds=5)]
    assert filter_by_accuracy(points, 50.0) == [points[0]]


def test_speed_filter_compares_with_last_kept_sample() -> None:
    start = make_point(seconds=0)
    spike = make_point(lat=51.6, seconds=5)
    recovered = make_point(lat=51.5001, seconds=10)
    kept = filter_by_speed([start, spike, recovered], max_speed_mps=8.0)
    assert kept == [start, recovered]


def test_speed_filter_keeps_simultaneous_samples() -> None:
    points = [make_point(seconds=0), make_point(lat=51.6, seconds=0)]
    assert filter_by_speed(points, 8.0) == points


def test_kalman_filter_converges_on_constant_signal() -> None:
    kalman = KalmanFilter()
    kalman.reset(10.0)
    for _ in range(5):
        value = kalman.update(10.0)
    assert value == pytest.approx(10.0)


def test_kalman_filter_damps_a_jump() -> None:
    kalman = KalmanFilter()
    kalman.reset(0.0)
    first = kalman.update(1.0)
    assert 0.0 < first < 1.0


def test_smoothing_preserves_first_sample_and_timestamps() -> None:
    points = make_track(6)
    smoothed = smooth_points(points)
    assert smoothed[0] is points[0]
    assert [p.timestamp for p in smoothed] == [p.timestamp for p in points]
    assert smoothed[3].latitude != points[3].latitude


def test_simplify_drops_collinear_points() -> None:
    points = [make_point(lat=51.5 + i * 0.0001, lon=-0.12, seconds=i * 5) for i in range(8)]
    simplified = simplify_route(points, 5.0)
    assert simplified == [points[0], points[-1]]
    assert simplified[0] is points[0]


def test_simplify_keeps_significant_corners() -> None:
    points = [
        make_point(lat=51.5, lon=-0.12, seconds=0),
        make_point(lat=51.501, lon=-0.12, seconds=60),
        make_point(lat=51.501, lon=-0.118, seconds=120),
    ]
    assert simplify_route(points, 5.0) == points


def test_simplify_disabled_with_zero_tolerance() -> None:
    points = make_track(6)
    assert simplify_route(points, 0.0) == points


def test_encode_route_produces_google_polyline() -> None:
    points = [
        make_point(lat=38.5, lon=-120.2, seconds=0),
        make_point(lat=40.7, lon=-120.95, seconds=10),
        make_point(lat=43.252, lon=-126.453, seconds=20),
    ]
    assert encode_route(points) == "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def test_sample_predicates() -> None:
    start = make_point(seconds=0)
    assert is_accurate(make_point(accuracy=50.0), 50.0) is True
    assert is_accurate(make_point(accuracy=50.5), 50.0) is False
    assert is_plausible_move(start, make_point(lat=51.5001, seconds=5), 3.0) is True
    assert is_plausible_move(start, make_point(lat=51.51, seconds=5), 3.0) is False
