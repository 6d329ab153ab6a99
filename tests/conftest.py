"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable GPS factories plus fake
platform/dialog collaborators for the permission orchestrator tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from fittracker.models import ActivityType, LocationPoint, Workout
from fittracker.permissions import DialogAction, PlatformResponse

T0 = datetime(2025, 1, 1, 8, 0, 0, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_point(
    lat: float = 51.5,
    lon: float = -0.12,
    seconds: float = 0.0,
    *,
    accuracy: float = 5.0,
    altitude: Optional[float] = None,
    speed: Optional[float] = None,
    heading: Optional[float] = None,
) -> LocationPoint:
    return LocationPoint(
        latitude=lat,
        longitude=lon,
        timestamp=T0 + timedelta(seconds=seconds),
        accuracy=accuracy,
        altitude=altitude,
        speed=speed,
        heading=heading,
    )


def make_track(
    count: int,
    *,
    step_deg: float = 0.0001,
    interval_s: float = 5.0,
    altitudes: Optional[Sequence[float]] = None,
) -> List[LocationPoint]:
    """Points heading north ``step_deg`` per sample, ``interval_s`` apart."""

    return [
        make_point(
            lat=51.5 + i * step_deg,
            lon=-0.12 + (i % 3) * step_deg / 2,
            seconds=i * interval_s,
            altitude=altitudes[i] if altitudes is not None else None,
        )
        for i in range(count)
    ]


def make_workout(**overrides) -> Workout:
    points = overrides.pop(
        "gps_points",
        [make_point(seconds=0), make_point(lat=51.51, seconds=900), make_point(lat=51.52, seconds=1800)],
    )
    values = dict(
        id="workout-1",
        type=ActivityType.RUN,
        start_time=T0,
        end_time=T0 + timedelta(seconds=1800),
        distance=2200.0,
        duration=1800,
        avg_pace=818.0,
        max_speed=1.5,
        gps_points=points,
    )
    values.update(overrides)
    return Workout(**values)


class FakePlatform:
    """Scriptable stand-in for the OS location permission API."""

    def __init__(
        self,
        *,
        status: str = "undetermined",
        foreground: Sequence[PlatformResponse] = (),
        background: Sequence[PlatformResponse] = (),
        services_enabled: bool = True,
    ) -> None:
        self.status = status
        self.foreground_responses = list(foreground)
        self.background_responses = list(background)
        self.enabled = services_enabled
        self.calls: List[str] = []
        self.opened_urls: List[str] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            from fittracker.errors import PlatformCapabilityError

            raise PlatformCapabilityError(f"{name} failed")

    async def get_status(self) -> PlatformResponse:
        self._maybe_fail("get_status")
        return PlatformResponse(self.status, True)

    async def request_foreground(self) -> PlatformResponse:
        self._maybe_fail("request_foreground")
        if len(self.foreground_responses) > 1:
            return self.foreground_responses.pop(0)
        return self.foreground_responses[0]

    async def request_background(self) -> PlatformResponse:
        self._maybe_fail("request_background")
        if len(self.background_responses) > 1:
            return self.background_responses.pop(0)
        return self.background_responses[0]

    async def services_enabled(self) -> bool:
        self._maybe_fail("services_enabled")
        return self.enabled

    async def open_settings(self) -> None:
        self._maybe_fail("open_settings")

    async def open_url(self, url: str) -> None:
        self._maybe_fail("open_url")
        self.opened_urls.append(url)


class FakeDialogs:
    """Records prompts and answers them with a scripted chooser.

    ``chooser`` receives the title and the ordered actions and returns the
    index of the action to press; by default the last (affirmative) one.
    """

    def __init__(
        self, chooser: Callable[[str, Sequence[DialogAction]], int] | None = None
    ) -> None:
        self.shown: List[str] = []
        self.actions: List[List[str]] = []
        self._chooser = chooser or (lambda _title, actions: len(actions) - 1)

    async def alert(
        self, title: str, message: str, actions: Sequence[DialogAction]
    ) -> None:
        self.shown.append(title)
        self.actions.append([action.label for action in actions])
        actions[self._chooser(title, actions)].on_press()


GRANTED = PlatformResponse("granted", True)
DENIED_RETRY = PlatformResponse("denied", True)
DENIED_FOREVER = PlatformResponse("denied", False)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def track():
    return make_track(10)


@pytest.fixture
def workout():
    return make_workout()


@pytest.fixture
def accept_all_dialogs():
    return FakeDialogs()


@pytest.fixture
def decline_all_dialogs():
    return FakeDialogs(chooser=lambda _title, _actions: 0)
