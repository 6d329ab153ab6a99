"""JSON loading helpers for points, workouts and preferences."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

from .errors import PayloadFormatError
from .models import LocationPoint, UserPreferences, Workout


def _read_json(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise PayloadFormatError(f"{path}: invalid JSON ({exc})") from exc


def load_points(path: str | Path) -> List[LocationPoint]:
    """Load a point list from a bare array or an object with a points key."""

    payload = _read_json(path)
    if isinstance(payload, dict):
        for key in ("gps_points", "gpsPoints", "points"):
            if key in payload:
                payload = payload[key]
                break
    if not isinstance(payload, list):
        raise PayloadFormatError(f"{path}: expected an array of GPS points")
    return [LocationPoint.from_dict(item) for item in payload]


def load_workout(path: str | Path) -> Workout:
    return Workout.from_dict(_read_json(path))


def load_preferences(path: str | Path) -> UserPreferences:
    return UserPreferences.from_dict(_read_json(path))


__all__ = ["load_points", "load_workout", "load_preferences"]
