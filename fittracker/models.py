"""Dataclasses describing GPS samples, workouts, preferences and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import PayloadFormatError
from .utils import coerce_optional_float, parse_timestamp


class ActivityType(str, Enum):
    WALK = "walk"
    RUN = "run"
    BIKE = "bike"


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


def _pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (snake_case or camelCase payloads)."""

    for key in keys:
        if key in payload:
            return payload[key]
    return default


def _enum_or_raw(enum_cls: type[Enum], value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _coerce_seconds(value: Any) -> int | float:
    seconds = coerce_optional_float(value)
    if seconds is None:
        return 0
    return int(seconds) if seconds.is_integer() else seconds


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise PayloadFormatError(f"{what} payload must be a JSON object")
    return payload


@dataclass(frozen=True, slots=True)
class LocationPoint:
    """A single timestamped GPS sample as produced by the location source."""

    latitude: float
    longitude: float
    timestamp: datetime
    accuracy: float
    altitude: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LocationPoint":
        data = _require_mapping(payload, "Location point")
        latitude = coerce_optional_float(data.get("latitude"))
        longitude = coerce_optional_float(data.get("longitude"))
        if latitude is None or longitude is None:
            raise PayloadFormatError(
                "Location point must have numeric latitude and longitude"
            )
        return cls(
            latitude=latitude,
            longitude=longitude,
            timestamp=parse_timestamp(data.get("timestamp")),  # type: ignore[arg-type]
            accuracy=coerce_optional_float(data.get("accuracy")) or 0.0,
            altitude=coerce_optional_float(data.get("altitude")),
            speed=coerce_optional_float(data.get("speed")),
            heading=coerce_optional_float(data.get("heading")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "accuracy": self.accuracy,
        }
        for key in ("altitude", "speed", "heading"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(slots=True)
class Workout:
    """A completed tracked session with aggregate metrics and its GPS trace."""

    id: str
    type: ActivityType | str
    start_time: datetime
    end_time: datetime
    distance: float
    # Whole seconds from a session; parsed payloads keep any fraction.
    duration: int | float
    avg_pace: float
    max_speed: float
    gps_points: List[LocationPoint] = field(default_factory=list)
    calories: Optional[float] = None
    notes: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Workout":
        data = _require_mapping(payload, "Workout")
        raw_points = _pick(data, "gps_points", "gpsPoints", default=[])
        if not isinstance(raw_points, list):
            raise PayloadFormatError("GPS points must be an array")
        return cls(
            id=str(data.get("id") or ""),
            type=_enum_or_raw(ActivityType, data.get("type")),
            start_time=parse_timestamp(_pick(data, "start_time", "startTime")),  # type: ignore[arg-type]
            end_time=parse_timestamp(_pick(data, "end_time", "endTime")),  # type: ignore[arg-type]
            distance=coerce_optional_float(data.get("distance")) or 0.0,
            duration=_coerce_seconds(data.get("duration")),
            avg_pace=coerce_optional_float(_pick(data, "avg_pace", "avgPace")) or 0.0,
            max_speed=coerce_optional_float(_pick(data, "max_speed", "maxSpeed"))
            or 0.0,
            gps_points=[LocationPoint.from_dict(item) for item in raw_points],
            calories=coerce_optional_float(data.get("calories")),
            notes=data.get("notes"),
            name=data.get("name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "distance": self.distance,
            "duration": self.duration,
            "avg_pace": self.avg_pace,
            "max_speed": self.max_speed,
            "gps_points": [point.to_dict() for point in self.gps_points],
        }
        for key in ("calories", "notes", "name"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(slots=True)
class UserPreferences:
    units: UnitSystem | str
    default_activity_type: ActivityType | str
    auto_background_tracking: bool
    gps_update_interval: float
    theme: ThemeMode | str
    enable_haptic_feedback: bool
    enable_animations: bool
    min_distance_filter: Optional[float] = None
    show_character: Optional[bool] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UserPreferences":
        data = _require_mapping(payload, "Preferences")
        return cls(
            units=_enum_or_raw(UnitSystem, data.get("units")),
            default_activity_type=_enum_or_raw(
                ActivityType,
                _pick(data, "default_activity_type", "defaultActivityType"),
            ),
            auto_background_tracking=_pick(
                data, "auto_background_tracking", "autoBackgroundTracking"
            ),
            gps_update_interval=_pick(
                data, "gps_update_interval", "gpsUpdateInterval"
            ),
            theme=_enum_or_raw(ThemeMode, data.get("theme")),
            enable_haptic_feedback=_pick(
                data, "enable_haptic_feedback", "enableHapticFeedback"
            ),
            enable_animations=_pick(data, "enable_animations", "enableAnimations"),
            min_distance_filter=_pick(
                data, "min_distance_filter", "minDistanceFilter"
            ),
            show_character=_pick(data, "show_character", "showCharacter"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "units": self.units,
            "default_activity_type": self.default_activity_type,
            "auto_background_tracking": self.auto_background_tracking,
            "gps_update_interval": self.gps_update_interval,
            "theme": self.theme,
            "enable_haptic_feedback": self.enable_haptic_feedback,
            "enable_animations": self.enable_animations,
        }
        if self.min_distance_filter is not None:
            payload["min_distance_filter"] = self.min_distance_filter
        if self.show_character is not None:
            payload["show_character"] = self.show_character
        return payload


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Uniform outcome returned by every validator."""

    is_valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(False, error)

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass(frozen=True, slots=True)
class WorkoutStats:
    """Distance, speed and elevation metrics derived from a point sequence."""

    total_distance: float = 0.0
    average_speed: float = 0.0
    max_speed: float = 0.0
    elevation_gain: float = 0.0
    point_count: int = 0
    # Sum of the positive pair durations used for the average speed.
    elapsed_seconds: float = 0.0

    @property
    def average_pace(self) -> float:
        """Average pace in seconds per kilometre (0 when nothing moved)."""

        if self.total_distance <= 0 or self.elapsed_seconds <= 0:
            return 0.0
        return self.elapsed_seconds / (self.total_distance / 1000.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_distance": self.total_distance,
            "average_speed": self.average_speed,
            "max_speed": self.max_speed,
            "elevation_gain": self.elevation_gain,
            "point_count": self.point_count,
            "elapsed_seconds": self.elapsed_seconds,
            "average_pace": self.average_pace,
        }


@dataclass(frozen=True, slots=True)
class RouteSegment:
    """Statistics for one contiguous chunk of a route."""

    index: int
    start_index: int
    end_index: int
    stats: WorkoutStats


__all__ = [
    "ActivityType",
    "UnitSystem",
    "ThemeMode",
    "LocationPoint",
    "Workout",
    "UserPreferences",
    "ValidationResult",
    "WorkoutStats",
    "RouteSegment",
]
