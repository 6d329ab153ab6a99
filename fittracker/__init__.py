"""FitTracker workout data acquisition and integrity core."""

from .errors import (
    FitTrackerError,
    PayloadFormatError,
    SessionClosedError,
    WorkoutRejectedError,
)
from .models import (
    ActivityType,
    LocationPoint,
    RouteSegment,
    ThemeMode,
    UnitSystem,
    UserPreferences,
    ValidationResult,
    Workout,
    WorkoutStats,
)
from .session import WorkoutSession
from .stats import (
    StatsAccumulator,
    combine_segments,
    compute_segment_stats,
    compute_stats,
)
from .validation import (
    create_default_user_preferences,
    validate_location_point,
    validate_location_points,
    validate_user_preferences,
    validate_workout,
)

__all__ = [
    "FitTrackerError",
    "PayloadFormatError",
    "SessionClosedError",
    "WorkoutRejectedError",
    "ActivityType",
    "LocationPoint",
    "RouteSegment",
    "ThemeMode",
    "UnitSystem",
    "UserPreferences",
    "ValidationResult",
    "Workout",
    "WorkoutStats",
    "WorkoutSession",
    "StatsAccumulator",
    "combine_segments",
    "compute_segment_stats",
    "compute_stats",
    "create_default_user_preferences",
    "validate_location_point",
    "validate_location_points",
    "validate_user_preferences",
    "validate_workout",
]
