"""Central configuration for the FitTracker workout core.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Values can be overridden through environment variables
(optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Application identity
# ---------------------------------------------------------------------------
APP_NAME = os.getenv("FITTRACKER_APP_NAME", "FitTracker")

# Bundle identifier used to build the Android package-settings fallback URI.
BUNDLE_ID = os.getenv("FITTRACKER_BUNDLE_ID", "com.fittracker")

# Platform whose permission copy and settings URIs are used ("ios"/"android").
PLATFORM = os.getenv("FITTRACKER_PLATFORM", "ios").strip().lower()


# ---------------------------------------------------------------------------
# Permission escalation
# ---------------------------------------------------------------------------
# Denied attempts per permission kind before rationale/guidance prompts are
# suppressed. resetAttemptCounters() re-enables the full flow.
PERMISSION_MAX_ATTEMPTS = _env_int("PERMISSION_MAX_ATTEMPTS", 3)


# ---------------------------------------------------------------------------
# Workout validation
# ---------------------------------------------------------------------------
# Allowed difference (seconds) between a workout's declared duration and both
# end_time - start_time and the GPS timeline span. 0 requires an exact match.
WORKOUT_DURATION_TOLERANCE_S = _env_float("WORKOUT_DURATION_TOLERANCE_S", 1.0)


# ---------------------------------------------------------------------------
# Statistics and tracking
# ---------------------------------------------------------------------------
# Points per route segment for segmented (incremental rendering) statistics.
STATS_SEGMENT_SIZE = _env_int("STATS_SEGMENT_SIZE", 50)

# Samples reporting an accuracy radius above this (metres) are dropped by a
# recording session.
MAX_ACCEPTED_ACCURACY_M = _env_float("MAX_ACCEPTED_ACCURACY_M", 50.0)

# Apply the activity profile's max plausible speed when recording.
SESSION_SPEED_FILTER_ENABLED = _env_bool("SESSION_SPEED_FILTER_ENABLED", True)

# Maximum deviation (metres) allowed when simplifying a recorded route.
ROUTE_SIMPLIFICATION_TOLERANCE_M = _env_float(
    "ROUTE_SIMPLIFICATION_TOLERANCE_M", 5.0
)
