"""Central error types used across the application."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ValidationResult


class FitTrackerError(RuntimeError):
    """Base error for the workout core."""


class PayloadFormatError(FitTrackerError):
    """Raised when a JSON payload cannot be converted into a domain record."""


class PlatformCapabilityError(FitTrackerError):
    """Raised by platform adapters when a permission or service query fails."""


class SettingsNavigationError(PlatformCapabilityError):
    """Raised when neither the settings screen nor its fallback URI opens."""


class SessionClosedError(FitTrackerError):
    """Raised when samples are added to a session that has already finished."""


class WorkoutRejectedError(FitTrackerError):
    """Raised when a finished session produces a workout that fails validation."""

    def __init__(self, result: "ValidationResult") -> None:
        super().__init__(result.error or "Workout failed validation")
        self.result = result


__all__ = [
    "FitTrackerError",
    "PayloadFormatError",
    "PlatformCapabilityError",
    "SettingsNavigationError",
    "SessionClosedError",
    "WorkoutRejectedError",
]
