"""Dataclasses describing location permission state and prompts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class PermissionKind(str, Enum):
    """Foreground ("when in use") versus background ("always") location."""

    WHEN_IN_USE = "when_in_use"
    ALWAYS = "always"


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


class Platform(str, Enum):
    IOS = "ios"
    ANDROID = "android"


@dataclass(frozen=True, slots=True)
class PermissionResult:
    status: PermissionStatus
    can_ask_again: bool
    granted: bool

    @classmethod
    def denied(cls, *, can_ask_again: bool) -> "PermissionResult":
        return cls(PermissionStatus.DENIED, can_ask_again=can_ask_again, granted=False)

    @property
    def permanently_denied(self) -> bool:
        return not self.granted and not self.can_ask_again


@dataclass(frozen=True, slots=True)
class PlatformResponse:
    """Raw answer from the platform permission API.

    ``status`` is the platform's own status string; ``can_ask_again`` is
    ``None`` when the platform does not report it.
    """

    status: str
    can_ask_again: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class WorkoutPermissions:
    """Aggregate outcome of acquiring permissions for workout recording."""

    foreground: PermissionResult
    background: Optional[PermissionResult] = None

    @property
    def can_record(self) -> bool:
        return self.foreground.granted


@dataclass(frozen=True, slots=True)
class Explanation:
    title: str
    message: str
    confirm_text: str
    cancel_text: str = "Cancel"


@dataclass(frozen=True, slots=True)
class DialogAction:
    """One labelled button of a blocking modal prompt."""

    label: str
    on_press: Callable[[], None]
    # "cancel" marks the dismissive action; it is always listed first.
    style: str = "default"


__all__ = [
    "PermissionKind",
    "PermissionStatus",
    "Platform",
    "PermissionResult",
    "PlatformResponse",
    "WorkoutPermissions",
    "Explanation",
    "DialogAction",
]
