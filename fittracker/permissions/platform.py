"""Platform collaborator interfaces and per-platform permission copy.

The operating system permission API and the modal dialog surface are
external collaborators; they are described here as small async protocols so
orchestrators can be driven by real adapters or by test fakes. Everything
that differs between iOS and Android (copy, settings URIs) lives in the
``PLATFORM_COPY`` lookup table rather than in branching logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Protocol, Sequence, Tuple

from .. import config
from .models import (
    DialogAction,
    Explanation,
    PermissionKind,
    PermissionResult,
    Platform,
    PlatformResponse,
)


class LocationPlatform(Protocol):
    """Operating-system location permission and settings capability."""

    async def get_status(self) -> PlatformResponse: ...

    async def request_foreground(self) -> PlatformResponse: ...

    async def request_background(self) -> PlatformResponse: ...

    async def services_enabled(self) -> bool: ...

    async def open_settings(self) -> None: ...

    async def open_url(self, url: str) -> None: ...


class DialogPresenter(Protocol):
    """Blocking modal primitive.

    Implementations must preserve the order of ``actions`` and invoke exactly
    one action's ``on_press`` per presentation.
    """

    async def alert(
        self, title: str, message: str, actions: Sequence[DialogAction]
    ) -> None: ...


class PermissionCapability(Protocol):
    """What the guided escalation policy needs from a permission orchestrator."""

    async def check_status(self) -> PermissionResult: ...

    async def request_status(self, kind: PermissionKind) -> PermissionResult: ...

    async def is_service_enabled(self) -> bool: ...

    async def open_settings(self) -> None: ...


@dataclass(frozen=True, slots=True)
class PlatformCopy:
    """User-facing copy and settings targets for one platform."""

    rationale: Mapping[PermissionKind, Explanation]
    services_disabled: Explanation
    permanently_denied: Mapping[PermissionKind, Explanation]
    # Guidance shown after the 1st, 2nd, ... retryable denial.
    guidance: Mapping[PermissionKind, Tuple[Explanation, ...]]
    location_settings_target: str
    app_settings_fallback: str

    def guidance_for(self, kind: PermissionKind, attempt: int) -> Explanation:
        options = self.guidance[kind]
        return options[min(max(attempt, 1), len(options)) - 1]

    def fallback_settings_uri(self, bundle_id: str) -> str:
        return self.app_settings_fallback.format(bundle_id=bundle_id)


def _permanently_denied_copy() -> Dict[PermissionKind, Explanation]:
    return {
        PermissionKind.WHEN_IN_USE: Explanation(
            title="Location Permission Required",
            message=(
                "Location permission is required to track your workouts. "
                "Please enable location access in app settings."
            ),
            confirm_text="Open Settings",
        ),
        PermissionKind.ALWAYS: Explanation(
            title="Location Permission Required",
            message=(
                "Background location permission is required to track workouts "
                'when the app is closed. Please enable "Allow all the time" in '
                "app settings."
            ),
            confirm_text="Open Settings",
        ),
    }


def _guidance_copy() -> Dict[PermissionKind, Tuple[Explanation, ...]]:
    return {
        PermissionKind.WHEN_IN_USE: (
            Explanation(
                title="Permission Still Needed",
                message=(
                    "Location access is required to track your workout distance "
                    "and route. Without this permission, we cannot provide "
                    "accurate fitness tracking."
                ),
                confirm_text="I Understand",
            ),
            Explanation(
                title="Help Us Help You",
                message=(
                    'To track your workouts accurately, please tap "Allow" when '
                    "the location permission dialog appears. Your location data "
                    "stays on your device."
                ),
                confirm_text="I Understand",
            ),
        ),
        PermissionKind.ALWAYS: (
            Explanation(
                title="Permission Still Needed",
                message=(
                    "Background location access is essential for tracking your "
                    "complete workout, even when you switch apps or lock your "
                    "phone."
                ),
                confirm_text="I Understand",
            ),
            Explanation(
                title="Help Us Help You",
                message=(
                    'For the best workout tracking experience, please select '
                    '"Allow all the time" when prompted. This lets us track '
                    "your entire workout route automatically."
                ),
                confirm_text="I Understand",
            ),
        ),
    }


def build_platform_copy(app_name: str) -> Dict[Platform, PlatformCopy]:
    """Return the copy table with ``app_name`` substituted into messages."""

    return {
        Platform.IOS: PlatformCopy(
            rationale={
                PermissionKind.WHEN_IN_USE: Explanation(
                    title="Location Access Required",
                    message=(
                        f"{app_name} needs access to your location to track your "
                        "workouts and calculate distance, pace, and route "
                        "information. Your location data is stored locally on "
                        "your device and is never shared."
                    ),
                    confirm_text="Grant Permission",
                    cancel_text="Not Now",
                ),
                PermissionKind.ALWAYS: Explanation(
                    title="Background Location Access",
                    message=(
                        f"{app_name} needs access to your location even when the "
                        "app is closed to continue tracking your workouts. This "
                        "ensures your exercise data is recorded accurately "
                        "throughout your entire workout session."
                    ),
                    confirm_text="Grant Permission",
                    cancel_text="Not Now",
                ),
            },
            services_disabled=Explanation(
                title="Location Services Disabled",
                message=(
                    "Location Services are turned off. Please enable Location "
                    "Services in Settings > Privacy & Security > Location "
                    "Services to use workout tracking."
                ),
                confirm_text="Open Settings",
            ),
            permanently_denied=_permanently_denied_copy(),
            guidance=_guidance_copy(),
            location_settings_target="App-Prefs:Privacy&path=LOCATION",
            app_settings_fallback="app-settings:",
        ),
        Platform.ANDROID: PlatformCopy(
            rationale={
                PermissionKind.WHEN_IN_USE: Explanation(
                    title="Location Permission Required",
                    message=(
                        f"{app_name} uses your location to track workout "
                        "distance, pace, and routes. All location data is stored "
                        "securely on your device and is never shared with third "
                        "parties."
                    ),
                    confirm_text="Allow Location",
                    cancel_text="Deny",
                ),
                PermissionKind.ALWAYS: Explanation(
                    title="Background Location Permission",
                    message=(
                        "To track your workouts when the app is in the "
                        f'background, {app_name} needs "Allow all the time" '
                        "location permission. This lets us continue recording "
                        "your route even when you switch to other apps."
                    ),
                    confirm_text="Allow Location",
                    cancel_text="Deny",
                ),
            },
            services_disabled=Explanation(
                title="Location Services Disabled",
                message=(
                    "Location Services are disabled. Please enable Location "
                    "Services in your device settings to track workouts."
                ),
                confirm_text="Open Settings",
            ),
            permanently_denied=_permanently_denied_copy(),
            guidance=_guidance_copy(),
            location_settings_target="android.settings.LOCATION_SOURCE_SETTINGS",
            app_settings_fallback="package:{bundle_id}",
        ),
    }


PLATFORM_COPY: Dict[Platform, PlatformCopy] = build_platform_copy(config.APP_NAME)


def resolve_platform(value: Platform | str | None = None) -> Platform:
    """Return the ``Platform`` for ``value`` (defaults to ``config.PLATFORM``)."""

    if isinstance(value, Platform):
        return value
    raw = (value or config.PLATFORM).strip().lower()
    try:
        return Platform(raw)
    except ValueError as exc:
        raise ValueError(f"Unsupported platform: {raw!r}") from exc


__all__ = [
    "LocationPlatform",
    "DialogPresenter",
    "PermissionCapability",
    "PlatformCopy",
    "PLATFORM_COPY",
    "build_platform_copy",
    "resolve_platform",
]
