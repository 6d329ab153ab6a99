"""Location permission orchestration over an abstract platform capability.

Permission checks never raise to the caller: any failure of the platform
query itself degrades to a ``Denied`` result that cannot be retried, and
settings navigation is best effort.
"""

from __future__ import annotations

import logging
from typing import Mapping

from .. import config
from .models import (
    Explanation,
    PermissionKind,
    PermissionResult,
    PermissionStatus,
    Platform,
    PlatformResponse,
)
from .platform import (
    PLATFORM_COPY,
    DialogPresenter,
    LocationPlatform,
    PlatformCopy,
    resolve_platform,
)
from .prompts import confirm

_STATUS_MAP = {
    "granted": PermissionStatus.GRANTED,
    "denied": PermissionStatus.DENIED,
    "undetermined": PermissionStatus.UNDETERMINED,
}


def to_permission_result(response: PlatformResponse) -> PermissionResult:
    """Map a raw platform answer onto a ``PermissionResult``.

    Unknown platform statuses (e.g. "restricted") are treated as denied.
    """

    status = _STATUS_MAP.get(
        str(response.status).strip().lower(), PermissionStatus.DENIED
    )
    can_ask_again = True if response.can_ask_again is None else response.can_ask_again
    return PermissionResult(
        status=status,
        can_ask_again=bool(can_ask_again),
        granted=status is PermissionStatus.GRANTED,
    )


class PermissionOrchestrator:
    """Queries and requests location permission, explaining failures."""

    def __init__(
        self,
        platform: LocationPlatform,
        dialogs: DialogPresenter,
        *,
        platform_name: Platform | str | None = None,
        bundle_id: str = config.BUNDLE_ID,
        copy_table: Mapping[Platform, PlatformCopy] = PLATFORM_COPY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._platform = platform
        self._dialogs = dialogs
        self.platform_name = resolve_platform(platform_name)
        self.copy = copy_table[self.platform_name]
        self._bundle_id = bundle_id
        self._log = logger or logging.getLogger(self.__class__.__name__)

    async def check_status(self) -> PermissionResult:
        """Read the current foreground permission without prompting."""

        try:
            response = await self._platform.get_status()
        except Exception:
            self._log.warning(
                "Location permission check failed; treating as denied",
                exc_info=True,
            )
            return PermissionResult.denied(can_ask_again=False)
        return to_permission_result(response)

    async def is_service_enabled(self) -> bool:
        try:
            return bool(await self._platform.services_enabled())
        except Exception:
            self._log.warning(
                "Location services check failed; treating as disabled",
                exc_info=True,
            )
            return False

    async def request_status(
        self, kind: PermissionKind = PermissionKind.WHEN_IN_USE
    ) -> PermissionResult:
        """Request ``kind`` permission from the platform.

        When the device location service is off the user is told so and the
        platform request API is never called.
        """

        try:
            return await self._request(kind)
        except Exception:
            self._log.error(
                "Location permission request for %s failed; treating as denied",
                kind.value,
                exc_info=True,
            )
            return PermissionResult.denied(can_ask_again=False)

    async def _request(self, kind: PermissionKind) -> PermissionResult:
        if not await self.is_service_enabled():
            self._log.info("Location services disabled; %s not requested", kind.value)
            if await confirm(self._dialogs, self.copy.services_disabled):
                await self._open_location_settings()
            return PermissionResult.denied(can_ask_again=False)

        if kind is PermissionKind.ALWAYS:
            response = await self._platform.request_background()
        else:
            response = await self._platform.request_foreground()
        result = to_permission_result(response)
        self._log.info(
            "Location permission %s -> %s (can_ask_again=%s)",
            kind.value,
            result.status.value,
            result.can_ask_again,
        )

        if result.permanently_denied:
            if await confirm(self._dialogs, self.copy.permanently_denied[kind]):
                await self.open_settings()
        return result

    def explanation_for(self, kind: PermissionKind) -> Explanation:
        """Return the platform rationale copy for ``kind``."""

        return self.copy.rationale[kind]

    async def show_explanation(self, explanation: Explanation) -> bool:
        return await confirm(self._dialogs, explanation)

    async def open_settings(self) -> None:
        """Open the app settings screen, falling back to the platform URI.

        Failures are logged and swallowed; navigation is best effort.
        """

        try:
            await self._platform.open_settings()
            return
        except Exception:
            self._log.warning(
                "Opening app settings failed; trying fallback URI", exc_info=True
            )
        uri = self.copy.fallback_settings_uri(self._bundle_id)
        try:
            await self._platform.open_url(uri)
        except Exception:
            self._log.error("Fallback settings URI %s failed", uri, exc_info=True)

    async def _open_location_settings(self) -> None:
        try:
            await self._platform.open_url(self.copy.location_settings_target)
        except Exception:
            self._log.warning(
                "Opening device location settings failed; opening app settings",
                exc_info=True,
            )
            await self.open_settings()


__all__ = ["PermissionOrchestrator", "to_permission_result"]
