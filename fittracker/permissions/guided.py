"""Bounded escalation policy layered over a permission capability.

``GuidedPermissionOrchestrator`` wraps any object satisfying
``PermissionCapability`` (normally a ``PermissionOrchestrator``) and adds the
user-guidance protocol: rationale before the first request, guidance after a
retryable denial, and silence once the per-kind attempt cap is reached.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Set

from .. import config
from .models import (
    PermissionKind,
    PermissionResult,
    Platform,
    WorkoutPermissions,
)
from .orchestrator import PermissionOrchestrator
from .platform import (
    PLATFORM_COPY,
    DialogPresenter,
    LocationPlatform,
    PermissionCapability,
    PlatformCopy,
)
from .prompts import acknowledge, confirm


class AttemptCounter:
    """Per-kind denial counts and "already asked" flags for one orchestrator."""

    def __init__(self) -> None:
        self._counts: Dict[PermissionKind, int] = {}
        self._requested: Set[PermissionKind] = set()

    def get(self, kind: PermissionKind) -> int:
        return self._counts.get(kind, 0)

    def increment(self, kind: PermissionKind) -> int:
        self._counts[kind] = self.get(kind) + 1
        return self._counts[kind]

    def mark_requested(self, kind: PermissionKind) -> None:
        self._requested.add(kind)

    def was_requested(self, kind: PermissionKind) -> bool:
        return kind in self._requested

    def reset(self) -> None:
        self._counts.clear()
        self._requested.clear()


class GuidedPermissionOrchestrator:
    """Escalating permission requests with a cap on repeated prompting."""

    def __init__(
        self,
        capability: PermissionCapability,
        dialogs: DialogPresenter,
        copy: PlatformCopy,
        *,
        max_attempts: int = config.PERMISSION_MAX_ATTEMPTS,
        attempts: AttemptCounter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._capability = capability
        self._dialogs = dialogs
        self._copy = copy
        self._max_attempts = max_attempts
        self._attempts = attempts if attempts is not None else AttemptCounter()
        self._lock = asyncio.Lock()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @classmethod
    def for_platform(
        cls,
        platform: LocationPlatform,
        dialogs: DialogPresenter,
        *,
        platform_name: Platform | str | None = None,
        bundle_id: str = config.BUNDLE_ID,
        max_attempts: int = config.PERMISSION_MAX_ATTEMPTS,
    ) -> "GuidedPermissionOrchestrator":
        """Build the guided policy over a ``PermissionOrchestrator``."""

        base = PermissionOrchestrator(
            platform,
            dialogs,
            platform_name=platform_name,
            bundle_id=bundle_id,
            copy_table=PLATFORM_COPY,
        )
        return cls(base, dialogs, base.copy, max_attempts=max_attempts)

    def attempts(self, kind: PermissionKind) -> int:
        return self._attempts.get(kind)

    def reset_attempt_counters(self) -> None:
        """Forget all denials so the next request starts with the rationale."""

        self._attempts.reset()

    async def check_status(self) -> PermissionResult:
        return await self._capability.check_status()

    async def is_service_enabled(self) -> bool:
        return await self._capability.is_service_enabled()

    async def open_settings(self) -> None:
        await self._capability.open_settings()

    async def request_status(
        self, kind: PermissionKind = PermissionKind.WHEN_IN_USE
    ) -> PermissionResult:
        return await self.request_with_guidance(kind)

    async def request_with_guidance(
        self, kind: PermissionKind = PermissionKind.WHEN_IN_USE
    ) -> PermissionResult:
        """Request ``kind`` permission following the escalation protocol.

        * first request for ``kind``: show the rationale first; declining it
          returns a retryable denial without touching the platform.
        * a denial increments the attempt counter; a retryable denial below
          the cap is followed by guidance copy for that attempt number.
        * at the cap: no rationale or guidance dialogs, but the platform is
          still asked so a permission granted from system settings is seen.
        """

        async with self._lock:
            attempts = self._attempts.get(kind)
            if attempts >= self._max_attempts:
                self._log.info(
                    "Suppressing %s permission prompts after %d denied attempts",
                    kind.value,
                    attempts,
                )
                return await self._request(kind)

            if not self._attempts.was_requested(kind):
                if not await confirm(self._dialogs, self._copy.rationale[kind]):
                    self._log.info("User declined %s permission rationale", kind.value)
                    return PermissionResult.denied(can_ask_again=True)

            result = await self._request(kind)
            if result.granted:
                return result

            attempts = self._attempts.increment(kind)
            if result.can_ask_again and attempts < self._max_attempts:
                await acknowledge(self._dialogs, self._copy.guidance_for(kind, attempts))
            return result

    async def _request(self, kind: PermissionKind) -> PermissionResult:
        self._attempts.mark_requested(kind)
        try:
            return await self._capability.request_status(kind)
        except Exception:
            self._log.error(
                "Permission capability failed for %s; treating as denied",
                kind.value,
                exc_info=True,
            )
            return PermissionResult.denied(can_ask_again=False)

    async def ensure_workout_permissions(self) -> WorkoutPermissions:
        """Acquire foreground then, only if granted, background location."""

        foreground = await self.request_with_guidance(PermissionKind.WHEN_IN_USE)
        if not foreground.granted:
            return WorkoutPermissions(foreground=foreground)
        background = await self.request_with_guidance(PermissionKind.ALWAYS)
        return WorkoutPermissions(foreground=foreground, background=background)


__all__ = ["AttemptCounter", "GuidedPermissionOrchestrator"]
