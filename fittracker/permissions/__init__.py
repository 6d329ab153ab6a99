"""Location permission orchestration.

Exposes the base orchestrator, the guided escalation policy layered over it,
and the collaborator protocols platform adapters implement.
"""

from .guided import AttemptCounter, GuidedPermissionOrchestrator
from .models import (
    DialogAction,
    Explanation,
    PermissionKind,
    PermissionResult,
    PermissionStatus,
    Platform,
    PlatformResponse,
    WorkoutPermissions,
)
from .orchestrator import PermissionOrchestrator, to_permission_result
from .platform import (
    PLATFORM_COPY,
    DialogPresenter,
    LocationPlatform,
    PermissionCapability,
    PlatformCopy,
    build_platform_copy,
    resolve_platform,
)

__all__ = [
    "AttemptCounter",
    "GuidedPermissionOrchestrator",
    "PermissionOrchestrator",
    "to_permission_result",
    "DialogAction",
    "Explanation",
    "PermissionKind",
    "PermissionResult",
    "PermissionStatus",
    "Platform",
    "PlatformResponse",
    "WorkoutPermissions",
    "PLATFORM_COPY",
    "DialogPresenter",
    "LocationPlatform",
    "PermissionCapability",
    "PlatformCopy",
    "build_platform_copy",
    "resolve_platform",
]
