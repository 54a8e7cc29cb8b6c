"""Mode matrix mapping a resource kind and mode to a resolved action."""

import logging

from syscleaner.guard.protected import PathGuard
from syscleaner.policy.models import (
    SKIP,
    ActionKind,
    Mode,
    Resource,
    ResolvedAction,
    ResourceKind,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

BASH_KEEP_LINES = 50
EXTENDED_KEEP_LINES = 1000

_TRUNCATE = ResolvedAction(ActionKind.TRUNCATE)
_DELETE = ResolvedAction(ActionKind.DELETE)
_CLEAN = ResolvedAction(ActionKind.CLEAN)
_CLEAN_PURGE = ResolvedAction(ActionKind.CLEAN, purge_lists=True)
_CLEAR = ResolvedAction(ActionKind.CLEAR)
_KEEP = ResolvedAction(ActionKind.SKIP, reason="kept")
_NO_OP = ResolvedAction(ActionKind.SKIP, reason="no-op")

# (standard, stealth, stealth-max) per resource kind.
# TEMP_ENTRY rows apply only to entries older than the age limit.
ACTION_TABLE: dict[ResourceKind, tuple[ResolvedAction, ResolvedAction, ResolvedAction]] = {
    ResourceKind.LOG_FILE: (_TRUNCATE, _TRUNCATE, _TRUNCATE),
    ResourceKind.LOG_ARCHIVE: (_DELETE, _DELETE, _DELETE),
    ResourceKind.JOURNAL_FILE: (SKIP, SKIP, _DELETE),
    ResourceKind.TEMP_ENTRY: (SKIP, SKIP, _DELETE),
    ResourceKind.PACKAGE_CACHE: (_CLEAN, _CLEAN, _CLEAN_PURGE),
    ResourceKind.CONTAINER_CACHE: (SKIP, SKIP, _CLEAN),
    ResourceKind.BASH_HISTORY: (
        ResolvedAction(ActionKind.TRIM, keep_lines=BASH_KEEP_LINES),
        _CLEAR,
        _CLEAR,
    ),
    ResourceKind.EXTENDED_HISTORY: (
        _NO_OP,
        _NO_OP,
        ResolvedAction(ActionKind.TRIM, keep_lines=EXTENDED_KEEP_LINES),
    ),
    ResourceKind.USER_CACHE_ENTRY: (_DELETE, _DELETE, _DELETE),
    ResourceKind.AUDIT_ARTIFACT: (_KEEP, _KEEP, _KEEP),
}

_MODE_COLUMN: dict[Mode, int] = {
    Mode.STANDARD: 0,
    Mode.STEALTH: 1,
    Mode.STEALTH_MAX: 2,
}


class PolicyError(Exception):
    """Raised when no policy exists for a resource kind."""


class ModePolicy:
    """Resolves the action for a resource under a mode.

    Protected paths always resolve to SKIP, whatever the mode.

    Attributes:
        guard: Path guard consulted before the mode table.
        temp_max_age_seconds: Temp entries must be older than this to be removed.
    """

    def __init__(self, guard: PathGuard, temp_max_age_days: int = 1) -> None:
        self.guard = guard
        self.temp_max_age_seconds = temp_max_age_days * SECONDS_PER_DAY

    def resolve_action(self, resource: Resource, mode: Mode) -> ResolvedAction:
        """Resolve what to do with a resource.

        Args:
            resource: The cleanup target.
            mode: Active run mode.

        Returns:
            The resolved action.

        Raises:
            PolicyError: If the resource kind has no table entry.
        """
        action = self.mode_action(resource.kind, mode)

        if self.guard.is_protected(resource.path):
            logger.debug("Protected path skipped: %s", resource.path)
            return ResolvedAction(ActionKind.SKIP, reason="protected")

        if resource.kind == ResourceKind.TEMP_ENTRY and not self._is_stale(resource):
            return ResolvedAction(ActionKind.SKIP, reason="recent")

        return action

    def mode_action(self, kind: ResourceKind, mode: Mode) -> ResolvedAction:
        """Table entry for a kind and mode, ignoring path and age.

        Raises:
            PolicyError: If the resource kind has no table entry.
        """
        try:
            return ACTION_TABLE[kind][_MODE_COLUMN[mode]]
        except KeyError:
            msg = f"No cleanup policy for resource kind: {kind!r}"
            raise PolicyError(msg) from None

    def _is_stale(self, resource: Resource) -> bool:
        """Check if a temp entry is older than the age limit."""
        if resource.age_seconds is None:
            return False
        return resource.age_seconds > self.temp_max_age_seconds
