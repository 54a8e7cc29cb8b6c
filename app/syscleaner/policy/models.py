"""Domain models for cleanup resources and resolved actions.

This module defines the run modes, the kinds of cleanup targets, and
the action the policy resolves for each target.
"""

from dataclasses import dataclass
from enum import Enum


class Mode(str, Enum):
    """Cleanup mode selected on the command line.

    Attributes:
        STANDARD: Verbose output, conservative history handling.
        STEALTH: Errors-only output, history files cleared.
        STEALTH_MAX: Stealth plus temp, journal, container and list purges.
    """

    STANDARD = "standard"
    STEALTH = "stealth"
    STEALTH_MAX = "stealth-max"

    @property
    def is_stealth(self) -> bool:
        """Check if console output is reduced to errors only."""
        return self in (Mode.STEALTH, Mode.STEALTH_MAX)

    @property
    def label(self) -> str:
        """Upper-case name shown in the banner."""
        return self.value.upper()


class ResourceKind(str, Enum):
    """Kind of cleanup target."""

    LOG_FILE = "log_file"
    LOG_ARCHIVE = "log_archive"
    JOURNAL_FILE = "journal_file"
    TEMP_ENTRY = "temp_entry"
    PACKAGE_CACHE = "package_cache"
    CONTAINER_CACHE = "container_cache"
    BASH_HISTORY = "bash_history"
    EXTENDED_HISTORY = "extended_history"
    USER_CACHE_ENTRY = "user_cache_entry"
    AUDIT_ARTIFACT = "audit_artifact"


class ActionKind(str, Enum):
    """What to do with a resource.

    Attributes:
        SKIP: Leave the resource untouched.
        TRUNCATE: Empty the file in place, keeping inode and ownership.
        DELETE: Remove the file, symlink or directory tree.
        CLEAN: Run the owning tool's native clean command.
        TRIM: Keep only the last ``keep_lines`` lines of a history file.
        CLEAR: Empty a history file while keeping the file itself.
    """

    SKIP = "skip"
    TRUNCATE = "truncate"
    DELETE = "delete"
    CLEAN = "clean"
    TRIM = "trim"
    CLEAR = "clear"


@dataclass(frozen=True, slots=True)
class Resource:
    """An abstract cleanup target.

    Attributes:
        kind: Resource kind driving the policy lookup.
        path: Absolute path of the target (or the tool's cache root).
        owner: Owning user name, if known.
        age_seconds: Age since last access, used for temp entries.
    """

    kind: ResourceKind
    path: str
    owner: str | None = None
    age_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class ResolvedAction:
    """Action chosen by the policy for one resource.

    Attributes:
        kind: The action to take.
        reason: Why the action was chosen, mainly for skips.
        keep_lines: Lines to keep for TRIM actions.
        purge_lists: Whether CLEAN should also drop package lists.
    """

    kind: ActionKind
    reason: str | None = None
    keep_lines: int | None = None
    purge_lists: bool = False

    @property
    def is_skip(self) -> bool:
        """Check if the resource is left untouched."""
        return self.kind == ActionKind.SKIP


SKIP = ResolvedAction(ActionKind.SKIP, reason="mode")
