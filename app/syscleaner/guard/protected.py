"""Protected filesystem paths that must never be modified or deleted.

Patterns are matched segment by segment: a pattern segment of exactly
``*`` matches any single path segment, every other segment is compared
literally. Hard patterns protect the path and its whole subtree; keep-file
patterns protect exactly one path.
"""

from dataclasses import dataclass
from enum import Enum

WILDCARD_SEGMENT = "*"

DEFAULT_PROTECTED_PATHS: tuple[str, ...] = (
    "/proc",
    "/sys",
    "/dev",
    "/boot",
    "/etc",
    "/root/.ssh",
    "/home/*/.ssh",
    "/var/lib",
    "/usr",
    "/opt",
    "/srv",
    "/var/lib/docker",
    "/var/lib/mysql",
    "/var/lib/postgresql",
)

# Login accounting files under /var/log, which itself is not protected.
DEFAULT_KEEP_FILES: tuple[str, ...] = (
    "/var/log/btmp",
    "/var/log/wtmp",
    "/var/log/lastlog",
    "/var/log/faillog",
)


class GuardError(ValueError):
    """Raised when a protected-path pattern is malformed."""


class PatternKind(str, Enum):
    """How a protected pattern applies.

    Attributes:
        HARD: The path and every descendant are protected.
        KEEP_FILE: Only the exact path is protected.
    """

    HARD = "hard"
    KEEP_FILE = "keep_file"


def split_path(path: str) -> tuple[str, ...] | None:
    """Normalize an absolute path into its segments.

    Duplicate and trailing slashes and ``.`` segments are dropped.

    Returns:
        Tuple of segments (empty for ``/``), or None if the path is empty,
        relative or contains ``..``.
    """
    if not path or not path.startswith("/"):
        return None

    segments = tuple(s for s in path.split("/") if s and s != ".")
    if ".." in segments:
        return None
    return segments


@dataclass(frozen=True, slots=True)
class ProtectedPattern:
    """A single protected-path rule.

    Attributes:
        pattern: Absolute path pattern, optionally with ``*`` segments.
        kind: Whether the rule covers a subtree or a single file.
    """

    pattern: str
    kind: PatternKind = PatternKind.HARD

    def __post_init__(self) -> None:
        """Validate the pattern is an absolute, normalizable path."""
        if split_path(self.pattern) is None:
            msg = f"Protected pattern must be an absolute path: {self.pattern!r}"
            raise GuardError(msg)

    @property
    def segments(self) -> tuple[str, ...]:
        """Pattern segments after normalization."""
        segments = split_path(self.pattern)
        assert segments is not None
        return segments

    def matches(self, path_segments: tuple[str, ...]) -> bool:
        """Check whether already-normalized path segments fall under this rule."""
        pattern_segments = self.segments

        if self.kind == PatternKind.KEEP_FILE:
            if len(path_segments) != len(pattern_segments):
                return False
        elif len(path_segments) < len(pattern_segments):
            return False

        return all(
            expected == WILDCARD_SEGMENT or expected == actual
            for expected, actual in zip(pattern_segments, path_segments)
        )


class PathGuard:
    """Decides whether a filesystem object may be acted on.

    The guard is read-only after construction and safe to share.

    Example:
        >>> guard = PathGuard.from_lists(["/etc"], ["/var/log/wtmp"])
        >>> guard.is_protected("/etc/hosts")
        True
        >>> guard.is_protected("/etcetera")
        False
    """

    def __init__(self, patterns: list[ProtectedPattern]) -> None:
        self._hard = tuple(p for p in patterns if p.kind == PatternKind.HARD)
        self._keep = tuple(p for p in patterns if p.kind == PatternKind.KEEP_FILE)

    @classmethod
    def from_lists(
        cls,
        protected_paths: list[str] | tuple[str, ...],
        keep_files: list[str] | tuple[str, ...] = (),
    ) -> "PathGuard":
        """Build a guard from plain pattern strings.

        Raises:
            GuardError: If any pattern is not an absolute path.
        """
        patterns = [ProtectedPattern(p, PatternKind.HARD) for p in protected_paths]
        patterns.extend(ProtectedPattern(p, PatternKind.KEEP_FILE) for p in keep_files)
        return cls(patterns)

    @classmethod
    def default(cls) -> "PathGuard":
        """Build a guard with the built-in protected and keep-file lists."""
        return cls.from_lists(DEFAULT_PROTECTED_PATHS, DEFAULT_KEEP_FILES)

    @property
    def patterns(self) -> tuple[ProtectedPattern, ...]:
        """All rules, hard patterns first."""
        return self._hard + self._keep

    def is_protected(self, path: str) -> bool:
        """Check if a path is protected and must not be touched.

        Malformed input (empty, relative, or containing ``..``) is treated
        as protected.

        Args:
            path: Absolute filesystem path to check.

        Returns:
            True if the path must be left alone, False otherwise.
        """
        segments = split_path(path)
        # The filesystem root itself is never a cleanup target.
        if not segments:
            return True

        if any(p.matches(segments) for p in self._hard):
            return True

        return any(p.matches(segments) for p in self._keep)
