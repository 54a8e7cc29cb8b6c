"""Protected-path matching.

This module exports the path guard consulted before any cleanup action.
"""

from syscleaner.guard.protected import (
    DEFAULT_KEEP_FILES,
    DEFAULT_PROTECTED_PATHS,
    GuardError,
    PathGuard,
    PatternKind,
    ProtectedPattern,
)

__all__ = [
    "DEFAULT_KEEP_FILES",
    "DEFAULT_PROTECTED_PATHS",
    "GuardError",
    "PathGuard",
    "PatternKind",
    "ProtectedPattern",
]
