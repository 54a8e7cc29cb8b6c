"""Enumeration of cleanup candidates.

Each function yields Resource values for one area of the system; the
policy decides later what, if anything, happens to each of them.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from syscleaner.policy.models import Resource, ResourceKind

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES: tuple[str, ...] = (".gz", ".old", ".1", ".bz2", ".xz")

# Web server log directories whose every file is truncated.
WEB_LOG_DIRS: tuple[str, ...] = ("apache2", "httpd", "nginx")
WEB_LOG_KEEP_SUFFIX = ".keep"

# Per-user cache locations, as globs relative to the home directory.
USER_CACHE_GLOBS: tuple[str, ...] = (
    # Thumbnails and GVFS
    ".cache/thumbnails/fail",
    ".cache/thumbnails/normal",
    ".cache/gvfs",
    # Browsers
    ".cache/google-chrome/Default/Cache",
    ".cache/chromium/Default/Cache",
    ".cache/mozilla/firefox/*/cache2",
    # VS Code
    ".config/Code/Cache",
    ".config/Code/CachedData",
    ".config/Code/logs",
    ".vscode/extensions/.obsolete",
    # LibreOffice
    ".cache/libreoffice",
    ".config/libreoffice/*/cache",
    # Recent files
    ".local/share/recently-used.xbel",
    ".config/gtk-3.0/bookmarks",
    # Trash contents
    ".local/share/Trash/files/*",
    ".local/share/Trash/info/*",
)


def _classify_log(path: Path, log_dir: Path) -> ResourceKind | None:
    if path.name.endswith(ARCHIVE_SUFFIXES):
        return ResourceKind.LOG_ARCHIVE
    if path.name.endswith(".log"):
        return ResourceKind.LOG_FILE

    relative = path.relative_to(log_dir)
    if relative.parts[0] in WEB_LOG_DIRS and not path.name.endswith(WEB_LOG_KEEP_SUFFIX):
        return ResourceKind.LOG_FILE
    return None


def iter_log_resources(log_dir: Path, audit_log: Path) -> Iterator[Resource]:
    """Yield log files and archives under the log directory.

    The audit log is yielded as an audit artifact so the policy keeps it.
    Symlinks are never followed.
    """
    for root, _dirs, files in os.walk(log_dir):
        for name in sorted(files):
            path = Path(root) / name
            if path.is_symlink() or not path.is_file():
                continue

            if path == audit_log:
                yield Resource(ResourceKind.AUDIT_ARTIFACT, str(path))
                continue

            kind = _classify_log(path, log_dir)
            if kind is not None:
                yield Resource(kind, str(path))


def iter_temp_resources(temp_dir: Path, now: float) -> Iterator[Resource]:
    """Yield regular files in a temp directory with their access age.

    Hidden files and hidden directories are left out.
    """
    for root, dirs, files in os.walk(temp_dir):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        for name in sorted(files):
            if name.startswith("."):
                continue
            path = Path(root) / name
            try:
                st = path.lstat()
            except FileNotFoundError:
                continue
            if not path.is_file() or path.is_symlink():
                continue
            yield Resource(ResourceKind.TEMP_ENTRY, str(path), age_seconds=now - st.st_atime)


def iter_empty_dirs(temp_dir: Path) -> Iterator[Path]:
    """Yield empty, non-hidden subdirectories of a temp directory, deepest first."""
    for root, dirs, _files in os.walk(temp_dir, topdown=False):
        for name in dirs:
            path = Path(root) / name
            if any(part.startswith(".") for part in path.relative_to(temp_dir).parts):
                continue
            if path.is_symlink():
                continue
            try:
                if not any(path.iterdir()):
                    yield path
            except OSError:
                continue


def iter_journal_resources(journal_dirs: tuple[Path, ...]) -> Iterator[Resource]:
    """Yield the top-level entries of the journal directories."""
    for journal_dir in journal_dirs:
        if not journal_dir.is_dir():
            continue
        for entry in sorted(journal_dir.iterdir()):
            yield Resource(ResourceKind.JOURNAL_FILE, str(entry))


def iter_home_dirs(home_root: Path) -> Iterator[Path]:
    """Yield top-level home directories, skipping non-directories."""
    if not home_root.is_dir():
        return
    for entry in sorted(home_root.iterdir()):
        if entry.is_dir():
            yield entry


def _resolve_within(path: Path, home_real: Path) -> Path | None:
    """Resolve every component but the last and require the result under the home.

    The last component is kept as is so a symlink entry is unlinked, never followed.
    """
    parent = Path(os.path.realpath(path.parent))
    if parent != home_real and home_real not in parent.parents:
        return None
    return parent / path.name


def iter_user_cache_resources(home: Path, owner: str | None = None) -> Iterator[Resource]:
    """Yield existing per-user cache entries of a home directory.

    Candidates are yielded with their parent directories resolved. Entries
    reached through a symlink pointing out of the home directory are left out.
    """
    home_real = Path(os.path.realpath(home))
    for pattern in USER_CACHE_GLOBS:
        for path in sorted(home.glob(pattern)):
            resolved = _resolve_within(path, home_real)
            if resolved is None:
                logger.warning("Skipping %s: it resolves outside %s", path, home)
                continue
            yield Resource(ResourceKind.USER_CACHE_ENTRY, str(resolved), owner=owner)
