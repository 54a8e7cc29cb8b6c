"""Shell history reconciliation.

Trims history files that live shells may be appending to at any moment.
Live sessions are first asked to flush their in-memory history, then the
file is rewritten through a temporary file in the same directory and
atomically renamed over the original, so no reader or writer ever sees a
partially written file. Ownership and permissions are restored afterwards.
"""

import logging
import os
import pwd
import stat
import time
from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path
from tempfile import NamedTemporaryFile

import psutil

from syscleaner.core.executor import ActionOutcome, Command, Executor, OutcomeStatus
from syscleaner.history.models import (
    EMPTY_HISTORY_PLACEHOLDER,
    HISTORY_FILES,
    FlushResult,
    HistoryFileSpec,
    HistorySession,
)
from syscleaner.policy.models import ActionKind, ResolvedAction, Resource

logger = logging.getLogger(__name__)


def home_owner(home: Path) -> str:
    """Return the user owning a home directory.

    Falls back to the directory name when the uid has no passwd entry.
    """
    try:
        return pwd.getpwuid(home.stat().st_uid).pw_name
    except (KeyError, OSError):
        return home.name


def trimmed_content(data: bytes, keep_lines: int | None) -> bytes:
    """Compute the new content of a history file.

    Args:
        data: Current file content.
        keep_lines: Number of trailing lines to keep, or None to clear.

    Returns:
        Nothing when clearing, the placeholder line for an empty file,
        otherwise the last ``keep_lines`` lines.
    """
    if keep_lines is None:
        return b""
    if not data:
        return EMPTY_HISTORY_PLACEHOLDER
    if keep_lines <= 0:
        return b""
    lines = data.splitlines(keepends=True)
    return b"".join(lines[-keep_lines:])


def rewrite_history(path: Path, keep_lines: int | None) -> None:
    """Atomically rewrite a history file, keeping its last lines.

    The new content is written to a temporary file in the same directory
    and renamed over the target. The temporary file is removed on failure.
    Ownership and mode of the original file are restored best-effort.
    The file is opened without following a final symlink.

    Raises:
        FileNotFoundError: If the history file does not exist.
        OSError: If the file cannot be read or replaced, or is a symlink.
    """
    with open(os.open(path, os.O_RDONLY | os.O_NOFOLLOW), "rb") as f:
        original = os.fstat(f.fileno())
        content = trimmed_content(f.read(), keep_lines)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        # os.replace() is atomic on POSIX
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    try:
        os.chown(path, original.st_uid, original.st_gid)
        os.chmod(path, stat.S_IMODE(original.st_mode))
    except OSError as e:
        logger.warning("Could not restore ownership of %s: %s", path, e)


class HistoryReconciler:
    """Flushes live shell sessions and trims their history files.

    Holds no state between calls; sessions are rediscovered every pass.

    Attributes:
        executor: Executor performing or simulating every side effect.
        grace_seconds: Wait after signalling sessions, before trimming.
    """

    def __init__(
        self,
        executor: Executor,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.executor = executor
        settings = executor.config.settings
        self.grace_seconds = settings.flush_grace_seconds
        self._signal = settings.signal_number
        self._sleep = sleep

    def discover(self, user: str, shells: Iterable[str]) -> list[HistorySession]:
        """Find live shell processes owned by a user.

        Args:
            user: User name to match.
            shells: Process names of the shell family.

        Returns:
            Sessions found, possibly empty.
        """
        names = set(shells)
        sessions: list[HistorySession] = []

        for proc in psutil.process_iter(["pid", "name", "username"]):
            try:
                info = proc.info
                if info.get("username") != user or info.get("name") not in names:
                    continue
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

            try:
                terminal = proc.terminal()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                terminal = None

            sessions.append(HistorySession(pid=info["pid"], user=user, terminal=terminal))

        return sessions

    def flush(self, sessions: list[HistorySession]) -> FlushResult:
        """Ask live sessions to write their history, then wait briefly.

        Delivery is best-effort: a process that vanished or refuses the
        signal is logged and skipped. Success is never confirmed.

        Only the signal is sent. The controlling terminal of a session is
        recorded in the audit label, but nothing is ever written to it:
        input is never injected into another user's terminal.

        Args:
            sessions: Sessions to signal.

        Returns:
            FlushResult with ``confirmed`` always False.
        """
        result = FlushResult(sessions=sessions)

        def send(pid: int) -> None:
            try:
                os.kill(pid, self._signal)
            except (ProcessLookupError, PermissionError) as e:
                logger.info("Flush signal to pid %d not delivered: %s", pid, e)
                return
            result.signalled.append(pid)

        for session in sessions:
            where = f" on {session.terminal}" if session.terminal else ""
            label = f"kill -{self._signal.name} {session.pid} ({session.user}{where})"
            result.outcomes.append(self.executor.run(Command(label, func=partial(send, session.pid))))

        if sessions and not self.executor.dry_run:
            logger.debug(
                "Waiting %.2fs for %d session(s) to flush history", self.grace_seconds, len(sessions)
            )
            self._sleep(self.grace_seconds)

        return result

    def trim(self, path: Path, action: ResolvedAction) -> ActionOutcome:
        """Rewrite a history file according to a TRIM or CLEAR action."""
        if action.kind == ActionKind.TRIM:
            label = f"keep last {action.keep_lines} lines of {path}"
            keep = action.keep_lines
        else:
            label = f"clear {path}"
            keep = None
        return self.executor.run(Command(label, func=partial(rewrite_history, path, keep)))

    def reconcile_file(
        self,
        home: Path,
        spec: HistoryFileSpec,
        *,
        require_session: bool = False,
    ) -> list[ActionOutcome]:
        """Run the discover, flush and trim sequence for one history file.

        Args:
            home: Home directory holding the file.
            spec: Which history file to process.
            require_session: Only act if a live session is found.

        Returns:
            Outcomes of every command run, empty if nothing was done.
        """
        path = home / spec.filename
        if path.is_symlink():
            logger.warning("History file is a symlink, left as is: %s", path)
            return [ActionOutcome(OutcomeStatus.SKIPPED, str(path), reason="symlink")]
        if not path.is_file():
            return []

        user = home_owner(home)
        resource = Resource(spec.kind, str(path), owner=user)
        action = self.executor.policy.resolve_action(resource, self.executor.config.mode)
        if action.is_skip:
            logger.debug("History left as is (%s): %s", action.reason, path)
            return [ActionOutcome(OutcomeStatus.SKIPPED, str(path), reason=action.reason)]

        sessions = self.discover(user, spec.shells)
        if require_session and not sessions:
            return []

        outcomes: list[ActionOutcome] = []
        if sessions and spec.signal_flush:
            outcomes.extend(self.flush(sessions).outcomes)
        outcomes.append(self.trim(path, action))
        return outcomes

    def reconcile_home(self, home: Path) -> list[ActionOutcome]:
        """Reconcile every canonical history file in a home directory.

        Both extended-history file names are processed independently.
        """
        outcomes: list[ActionOutcome] = []
        for spec in HISTORY_FILES:
            outcomes.extend(self.reconcile_file(home, spec))
        return outcomes

    def sync_active_sessions(self, homes: Iterable[Path]) -> list[ActionOutcome]:
        """Reconcile history files only for users with live sessions."""
        outcomes: list[ActionOutcome] = []
        for home in homes:
            for spec in HISTORY_FILES:
                outcomes.extend(self.reconcile_file(home, spec, require_session=True))
        return outcomes
