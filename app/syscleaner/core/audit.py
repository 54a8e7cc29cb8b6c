"""Audit trail for cleanup runs.

Every decision is appended to a line-oriented audit file through a
dedicated logger and echoed to the console according to the mode's
verbosity tier.
"""

import logging
import os
from datetime import datetime
from enum import Enum
from pathlib import Path

from syscleaner.policy.models import Mode
from syscleaner.utils.formatting import print_error, print_info, print_success, print_warning

logger = logging.getLogger(__name__)

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

AUDIT_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
AUDIT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class AuditLevel(str, Enum):
    """Severity of an audit record."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"

    @property
    def logging_level(self) -> int:
        """Matching stdlib logging level."""
        return {
            AuditLevel.INFO: logging.INFO,
            AuditLevel.WARNING: logging.WARNING,
            AuditLevel.ERROR: logging.ERROR,
            AuditLevel.SUCCESS: SUCCESS,
        }[self]


_CONSOLE_PRINTERS = {
    AuditLevel.INFO: print_info,
    AuditLevel.WARNING: print_warning,
    AuditLevel.ERROR: print_error,
    AuditLevel.SUCCESS: print_success,
}


class AuditLog:
    """Append-only audit sink with a console echo.

    The audit file is opened lazily on the first record. There is exactly
    one writer per run.

    Attributes:
        path: Audit file location.
        mode: Run mode deciding the console verbosity tier.
        session_id: Identifier of the current run.
    """

    def __init__(self, path: Path, mode: Mode, session_id: str) -> None:
        self.path = path
        self.mode = mode
        self.session_id = session_id
        self._logger = logging.getLogger(f"syscleaner.audit.{session_id}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._handler: logging.FileHandler | None = None
        self._disabled = False

    def _ensure_handler(self) -> logging.FileHandler | None:
        if self._handler is not None or self._disabled:
            return self._handler
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(self.path, encoding="utf-8")
        except OSError as e:
            # Console echo continues; the file is not retried for this run.
            logger.warning("Audit log unavailable at %s: %s", self.path, e)
            self._disabled = True
            return None
        handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt=AUDIT_DATE_FORMAT))
        self._logger.addHandler(handler)
        self._handler = handler
        return handler

    def record(self, level: AuditLevel, message: str) -> None:
        """Append one record and echo it to the console if the tier allows."""
        if self._ensure_handler() is not None:
            self._logger.log(level.logging_level, message)

        if not self.mode.is_stealth or level == AuditLevel.ERROR:
            _CONSOLE_PRINTERS[level](message)

    def info(self, message: str) -> None:
        self.record(AuditLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.record(AuditLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.record(AuditLevel.ERROR, message)

    def success(self, message: str) -> None:
        self.record(AuditLevel.SUCCESS, message)

    def start_session(self) -> None:
        """Write the opening record carrying the session id."""
        started = datetime.now().isoformat(timespec="seconds")
        self.info(f"Session {self.session_id} started at {started} (mode: {self.mode.value})")

    def finalize(self) -> None:
        """Restrict the audit file to its owner and close it."""
        if self._handler is not None:
            self._handler.close()
            self._logger.removeHandler(self._handler)
            self._handler = None

        if self.path.exists():
            try:
                os.chmod(self.path, 0o600)
            except OSError as e:
                logger.warning("Could not restrict audit log permissions: %s", e)
