"""Dry-run aware command execution with an audit trail.

Every side effect of a run goes through the Executor. In dry-run mode
nothing is executed and each command is recorded as a test action.
Failures are recorded as warnings and never abort the run.
"""

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from syscleaner.core.audit import AuditLog
from syscleaner.core.config import RunConfig
from syscleaner.policy.matrix import ModePolicy
from syscleaner.policy.models import ActionKind, Resource
from syscleaner.utils.shell import run_command

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_STATUS = 124


class OutcomeStatus(str, Enum):
    """Result category of a single action."""

    SKIPPED = "skipped"
    SIMULATED = "simulated"
    PERFORMED = "performed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Outcome of one command or resource action.

    Attributes:
        status: What happened.
        command: Label of the command that was (or would have been) run.
        exit_status: Exit status for performed or failed commands.
        reason: Why the action was skipped or failed.
    """

    status: OutcomeStatus
    command: str
    exit_status: int | None = None
    reason: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return self.status == OutcomeStatus.FAILED


@dataclass(frozen=True, slots=True)
class Command:
    """A side effect to simulate or perform.

    Exactly one of ``argv`` (an external program) or ``func`` (an
    in-process filesystem operation) must be set.

    Attributes:
        label: Human-readable description used in the audit trail.
        argv: External program and arguments.
        func: In-process operation; raising OSError marks it as failed.
    """

    label: str
    argv: tuple[str, ...] | None = None
    func: Callable[[], None] | None = None

    def __post_init__(self) -> None:
        """Validate that exactly one execution target is set."""
        if (self.argv is None) == (self.func is None):
            msg = "Command needs exactly one of argv or func"
            raise ValueError(msg)

    @classmethod
    def external(cls, *argv: str) -> "Command":
        """Create a command running an external program."""
        return cls(label=" ".join(argv), argv=tuple(argv))


def truncate_file(path: Path) -> None:
    """Empty a file in place, keeping inode, mode and ownership."""
    with open(path, "r+b") as f:
        f.truncate(0)


def delete_path(path: Path) -> None:
    """Remove a file, symlink or directory tree.

    Raises:
        FileNotFoundError: If nothing exists at the path.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class Executor:
    """Performs or simulates commands and records an audit trail.

    Attributes:
        config: Run configuration (mode and dry-run flag).
        audit: Audit sink receiving one record per visible action.
        policy: Mode policy used by :meth:`apply`.
    """

    def __init__(self, config: RunConfig, audit: AuditLog, policy: ModePolicy) -> None:
        self.config = config
        self.audit = audit
        self.policy = policy

    @property
    def dry_run(self) -> bool:
        """Check if commands are simulated."""
        return self.config.dry_run

    def run(self, command: Command) -> ActionOutcome:
        """Simulate or perform a command.

        Args:
            command: The command to run.

        Returns:
            ActionOutcome describing what happened. Never raises for
            failures of the command itself.
        """
        if self.dry_run:
            self.audit.info(f"[TEST] {command.label}")
            return ActionOutcome(OutcomeStatus.SIMULATED, command.label)

        if command.argv is not None:
            outcome = self._run_external(command)
        else:
            outcome = self._run_func(command)

        if outcome.status == OutcomeStatus.PERFORMED:
            self.audit.info(f"Executed: {command.label}")
        elif outcome.failed:
            self.audit.warning(
                f"Command failed with exit code {outcome.exit_status}: {command.label}"
            )
        return outcome

    def _run_external(self, command: Command) -> ActionOutcome:
        assert command.argv is not None
        try:
            result = run_command(list(command.argv))
        except FileNotFoundError:
            logger.debug("Executable not found, skipping: %s", command.argv[0])
            return ActionOutcome(OutcomeStatus.SKIPPED, command.label, reason="absent")
        except subprocess.TimeoutExpired:
            return ActionOutcome(
                OutcomeStatus.FAILED,
                command.label,
                exit_status=TIMEOUT_EXIT_STATUS,
                reason="timeout",
            )
        except OSError as e:
            return ActionOutcome(OutcomeStatus.FAILED, command.label, exit_status=126, reason=str(e))

        if result.success:
            return ActionOutcome(OutcomeStatus.PERFORMED, command.label, exit_status=0)

        logger.debug("%s stderr: %s", command.label, result.stderr.strip())
        return ActionOutcome(
            OutcomeStatus.FAILED,
            command.label,
            exit_status=result.returncode,
            reason=result.error_line,
        )

    def _run_func(self, command: Command) -> ActionOutcome:
        assert command.func is not None
        try:
            command.func()
        except FileNotFoundError:
            logger.debug("Resource absent, skipping: %s", command.label)
            return ActionOutcome(OutcomeStatus.SKIPPED, command.label, reason="absent")
        except OSError as e:
            return ActionOutcome(OutcomeStatus.FAILED, command.label, exit_status=1, reason=str(e))
        return ActionOutcome(OutcomeStatus.PERFORMED, command.label, exit_status=0)

    def apply(self, resource: Resource) -> ActionOutcome:
        """Resolve and run the filesystem action for a resource.

        Handles TRUNCATE and DELETE. Other action kinds are driven by
        their owning component (history reconciler, package drivers).

        Args:
            resource: The cleanup target.

        Returns:
            ActionOutcome for the resource.
        """
        action = self.policy.resolve_action(resource, self.config.mode)
        path = Path(resource.path)

        if action.kind == ActionKind.TRUNCATE:
            return self.run(Command(f"truncate -s 0 {path}", func=lambda: truncate_file(path)))

        if action.kind == ActionKind.DELETE:
            return self.run(Command(f"rm -rf {path}", func=lambda: delete_path(path)))

        reason = action.reason or action.kind.value
        logger.debug("Skipping %s (%s): %s", resource.kind.value, reason, path)
        return ActionOutcome(OutcomeStatus.SKIPPED, str(path), reason=reason)
