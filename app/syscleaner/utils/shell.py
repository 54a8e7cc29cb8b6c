"""Subprocess helpers for the external cleanup tools.

Tools run non-interactively under the C locale so their messages in the
audit trail do not depend on the host's language settings.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass

DEFAULT_TIMEOUT = 300.0

# Forced on every child so stderr lines are stable and greppable.
TOOL_ENV_OVERRIDES: dict[str, str] = {
    "LC_ALL": "C",
    "DEBIAN_FRONTEND": "noninteractive",
}


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured result of an external tool run.

    Attributes:
        args: The argv that was run.
        stdout: Standard output.
        stderr: Standard error.
        returncode: Exit status.
    """

    args: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the tool exited with status 0."""
        return self.returncode == 0

    @property
    def error_line(self) -> str | None:
        """Last non-empty stderr line, if any."""
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        return lines[-1] if lines else None


def tool_env() -> dict[str, str]:
    """Environment for child processes: the current one plus the overrides."""
    return {**os.environ, **TOOL_ENV_OVERRIDES}


def run_command(
    args: list[str],
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
    cwd: str | None = None,
) -> CommandResult:
    """Run an external tool with captured output.

    A non-zero exit status is reported in the result, never raised.

    Raises:
        subprocess.TimeoutExpired: If the tool runs longer than ``timeout``.
        FileNotFoundError: If the executable does not exist.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        cwd=cwd,
        env=tool_env(),
        stdin=subprocess.DEVNULL,
    )
    return CommandResult(
        args=tuple(args),
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(name) is not None
