"""systemd service supervision and journal maintenance."""

import logging

from syscleaner.core.executor import Command
from syscleaner.core.paths import SYSTEMD_RUNTIME_DIR
from syscleaner.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Logging daemons restarted after their files were truncated.
LOGGING_UNITS: tuple[str, ...] = ("systemd-journald", "rsyslog", "syslog-ng")


class ServiceSupervisor:
    """Wraps systemctl and journalctl.

    Only probing runs directly; every state change is returned as a
    Command for the Executor.
    """

    def is_available(self) -> bool:
        """Check if the host is booted with systemd."""
        return command_exists("systemctl") and SYSTEMD_RUNTIME_DIR.is_dir()

    def is_installed(self, unit: str) -> bool:
        """Check if a service unit exists on this host."""
        try:
            result = run_command(["systemctl", "cat", f"{unit}.service"], timeout=10.0)
        except (FileNotFoundError, OSError) as e:
            logger.debug("Cannot probe unit %s: %s", unit, e)
            return False
        return result.success

    def journal_commands(self) -> list[Command]:
        """Rotate the journal and vacuum everything already archived."""
        return [
            Command.external("journalctl", "--rotate"),
            Command.external("journalctl", "--vacuum-time=1s"),
            Command.external("journalctl", "--vacuum-size=1M"),
        ]

    def restart_commands(self, units: tuple[str, ...] = LOGGING_UNITS) -> list[Command]:
        """Restart commands for the installed logging daemons."""
        return [
            Command.external("systemctl", "restart", unit)
            for unit in units
            if self.is_installed(unit)
        ]
