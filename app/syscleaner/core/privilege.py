"""Privilege precondition for cleanup runs."""

import os


class PrivilegeError(Exception):
    """Raised when the process lacks root privileges."""


def require_root() -> None:
    """Ensure the process runs with an effective uid of 0.

    Raises:
        PrivilegeError: If the effective uid is not root.
    """
    if os.geteuid() != 0:
        raise PrivilegeError("Root privileges required")
