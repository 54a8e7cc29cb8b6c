"""Utility modules for syscleaner.

This module exports commonly used utility functions.
"""

from syscleaner.utils.formatting import (
    console,
    err_console,
    print_banner,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from syscleaner.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_banner",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
