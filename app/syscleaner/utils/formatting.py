"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

# Level styles shared by the banner, the audit console and the helpers below.
THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "#f53263",
        "info": "#0ec1c8",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def print_banner(version: str, mode: str, timestamp: str, session_id: str) -> None:
    """Print the run banner shown before any cleanup starts."""
    body = (
        f"[header]Universal System Cleaner v{version}[/]\n"
        f"[muted]Mode:[/] {mode}\n"
        f"[muted]Time:[/] {timestamp}\n"
        f"[muted]Session ID:[/] {session_id}"
    )
    console.print(Panel(body, border_style="border", expand=False))


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]\\[i][/] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]\\[!][/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]\\[x][/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]\\[ok][/] {escape(message)}")
