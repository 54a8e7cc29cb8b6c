"""CLI package for syscleaner.

This package contains the Typer application and its entry point.
"""

from syscleaner.cli.main import app, main

__all__ = ["app", "main"]
