"""syscleaner - mode-driven system cleanup for Linux hosts."""

__version__ = "1.1.0"
