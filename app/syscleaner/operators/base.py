"""Abstract base class for package-cache drivers.

This module defines the interface every package manager driver
implements to clean its native caches.
"""

from abc import ABC, abstractmethod

from syscleaner.core.executor import Command


class PackageCacheDriver(ABC):
    """Abstract base class for package-cache drivers.

    Drivers only describe the commands to run; execution (or simulation)
    is left to the Executor.

    Example:
        >>> driver = AptDriver()
        >>> if driver.is_available():
        ...     for command in driver.clean_commands(purge_lists=False):
        ...         executor.run(command)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name of the package manager."""

    @property
    @abstractmethod
    def cache_path(self) -> str:
        """Root of the manager's on-disk cache, used for the guard check."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is installed.

        Returns:
            True if the manager can be used, False otherwise.
        """

    @abstractmethod
    def clean_commands(self, purge_lists: bool) -> list[Command]:
        """Commands cleaning the native cache.

        Args:
            purge_lists: Also drop downloaded package lists or metadata.

        Returns:
            Commands to run in order.
        """

    def clean_paths(self) -> list[str]:
        """Directories whose entries are removed on every clean.

        Each entry still goes through the path guard.
        """
        return []

    def purge_paths(self) -> list[str]:
        """Extra paths whose entries are removed when purging lists.

        Each entry still goes through the path guard.
        """
        return []
