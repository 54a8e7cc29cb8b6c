"""Package-cache drivers for the supported package managers."""

from pathlib import Path

from syscleaner.core.executor import Command
from syscleaner.operators.base import PackageCacheDriver
from syscleaner.utils.shell import command_exists


class AptDriver(PackageCacheDriver):
    """APT (Debian/Ubuntu/Pop!_OS)."""

    @property
    def name(self) -> str:
        return "apt"

    @property
    def cache_path(self) -> str:
        return "/var/cache/apt"

    def is_available(self) -> bool:
        return command_exists("apt-get")

    def clean_commands(self, purge_lists: bool) -> list[Command]:
        return [
            Command.external("apt-get", "clean"),
            Command.external("apt-get", "autoclean"),
        ]

    def purge_paths(self) -> list[str]:
        return ["/var/lib/apt/lists"]


class DnfDriver(PackageCacheDriver):
    """DNF (RHEL/Fedora). Only metadata purges clean anything here."""

    @property
    def name(self) -> str:
        return "dnf"

    @property
    def cache_path(self) -> str:
        return "/var/cache/dnf"

    def is_available(self) -> bool:
        return command_exists("dnf")

    def clean_commands(self, purge_lists: bool) -> list[Command]:
        if not purge_lists:
            return []
        return [Command.external("dnf", "clean", "all")]


class PacmanDriver(PackageCacheDriver):
    """Pacman (Arch)."""

    @property
    def name(self) -> str:
        return "pacman"

    @property
    def cache_path(self) -> str:
        return "/var/cache/pacman/pkg"

    def is_available(self) -> bool:
        return command_exists("pacman")

    def clean_commands(self, purge_lists: bool) -> list[Command]:
        if not purge_lists:
            return []
        return [Command.external("pacman", "-Scc", "--noconfirm")]


class SnapDriver(PackageCacheDriver):
    """Snap. Has no clean subcommand; its cache directory is emptied instead."""

    @property
    def name(self) -> str:
        return "snap"

    @property
    def cache_path(self) -> str:
        return "/var/cache/snapd"

    def is_available(self) -> bool:
        return Path("/var/lib/snapd").is_dir()

    def clean_commands(self, purge_lists: bool) -> list[Command]:
        return []

    def clean_paths(self) -> list[str]:
        return ["/var/lib/snapd/cache", "/var/cache/snapd"]


class FlatpakDriver(PackageCacheDriver):
    """Flatpak. Unused runtimes are its cache."""

    @property
    def name(self) -> str:
        return "flatpak"

    @property
    def cache_path(self) -> str:
        return "/var/tmp/flatpak-cache"

    def is_available(self) -> bool:
        return command_exists("flatpak")

    def clean_commands(self, purge_lists: bool) -> list[Command]:
        return [Command.external("flatpak", "uninstall", "--unused", "-y")]


def get_drivers() -> list[PackageCacheDriver]:
    """All known package-cache drivers, in cleanup order."""
    return [AptDriver(), DnfDriver(), PacmanDriver(), SnapDriver(), FlatpakDriver()]


def get_available_drivers() -> list[PackageCacheDriver]:
    """Drivers whose package manager is installed on this host."""
    return [d for d in get_drivers() if d.is_available()]
