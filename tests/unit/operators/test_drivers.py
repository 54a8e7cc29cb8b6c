"""Unit tests for package-cache drivers, services and the container engine."""

from unittest.mock import MagicMock, patch

import pytest
from syscleaner.operators.base import PackageCacheDriver
from syscleaner.operators.container import DockerEngine
from syscleaner.operators.packages import (
    AptDriver,
    DnfDriver,
    FlatpakDriver,
    PacmanDriver,
    SnapDriver,
    get_available_drivers,
    get_drivers,
)
from syscleaner.operators.services import LOGGING_UNITS, ServiceSupervisor
from syscleaner.utils.shell import CommandResult


def _labels(commands: list) -> list[str]:
    return [c.label for c in commands]


class TestPackageCacheDriver:
    """Tests for the PackageCacheDriver base class."""

    def test_cannot_instantiate(self) -> None:
        with pytest.raises(TypeError):
            PackageCacheDriver()  # type: ignore[abstract]

    def test_default_paths_empty(self) -> None:
        """Drivers without extra paths inherit empty lists."""
        driver = AptDriver()

        assert driver.clean_paths() == []


class TestAptDriver:
    """Tests for AptDriver."""

    @patch("syscleaner.operators.packages.command_exists", return_value=True)
    def test_available(self, mock_exists: MagicMock) -> None:
        assert AptDriver().is_available() is True
        mock_exists.assert_called_once_with("apt-get")

    def test_clean_commands(self) -> None:
        assert _labels(AptDriver().clean_commands(purge_lists=False)) == [
            "apt-get clean",
            "apt-get autoclean",
        ]

    def test_purge_paths(self) -> None:
        """Purging removes the downloaded package lists."""
        assert AptDriver().purge_paths() == ["/var/lib/apt/lists"]


class TestMetadataOnlyDrivers:
    """Tests for drivers that only act when purging lists."""

    @pytest.mark.parametrize(
        ("driver", "expected"),
        [
            (DnfDriver(), ["dnf clean all"]),
            (PacmanDriver(), ["pacman -Scc --noconfirm"]),
        ],
    )
    def test_purge_only(self, driver: PackageCacheDriver, expected: list[str]) -> None:
        assert driver.clean_commands(purge_lists=False) == []
        assert _labels(driver.clean_commands(purge_lists=True)) == expected


class TestSnapDriver:
    """Tests for SnapDriver."""

    def test_no_commands(self) -> None:
        assert SnapDriver().clean_commands(purge_lists=True) == []

    def test_clean_paths(self) -> None:
        assert "/var/cache/snapd" in SnapDriver().clean_paths()


class TestFlatpakDriver:
    """Tests for FlatpakDriver."""

    def test_uninstalls_unused(self) -> None:
        assert _labels(FlatpakDriver().clean_commands(purge_lists=False)) == [
            "flatpak uninstall --unused -y"
        ]


class TestDriverRegistry:
    """Tests for get_drivers and get_available_drivers."""

    def test_all_drivers(self) -> None:
        assert [d.name for d in get_drivers()] == ["apt", "dnf", "pacman", "snap", "flatpak"]

    @patch("syscleaner.operators.packages.Path.is_dir", return_value=False)
    @patch("syscleaner.operators.packages.command_exists")
    def test_available_filtered(self, mock_exists: MagicMock, _mock_dir: MagicMock) -> None:
        mock_exists.side_effect = lambda name: name in ("apt-get", "flatpak")

        assert [d.name for d in get_available_drivers()] == ["apt", "flatpak"]


class TestServiceSupervisor:
    """Tests for ServiceSupervisor."""

    @patch("syscleaner.operators.services.command_exists", return_value=False)
    def test_unavailable_without_systemctl(self, _mock: MagicMock) -> None:
        assert ServiceSupervisor().is_available() is False

    def test_journal_commands(self) -> None:
        assert _labels(ServiceSupervisor().journal_commands()) == [
            "journalctl --rotate",
            "journalctl --vacuum-time=1s",
            "journalctl --vacuum-size=1M",
        ]

    @patch("syscleaner.operators.services.run_command")
    def test_restart_only_installed_units(self, mock_run: MagicMock) -> None:
        """Units that are not installed are not restarted."""

        def fake_run(args: list[str], **_kwargs: object) -> CommandResult:
            installed = args[2] in ("systemd-journald.service", "rsyslog.service")
            return CommandResult(tuple(args), "", "", 0 if installed else 1)

        mock_run.side_effect = fake_run

        assert _labels(ServiceSupervisor().restart_commands()) == [
            "systemctl restart systemd-journald",
            "systemctl restart rsyslog",
        ]
        assert mock_run.call_count == len(LOGGING_UNITS)

    @patch("syscleaner.operators.services.run_command", side_effect=FileNotFoundError)
    def test_is_installed_without_systemctl(self, _mock: MagicMock) -> None:
        assert ServiceSupervisor().is_installed("rsyslog") is False


class TestDockerEngine:
    """Tests for DockerEngine."""

    @patch("syscleaner.operators.container.command_exists", return_value=True)
    def test_available(self, mock_exists: MagicMock) -> None:
        assert DockerEngine().is_available() is True
        mock_exists.assert_called_once_with("docker")

    def test_prune_commands(self) -> None:
        assert _labels(DockerEngine().prune_commands()) == [
            "docker system prune -af --volumes",
            "docker builder prune -af",
        ]
