"""Unit tests for subprocess helpers."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from syscleaner.utils.shell import (
    DEFAULT_TIMEOUT,
    CommandResult,
    command_exists,
    run_command,
    tool_env,
)


class TestRunCommand:
    """Tests for run_command function."""

    @patch("syscleaner.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured output and never raises on exit status."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["apt-get", "clean"])

        assert result == CommandResult(("apt-get", "clean"), "out", "err", 3)
        assert result.success is False
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False
        assert kwargs["timeout"] == DEFAULT_TIMEOUT
        assert kwargs["stdin"] == subprocess.DEVNULL

    @patch("syscleaner.utils.shell.subprocess.run")
    def test_forces_c_locale(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["journalctl", "--rotate"])

        env = mock_run.call_args.kwargs["env"]
        assert env["LC_ALL"] == "C"
        assert env["DEBIAN_FRONTEND"] == "noninteractive"

    @patch("syscleaner.utils.shell.subprocess.run")
    def test_passes_timeout_and_cwd(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["ls"], timeout=10.0, cwd="/tmp")

        assert mock_run.call_args.kwargs["timeout"] == 10.0
        assert mock_run.call_args.kwargs["cwd"] == "/tmp"

    @patch(
        "syscleaner.utils.shell.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="sleep", timeout=1),
    )
    def test_timeout_propagates(self, _mock_run: MagicMock) -> None:
        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["sleep", "10"], timeout=1)

    @patch("syscleaner.utils.shell.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_executable_propagates(self, _mock_run: MagicMock) -> None:
        with pytest.raises(FileNotFoundError):
            run_command(["no-such-tool"])


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        assert CommandResult(("true",), "", "", 0).success is True

    def test_error_line(self) -> None:
        """The last non-empty stderr line is the reported reason."""
        result = CommandResult(("apt-get",), "", "W: first\nE: Could not get lock\n\n", 100)

        assert result.error_line == "E: Could not get lock"

    def test_no_error_line(self) -> None:
        assert CommandResult(("true",), "", "  \n", 1).error_line is None


class TestToolEnv:
    """Tests for tool_env function."""

    def test_keeps_path(self) -> None:
        with patch.dict("os.environ", {"PATH": "/usr/bin", "LC_ALL": "de_DE.UTF-8"}):
            env = tool_env()

        assert env["PATH"] == "/usr/bin"
        assert env["LC_ALL"] == "C"


class TestCommandExists:
    """Tests for command_exists function."""

    @patch("syscleaner.utils.shell.shutil.which", return_value="/usr/bin/apt-get")
    def test_found(self, _mock_which: MagicMock) -> None:
        assert command_exists("apt-get") is True

    @patch("syscleaner.utils.shell.shutil.which", return_value=None)
    def test_missing(self, _mock_which: MagicMock) -> None:
        assert command_exists("apt-get") is False
