"""Tests for the subprocess command runner."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ros_ocp_installer.deployment.shell_commands.runner import CommandRunner

_RUN = "ros_ocp_installer.deployment.shell_commands.runner.subprocess.run"
_POPEN = "ros_ocp_installer.deployment.shell_commands.runner.subprocess.Popen"


class TestCommandRunner:
    """Tests for CommandRunner."""

    @pytest.fixture
    def runner(self, tmp_path: Path) -> CommandRunner:
        return CommandRunner(tmp_path)

    @patch(_RUN)
    def test_run_success(
        self, mock_run: MagicMock, runner: CommandRunner, tmp_path: Path
    ) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            ["helm", "version"], 0, stdout="v3.15.0\n", stderr=""
        )

        result = runner.run(["helm", "version"])

        assert result.success
        assert result.stdout == "v3.15.0\n"
        assert mock_run.call_args[1]["cwd"] == tmp_path

    @patch(_RUN)
    def test_run_failure(self, mock_run: MagicMock, runner: CommandRunner) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            ["helm"], 1, stdout="", stderr="Error: release not found"
        )

        result = runner.run(["helm", "status", "x"])

        assert not result.success
        assert result.returncode == 1
        assert "release not found" in result.stderr

    @patch(_RUN, side_effect=FileNotFoundError)
    def test_missing_executable(self, _run: MagicMock, runner: CommandRunner) -> None:
        result = runner.run(["helm", "version"])

        assert not result.success
        assert result.returncode == 127

    @patch(_RUN, side_effect=subprocess.TimeoutExpired("ss", 15))
    def test_timeout(self, _run: MagicMock, runner: CommandRunner) -> None:
        result = runner.run(["ss", "-tln"], timeout=15)

        assert not result.success
        assert result.returncode == 124

    @patch(_POPEN)
    def test_run_streaming_forwards_lines(
        self, mock_popen: MagicMock, runner: CommandRunner
    ) -> None:
        process = mock_popen.return_value
        process.stdout.readline.side_effect = ["Release installed\n", "\n", "done\n", ""]
        process.returncode = 0
        seen: list[str] = []

        result = runner.run_streaming(["helm", "upgrade"], on_output=seen.append)

        assert result.success
        assert seen == ["Release installed", "done"]
        assert result.stdout == "Release installed\ndone"

    @patch(_POPEN)
    def test_run_streaming_failure(
        self, mock_popen: MagicMock, runner: CommandRunner
    ) -> None:
        process = mock_popen.return_value
        process.stdout.readline.side_effect = ["Error: timed out\n", ""]
        process.returncode = 1

        result = runner.run_streaming(["helm", "upgrade"])

        assert not result.success
        assert result.returncode == 1
