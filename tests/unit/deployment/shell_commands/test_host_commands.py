"""Tests for local host inspection."""

from unittest.mock import MagicMock, patch

import pytest

from ros_ocp_installer.deployment.shell_commands.container import (
    ContainerRuntimeCommands,
)
from ros_ocp_installer.deployment.shell_commands.host import HostCommands
from ros_ocp_installer.deployment.shell_commands.types import CommandResult

_SS_OUTPUT = """State  Recv-Q Send-Q Local Address:Port Peer Address:Port
LISTEN 0      4096   0.0.0.0:32061      0.0.0.0:*
LISTEN 0      4096   0.0.0.0:320610     0.0.0.0:*
LISTEN 0      128    127.0.0.1:22       0.0.0.0:*
"""


class TestHostCommands:
    """Tests for HostCommands."""

    @pytest.fixture
    def mock_runner(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def host(self, mock_runner: MagicMock) -> HostCommands:
        return HostCommands(mock_runner)

    @patch("ros_ocp_installer.deployment.shell_commands.host.shutil.which")
    def test_tool_available(self, mock_which: MagicMock, host: HostCommands) -> None:
        mock_which.side_effect = lambda tool: "/usr/bin/helm" if tool == "helm" else None

        assert host.tool_available("helm") is True
        assert host.tool_available("kubectl") is False

    @patch("ros_ocp_installer.deployment.shell_commands.host.platform.system")
    def test_is_macos(self, mock_system: MagicMock, host: HostCommands) -> None:
        mock_system.return_value = "Darwin"
        assert host.is_macos() is True
        mock_system.return_value = "Linux"
        assert host.is_macos() is False

    @patch.object(HostCommands, "tool_available", return_value=True)
    def test_listening_sockets_filters_exact_port(
        self, _available: MagicMock, host: HostCommands, mock_runner: MagicMock
    ) -> None:
        mock_runner.run.return_value = CommandResult(success=True, stdout=_SS_OUTPUT)

        result = host.listening_sockets(32061)

        assert result.success
        assert result.stdout.count("\n") == 0
        assert ":32061 " in result.stdout
        assert mock_runner.run.call_args[0][0] == ["ss", "-tln"]

    def test_listening_sockets_falls_back_to_netstat(
        self, host: HostCommands, mock_runner: MagicMock
    ) -> None:
        mock_runner.run.return_value = CommandResult(success=True, stdout=_SS_OUTPUT)

        with patch.object(
            HostCommands, "tool_available", side_effect=lambda tool: tool == "netstat"
        ):
            result = host.listening_sockets(32061)

        assert result.success
        assert mock_runner.run.call_args[0][0] == ["netstat", "-tln"]

    def test_listening_sockets_without_tools(
        self, host: HostCommands, mock_runner: MagicMock
    ) -> None:
        with patch.object(HostCommands, "tool_available", return_value=False):
            result = host.listening_sockets(32061)

        assert not result.success
        assert result.returncode == 127
        mock_runner.run.assert_not_called()

    def test_nothing_listening(
        self, host: HostCommands, mock_runner: MagicMock
    ) -> None:
        mock_runner.run.return_value = CommandResult(success=True, stdout="State\n")

        with patch.object(HostCommands, "tool_available", return_value=True):
            result = host.listening_sockets(32061)

        assert not result.success


class TestContainerRuntimeCommands:
    """Tests for ContainerRuntimeCommands."""

    def test_port_mappings_uses_configured_runtime(self) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult(
            success=True, stdout="80/tcp -> 0.0.0.0:32061"
        )

        result = ContainerRuntimeCommands(runner).port_mappings(
            "docker", "kind-control-plane"
        )

        assert result.success
        assert runner.run.call_args[0][0] == ["docker", "port", "kind-control-plane"]
