"""Tests for Helm command construction and release queries."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ros_ocp_installer.deployment.shell_commands.helm import HelmCommands
from ros_ocp_installer.deployment.shell_commands.types import CommandResult


class TestHelmCommands:
    """Tests for HelmCommands."""

    @pytest.fixture
    def mock_runner(self) -> MagicMock:
        """Create a mock command runner."""
        return MagicMock()

    @pytest.fixture
    def helm(self, mock_runner: MagicMock) -> HelmCommands:
        return HelmCommands(mock_runner)

    def test_build_command_base_arguments(self) -> None:
        cmd = HelmCommands.build_upgrade_install_command(
            "ros-ocp", Path("/charts/ros-ocp"), "ros-ocp", timeout="600s"
        )

        assert cmd == [
            "helm",
            "upgrade",
            "--install",
            "ros-ocp",
            "/charts/ros-ocp",
            "--namespace",
            "ros-ocp",
            "--create-namespace",
            "--timeout",
            "600s",
            "--wait",
        ]

    def test_build_command_orders_values_sets_and_extra_args(self) -> None:
        cmd = HelmCommands.build_upgrade_install_command(
            "ros-ocp",
            "chart.tgz",
            "ros-ocp",
            timeout="600s",
            values_file=Path("values.yaml"),
            set_values=["a=1", "b=2"],
            extra_args=["--set", "user=1"],
        )

        tail = cmd[cmd.index("--wait") + 1 :]
        assert tail == [
            "-f",
            "values.yaml",
            "--set",
            "a=1",
            "--set",
            "b=2",
            "--set",
            "user=1",
        ]

    def test_run_command_streams_when_callback_given(
        self, helm: HelmCommands, mock_runner: MagicMock
    ) -> None:
        mock_runner.run_streaming.return_value = CommandResult(success=True)
        on_output = MagicMock()
        cmd = HelmCommands.build_upgrade_install_command(
            "ros-ocp", "chart", "ns", timeout="600s"
        )

        result = helm.run_command(cmd, on_output=on_output)

        assert result.success
        mock_runner.run_streaming.assert_called_once()
        assert mock_runner.run_streaming.call_args[0][0] == cmd
        assert mock_runner.run_streaming.call_args[1]["on_output"] is on_output
        mock_runner.run.assert_not_called()

    def test_run_command_captures_without_callback(
        self, helm: HelmCommands, mock_runner: MagicMock
    ) -> None:
        mock_runner.run.return_value = CommandResult(success=False, stderr="boom")

        result = helm.run_command(["helm", "upgrade", "--install", "r", "c"])

        assert not result.success
        cmd = mock_runner.run.call_args[0][0]
        assert cmd[:3] == ["helm", "upgrade", "--install"]
        assert mock_runner.run.call_args[1]["capture_output"] is True

    def test_uninstall(self, helm: HelmCommands, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(success=True)

        helm.uninstall("ros-ocp", "cost")

        cmd = mock_runner.run.call_args[0][0]
        assert cmd == ["helm", "uninstall", "ros-ocp", "-n", "cost"]

    def test_list_releases_parses_json(
        self, helm: HelmCommands, mock_runner: MagicMock
    ) -> None:
        mock_runner.run.return_value = CommandResult(
            success=True,
            stdout='[{"name": "ros-ocp", "namespace": "ros-ocp", '
            '"status": "deployed", "revision": 3}]',
        )

        releases = helm.list_releases("ros-ocp")

        assert len(releases) == 1
        assert releases[0].name == "ros-ocp"
        assert releases[0].status == "deployed"
        assert releases[0].revision == "3"

    @pytest.mark.parametrize(
        "result",
        [
            CommandResult(success=False, stderr="no cluster"),
            CommandResult(success=True, stdout=""),
            CommandResult(success=True, stdout="not json"),
        ],
    )
    def test_list_releases_returns_empty_on_unusable_output(
        self, helm: HelmCommands, mock_runner: MagicMock, result: CommandResult
    ) -> None:
        mock_runner.run.return_value = result

        assert helm.list_releases("ros-ocp") == []

    def test_release_exists(self, helm: HelmCommands, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(
            success=True, stdout='[{"name": "other"}, {"name": "ros-ocp"}]'
        )

        assert helm.release_exists("ros-ocp", "ros-ocp") is True
        assert helm.release_exists("missing", "ros-ocp") is False
