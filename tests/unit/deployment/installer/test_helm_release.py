"""Tests for Helm argument parsing and release deployment."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ros_ocp_installer.config import InstallerSettings
from ros_ocp_installer.deployment.installer.dependencies import (
    KafkaReference,
    KafkaSource,
)
from ros_ocp_installer.deployment.installer.errors import DeploymentError
from ros_ocp_installer.deployment.installer.helm_release import (
    HelmReleaseManager,
    parse_helm_args,
)
from ros_ocp_installer.deployment.installer.platform import Platform, RunContext
from ros_ocp_installer.deployment.shell_commands.helm import HelmCommands
from ros_ocp_installer.deployment.shell_commands.types import CommandResult


class TestParseHelmArgs:
    """Tests for parse_helm_args."""

    def test_space_separated_values(self) -> None:
        parsed = parse_helm_args(["--set", "a=1", "--set-string", "b=two"])

        assert parsed.forwarded == ["--set", "a=1", "--set-string", "b=two"]
        assert parsed.ignored == []

    def test_equals_form(self) -> None:
        parsed = parse_helm_args(["--set=a=1", "--set-json=c={}"])

        assert parsed.forwarded == ["--set=a=1", "--set-json=c={}"]

    def test_unknown_flags_and_positionals_are_ignored(self) -> None:
        parsed = parse_helm_args(["--debug", "extra", "--set", "a=1"])

        assert parsed.forwarded == ["--set", "a=1"]
        assert parsed.ignored == ["--debug", "extra"]

    def test_trailing_value_flag_is_ignored(self) -> None:
        parsed = parse_helm_args(["--set", "a=1", "--set"])

        assert parsed.forwarded == ["--set", "a=1"]
        assert parsed.ignored == ["--set"]

    def test_value_beginning_with_dashes_is_kept(self) -> None:
        parsed = parse_helm_args(["--set-file", "--weird-name"])

        assert parsed.forwarded == ["--set-file", "--weird-name"]


class TestHelmReleaseManager:
    """Tests for HelmReleaseManager."""

    @pytest.fixture
    def manager(
        self, commands: MagicMock, console: MagicMock, settings: InstallerSettings
    ) -> HelmReleaseManager:
        commands.helm.build_upgrade_install_command.side_effect = (
            HelmCommands.build_upgrade_install_command
        )
        return HelmReleaseManager(commands, console, settings)

    def test_kafka_override_precedes_user_flags(
        self, manager: HelmReleaseManager, kubernetes_context: RunContext
    ) -> None:
        kafka = KafkaReference("foo-bootstrap.bar:9092", KafkaSource.OVERRIDE)

        cmd = manager.build_command(
            Path("chart"), kubernetes_context, kafka, ["--set", "x=1"]
        )

        assert "kafka.bootstrapServers=foo-bootstrap.bar:9092" in cmd
        kafka_index = cmd.index("kafka.bootstrapServers=foo-bootstrap.bar:9092")
        assert cmd.index("x=1") > kafka_index
        assert cmd[-2:] == ["--set", "x=1"]

    def test_openshift_fallback_overrides_are_set(
        self, manager: HelmReleaseManager
    ) -> None:
        run_context = RunContext(
            platform=Platform.OPENSHIFT,
            platform_overrides=("ingress.auth.enabled=false",),
        )

        cmd = manager.build_command(Path("chart"), run_context)

        assert cmd[cmd.index("ingress.auth.enabled=false") - 1] == "--set"
        assert "-f" not in cmd

    def test_values_file_is_passed(
        self, manager: HelmReleaseManager, tmp_path: Path
    ) -> None:
        values = tmp_path / "values.yaml"
        values.write_text("global: {}\n")
        run_context = RunContext(platform=Platform.KUBERNETES, values_file=values)

        cmd = manager.build_command(Path("chart"), run_context)

        assert cmd[cmd.index("-f") + 1] == str(values)

    def test_missing_values_file_fails(
        self, manager: HelmReleaseManager, tmp_path: Path
    ) -> None:
        run_context = RunContext(
            platform=Platform.KUBERNETES, values_file=tmp_path / "missing.yaml"
        )

        with pytest.raises(DeploymentError, match="Values file not found"):
            manager.build_command(Path("chart"), run_context)

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("global: [unclosed\n", "not valid YAML"),
            ("- a\n- b\n", "YAML mapping"),
        ],
    )
    def test_malformed_values_file_fails(
        self, manager: HelmReleaseManager, tmp_path: Path, content: str, message: str
    ) -> None:
        values = tmp_path / "values.yaml"
        values.write_text(content)
        run_context = RunContext(platform=Platform.KUBERNETES, values_file=values)

        with pytest.raises(DeploymentError, match=message):
            manager.build_command(Path("chart"), run_context)

    def test_empty_values_file_is_accepted(
        self, manager: HelmReleaseManager, tmp_path: Path
    ) -> None:
        values = tmp_path / "values.yaml"
        values.write_text("# all defaults\n")
        run_context = RunContext(platform=Platform.KUBERNETES, values_file=values)

        assert "-f" in manager.build_command(Path("chart"), run_context)

    def test_deploy_streams_output(
        self,
        manager: HelmReleaseManager,
        commands: MagicMock,
        console: MagicMock,
        kubernetes_context: RunContext,
    ) -> None:
        commands.helm.run_command.return_value = CommandResult(success=True)

        manager.deploy(Path("chart"), kubernetes_context)

        kwargs = commands.helm.run_command.call_args[1]
        kwargs["on_output"]("NAME: ros-ocp")
        assert "NAME: ros-ocp" in console.print.call_args[0][0]
        console.ok.assert_called_once()

    def test_deploy_runs_the_built_command(
        self,
        manager: HelmReleaseManager,
        commands: MagicMock,
        kubernetes_context: RunContext,
    ) -> None:
        commands.helm.run_command.return_value = CommandResult(success=True)
        kafka = KafkaReference("foo-bootstrap.bar:9092", KafkaSource.OVERRIDE)
        expected = manager.build_command(
            Path("chart"), kubernetes_context, kafka, ["--set", "x=1"]
        )

        manager.deploy(Path("chart"), kubernetes_context, kafka, ["--set", "x=1"])

        executed = commands.helm.run_command.call_args[0][0]
        assert executed == expected
        assert executed.count("kafka.bootstrapServers=foo-bootstrap.bar:9092") == 1
        assert executed[executed.index("--timeout") + 1] == "600s"

    def test_deploy_failure_raises(
        self,
        manager: HelmReleaseManager,
        commands: MagicMock,
        kubernetes_context: RunContext,
    ) -> None:
        commands.helm.run_command.return_value = CommandResult(
            success=False, returncode=1
        )

        with pytest.raises(DeploymentError, match="Failed to deploy Helm chart"):
            manager.deploy(Path("chart"), kubernetes_context)
