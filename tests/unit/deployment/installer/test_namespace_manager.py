"""Tests for namespace preparation."""

from unittest.mock import MagicMock

import pytest

from ros_ocp_installer.deployment.installer.errors import DeploymentError
from ros_ocp_installer.deployment.installer.namespace import NamespaceManager
from ros_ocp_installer.deployment.shell_commands.types import CommandResult


class TestNamespaceManager:
    """Tests for NamespaceManager."""

    @pytest.fixture
    def manager(self, commands: MagicMock, console: MagicMock) -> NamespaceManager:
        commands.kubectl.create_namespace.return_value = CommandResult(success=True)
        commands.kubectl.label_namespace.return_value = CommandResult(success=True)
        return NamespaceManager(commands, console)

    def test_creates_and_labels_new_namespace(
        self, manager: NamespaceManager, commands: MagicMock
    ) -> None:
        commands.kubectl.namespace_exists.return_value = False

        manager.ensure("ros-ocp")

        commands.kubectl.create_namespace.assert_called_once_with("ros-ocp")
        commands.kubectl.label_namespace.assert_called_once_with(
            "ros-ocp", {"cost_management_optimizations": "true"}
        )

    def test_existing_namespace_is_relabelled(
        self, manager: NamespaceManager, commands: MagicMock, console: MagicMock
    ) -> None:
        commands.kubectl.namespace_exists.return_value = True

        manager.ensure("ros-ocp")

        commands.kubectl.create_namespace.assert_not_called()
        commands.kubectl.label_namespace.assert_called_once()
        console.warn.assert_called_once()

    def test_create_failure_raises(
        self, manager: NamespaceManager, commands: MagicMock
    ) -> None:
        commands.kubectl.namespace_exists.return_value = False
        commands.kubectl.create_namespace.return_value = CommandResult(
            success=False, stderr="forbidden"
        )

        with pytest.raises(DeploymentError, match="Failed to create namespace"):
            manager.ensure("ros-ocp")

        commands.kubectl.label_namespace.assert_not_called()

    def test_label_failure_only_warns(
        self, manager: NamespaceManager, commands: MagicMock, console: MagicMock
    ) -> None:
        commands.kubectl.namespace_exists.return_value = False
        commands.kubectl.label_namespace.return_value = CommandResult(
            success=False, stderr="forbidden"
        )

        manager.ensure("ros-ocp")

        assert "forbidden" in console.warn.call_args[0][0]
