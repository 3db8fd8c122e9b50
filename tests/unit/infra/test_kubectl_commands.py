"""Tests for the synchronous kubectl facade over the async controller."""

from unittest.mock import AsyncMock

import pytest

from ros_ocp_installer.deployment.shell_commands.kubectl import KubectlCommands
from ros_ocp_installer.infra.k8s.controller import CommandResult, PodInfo


class TestKubectlCommands:
    """Tests for KubectlCommands delegation."""

    @pytest.fixture
    def controller(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def kubectl(self, controller: AsyncMock) -> KubectlCommands:
        return KubectlCommands(controller)

    def test_namespace_exists_returns_controller_value(
        self, kubectl: KubectlCommands, controller: AsyncMock
    ) -> None:
        controller.namespace_exists.return_value = True

        assert kubectl.namespace_exists("ros-ocp") is True
        controller.namespace_exists.assert_awaited_once_with("ros-ocp")

    def test_get_pods_passes_selector(
        self, kubectl: KubectlCommands, controller: AsyncMock
    ) -> None:
        controller.get_pods.return_value = [
            PodInfo(name="strimzi-0", namespace="kafka", status="Running")
        ]

        pods = kubectl.get_pods(None, "name=strimzi-cluster-operator")

        assert pods[0].name == "strimzi-0"
        controller.get_pods.assert_awaited_once_with(
            None, "name=strimzi-cluster-operator"
        )

    def test_wait_for_pods_forwards_keywords(
        self, kubectl: KubectlCommands, controller: AsyncMock
    ) -> None:
        controller.wait_for_pods.return_value = CommandResult(success=True)

        kubectl.wait_for_pods(
            "ros-ocp",
            "app.kubernetes.io/instance=ros-ocp",
            timeout="900s",
            field_selector="status.phase!=Succeeded",
        )

        controller.wait_for_pods.assert_awaited_once_with(
            "ros-ocp",
            "app.kubernetes.io/instance=ros-ocp",
            timeout="900s",
            field_selector="status.phase!=Succeeded",
        )

    def test_create_secret_passes_string_data(
        self, kubectl: KubectlCommands, controller: AsyncMock
    ) -> None:
        controller.create_secret.return_value = CommandResult(success=True)

        result = kubectl.create_secret("s", "ns", {"access-key": "a"})

        assert result.success
        controller.create_secret.assert_awaited_once_with("s", "ns", {"access-key": "a"})
