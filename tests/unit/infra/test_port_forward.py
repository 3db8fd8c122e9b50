"""Tests for kubectl port-forward sessions."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from ros_ocp_installer.infra.k8s.port_forward import (
    PortForwardError,
    service_port_forward,
)

_POPEN = "ros_ocp_installer.infra.k8s.port_forward.subprocess.Popen"


class TestServicePortForward:
    """Tests for service_port_forward."""

    @patch(_POPEN)
    def test_yields_local_url_and_terminates(self, mock_popen: MagicMock) -> None:
        process = mock_popen.return_value
        process.poll.return_value = None

        with service_port_forward(
            "ros-ocp-ingress", "ros-ocp", 18080, 8080, sleep=lambda _: None
        ) as url:
            assert url == "http://localhost:18080"

        cmd = mock_popen.call_args[0][0]
        assert cmd == [
            "kubectl",
            "port-forward",
            "-n",
            "ros-ocp",
            "svc/ros-ocp-ingress",
            "18080:8080",
            "--request-timeout=90s",
        ]
        process.terminate.assert_called_once()
        process.wait.assert_called_once_with(timeout=5)

    @patch(_POPEN)
    def test_early_exit_raises(self, mock_popen: MagicMock) -> None:
        process = mock_popen.return_value
        process.poll.return_value = 1
        process.stderr.read.return_value = "service not found"

        with pytest.raises(PortForwardError, match="service not found"):
            with service_port_forward("x", "ns", 1, 2, sleep=lambda _: None):
                pass

        process.terminate.assert_not_called()

    @patch(_POPEN)
    def test_kills_when_terminate_hangs(self, mock_popen: MagicMock) -> None:
        process = mock_popen.return_value
        process.poll.return_value = None
        process.wait.side_effect = [subprocess.TimeoutExpired("kubectl", 5), 0]

        with service_port_forward("x", "ns", 1, 2, sleep=lambda _: None):
            pass

        process.kill.assert_called_once()

    @patch(_POPEN)
    def test_stops_forwarder_when_body_raises(self, mock_popen: MagicMock) -> None:
        process = mock_popen.return_value
        process.poll.return_value = None

        with pytest.raises(RuntimeError):
            with service_port_forward("x", "ns", 1, 2, sleep=lambda _: None):
                raise RuntimeError("probe blew up")

        process.terminate.assert_called_once()

    @patch(_POPEN, side_effect=FileNotFoundError)
    def test_missing_kubectl(self, _popen: MagicMock) -> None:
        with pytest.raises(PortForwardError, match="kubectl not found"):
            with service_port_forward("x", "ns", 1, 2, sleep=lambda _: None):
                pass
