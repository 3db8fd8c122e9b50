"""Shared fixtures for the installer test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from ros_ocp_installer.config import InstallerSettings
from ros_ocp_installer.deployment.installer.constants import InstallerPaths
from ros_ocp_installer.deployment.installer.platform import Platform, RunContext

_ENV_VARS = (
    "HELM_RELEASE_NAME",
    "NAMESPACE",
    "VALUES_FILE",
    "USE_LOCAL_CHART",
    "LOCAL_CHART_PATH",
    "STRIMZI_NAMESPACE",
    "KAFKA_NAMESPACE",
    "KAFKA_BOOTSTRAP_SERVERS",
    "KAFKA_BOOTSTRAP_ENV_FILE",
    "HELM_TIMEOUT",
    "CONTAINER_RUNTIME",
    "KIND_CLUSTER_NAME",
    "OPENSHIFT_VALUES_FILE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and any .env file out of the tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def console() -> MagicMock:
    return MagicMock()


@pytest.fixture
def commands() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., InstallerSettings]:
    """Build settings with test defaults; keyword arguments override."""

    def _make(**overrides: Any) -> InstallerSettings:
        values: dict[str, Any] = {
            "helm_release_name": "ros-ocp",
            "namespace": "ros-ocp",
            "kafka_bootstrap_env_file": tmp_path / "kafka-bootstrap-servers.env",
        }
        values.update(overrides)
        return InstallerSettings(**values)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., InstallerSettings]) -> InstallerSettings:
    return make_settings()


@pytest.fixture
def paths(tmp_path: Path, settings: InstallerSettings) -> InstallerPaths:
    return InstallerPaths(tmp_path, settings)


@pytest.fixture
def kubernetes_context() -> RunContext:
    return RunContext(platform=Platform.KUBERNETES)


@pytest.fixture
def openshift_context() -> RunContext:
    return RunContext(platform=Platform.OPENSHIFT, jwt_auth_enabled=True)
