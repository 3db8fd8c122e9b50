"""Tests for Kafka discovery and bootstrap resolution."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ros_ocp_installer.config import InstallerSettings
from ros_ocp_installer.deployment.installer.constants import InstallerPaths
from ros_ocp_installer.deployment.installer.dependencies import (
    KafkaSource,
    KafkaVerifier,
    kafka_version_supported,
    strimzi_version_supported,
)
from ros_ocp_installer.deployment.installer.errors import DeploymentError
from ros_ocp_installer.infra.k8s.controller import KafkaClusterInfo, PodInfo

_OPERATOR = PodInfo(
    name="strimzi-cluster-operator-abc",
    namespace="kafka",
    status="Running",
    ready=True,
    images=["quay.io/strimzi/operator:0.45.0"],
)
_CLUSTER = KafkaClusterInfo(
    name="ros-ocp-kafka", namespace="kafka", ready=True, version="3.8.0"
)


def _verifier(
    commands: MagicMock,
    console: MagicMock,
    settings: InstallerSettings,
    working_dir: Path,
) -> KafkaVerifier:
    paths = InstallerPaths(working_dir, settings)
    return KafkaVerifier(commands, console, settings, paths)


class TestVersionPredicates:
    """Tests for the supported-version checks."""

    @pytest.mark.parametrize(
        ("image", "supported"),
        [
            ("quay.io/strimzi/operator:0.45.0", True),
            ("quay.io/strimzi/operator:0.43.1", True),
            ("quay.io/strimzi/operator:0.46.0", False),
            ("quay.io/strimzi/operator:latest", False),
        ],
    )
    def test_strimzi(self, image: str, supported: bool) -> None:
        assert strimzi_version_supported(image) is supported

    def test_kafka(self) -> None:
        assert kafka_version_supported("3.8.0")
        assert not kafka_version_supported("3.7.0")


class TestKafkaVerifier:
    """Tests for KafkaVerifier."""

    def test_override_skips_cluster_queries(
        self,
        commands: MagicMock,
        console: MagicMock,
        make_settings: Callable[..., InstallerSettings],
        tmp_path: Path,
    ) -> None:
        settings = make_settings(kafka_bootstrap_servers="foo-bootstrap.bar:9092")

        kafka = _verifier(commands, console, settings, tmp_path).verify()

        assert kafka.bootstrap_servers == "foo-bootstrap.bar:9092"
        assert kafka.source is KafkaSource.OVERRIDE
        assert kafka.helm_override == "kafka.bootstrapServers=foo-bootstrap.bar:9092"
        commands.kubectl.get_pods.assert_not_called()
        commands.kubectl.get_kafka_clusters.assert_not_called()

    def test_missing_operator_fails(
        self,
        commands: MagicMock,
        console: MagicMock,
        settings: InstallerSettings,
        tmp_path: Path,
    ) -> None:
        commands.kubectl.get_pods.return_value = []

        with pytest.raises(DeploymentError) as exc_info:
            _verifier(commands, console, settings, tmp_path).verify()

        assert "Strimzi operator not found" in exc_info.value.message
        assert "KAFKA_BOOTSTRAP_SERVERS" in exc_info.value.details
        commands.kubectl.get_pods.assert_called_once_with(
            None, "name=strimzi-cluster-operator"
        )

    def test_missing_cluster_fails(
        self,
        commands: MagicMock,
        console: MagicMock,
        settings: InstallerSettings,
        tmp_path: Path,
    ) -> None:
        commands.kubectl.get_pods.return_value = [_OPERATOR]
        commands.kubectl.get_kafka_clusters.return_value = []

        with pytest.raises(DeploymentError, match="No Kafka cluster found"):
            _verifier(commands, console, settings, tmp_path).verify()

    def test_derives_bootstrap_from_cluster(
        self,
        commands: MagicMock,
        console: MagicMock,
        settings: InstallerSettings,
        tmp_path: Path,
    ) -> None:
        commands.kubectl.get_pods.return_value = [_OPERATOR]
        commands.kubectl.get_kafka_clusters.return_value = [_CLUSTER]

        kafka = _verifier(commands, console, settings, tmp_path).verify()

        assert kafka.source is KafkaSource.DERIVED
        assert (
            kafka.bootstrap_servers
            == "ros-ocp-kafka-kafka-bootstrap.kafka.svc.cluster.local:9092"
        )
        commands.kubectl.get_kafka_clusters.assert_called_once_with("kafka")
        console.warn.assert_not_called()

    def test_handoff_file_wins_over_derivation(
        self,
        commands: MagicMock,
        console: MagicMock,
        settings: InstallerSettings,
        tmp_path: Path,
    ) -> None:
        commands.kubectl.get_pods.return_value = [_OPERATOR]
        commands.kubectl.get_kafka_clusters.return_value = [_CLUSTER]
        settings.kafka_bootstrap_env_file.write_text(
            "KAFKA_BOOTSTRAP_SERVERS=handoff-bootstrap.kafka:9092\n"
        )

        kafka = _verifier(commands, console, settings, tmp_path).verify()

        assert kafka.source is KafkaSource.HANDOFF_FILE
        assert kafka.bootstrap_servers == "handoff-bootstrap.kafka:9092"

    def test_operator_search_spans_all_namespaces_by_default(
        self,
        commands: MagicMock,
        console: MagicMock,
        settings: InstallerSettings,
        tmp_path: Path,
    ) -> None:
        commands.kubectl.get_pods.return_value = [_OPERATOR]
        commands.kubectl.get_kafka_clusters.return_value = [_CLUSTER]

        _verifier(commands, console, settings, tmp_path).verify()

        commands.kubectl.get_pods.assert_called_once_with(
            None, "name=strimzi-cluster-operator"
        )

    def test_namespaces_from_settings(
        self,
        commands: MagicMock,
        console: MagicMock,
        make_settings: Callable[..., InstallerSettings],
        tmp_path: Path,
    ) -> None:
        settings = make_settings(strimzi_namespace="strimzi", kafka_namespace="data")
        commands.kubectl.get_pods.return_value = [_OPERATOR]
        commands.kubectl.get_kafka_clusters.return_value = [_CLUSTER]

        _verifier(commands, console, settings, tmp_path).verify()

        commands.kubectl.get_pods.assert_called_once_with(
            "strimzi", "name=strimzi-cluster-operator"
        )
        commands.kubectl.get_kafka_clusters.assert_called_once_with("data")

    def test_unsupported_versions_only_warn(
        self,
        commands: MagicMock,
        console: MagicMock,
        settings: InstallerSettings,
        tmp_path: Path,
    ) -> None:
        commands.kubectl.get_pods.return_value = [
            PodInfo(
                name="op",
                namespace="kafka",
                status="Running",
                images=["quay.io/strimzi/operator:0.40.0"],
            )
        ]
        commands.kubectl.get_kafka_clusters.return_value = [
            KafkaClusterInfo(name="k", namespace="kafka", ready=False, version="3.6.0")
        ]

        kafka = _verifier(commands, console, settings, tmp_path).verify()

        assert kafka.source is KafkaSource.DERIVED
        assert console.warn.call_count == 3
