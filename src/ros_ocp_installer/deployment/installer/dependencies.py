"""Verification of the externally managed Kafka and Keycloak dependencies.

Neither dependency is installed by this tool. Kafka is mandatory and its
absence stops the install; Keycloak only affects JWT authentication and is
reported, never enforced.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from dotenv import dotenv_values
from loguru import logger

from ros_ocp_installer.config import InstallerSettings
from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants, InstallerPaths
from .errors import DeploymentError

if TYPE_CHECKING:
    from ros_ocp_installer.infra.k8s.controller import KafkaClusterInfo, PodInfo

    from ..shell_commands import ShellCommands


# =============================================================================
# Kafka
# =============================================================================


class KafkaSource(StrEnum):
    """Where the bootstrap address came from."""

    OVERRIDE = "override"
    HANDOFF_FILE = "handoff-file"
    DERIVED = "derived"


@dataclass(frozen=True)
class KafkaReference:
    """Resolved Kafka connection details."""

    bootstrap_servers: str
    source: KafkaSource
    cluster_name: str = ""
    namespace: str = ""

    @property
    def helm_override(self) -> str:
        return f"{DEFAULT_CONSTANTS.KAFKA_BOOTSTRAP_HELM_KEY}={self.bootstrap_servers}"


def strimzi_version_supported(
    image: str, constants: InstallerConstants = DEFAULT_CONSTANTS
) -> bool:
    """Check an operator image tag against the supported Strimzi series."""
    return any(f":{series}" in image for series in constants.STRIMZI_SUPPORTED_SERIES)


def kafka_version_supported(
    version: str, constants: InstallerConstants = DEFAULT_CONSTANTS
) -> bool:
    return version == constants.KAFKA_SUPPORTED_VERSION


class KafkaVerifier:
    """Locates the Strimzi operator and Kafka cluster and resolves bootstrap."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
        paths: InstallerPaths,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.settings = settings
        self.paths = paths
        self.constants = constants or DEFAULT_CONSTANTS

    def verify(self) -> KafkaReference:
        """Resolve the Kafka bootstrap address.

        An explicit ``KAFKA_BOOTSTRAP_SERVERS`` wins and skips every cluster
        query. Otherwise the Strimzi operator and a Kafka cluster must exist.

        Raises:
            DeploymentError: If the operator or the Kafka cluster is missing
        """
        self.console.info("Verifying Strimzi operator and Kafka cluster...")

        if self.settings.kafka_bootstrap_servers:
            self.console.info(
                "Using provided Kafka bootstrap servers: "
                f"{self.settings.kafka_bootstrap_servers}"
            )
            return KafkaReference(
                bootstrap_servers=self.settings.kafka_bootstrap_servers,
                source=KafkaSource.OVERRIDE,
            )

        operator = self._find_operator()
        self.console.ok(f"Found Strimzi operator in namespace: {operator.namespace}")
        self._check_operator_version(operator)

        kafka_namespace = self.settings.kafka_namespace or operator.namespace
        cluster = self._find_cluster(kafka_namespace)
        self._check_cluster(cluster)

        handoff = self._read_handoff_file()
        if handoff:
            bootstrap, source = handoff, KafkaSource.HANDOFF_FILE
        else:
            bootstrap = (
                f"{cluster.name}-kafka-bootstrap.{cluster.namespace}"
                f".svc.cluster.local:{self.constants.KAFKA_BOOTSTRAP_PORT}"
            )
            source = KafkaSource.DERIVED

        self.console.ok(f"Kafka bootstrap servers: {bootstrap}")
        return KafkaReference(
            bootstrap_servers=bootstrap,
            source=source,
            cluster_name=cluster.name,
            namespace=cluster.namespace,
        )

    def _find_operator(self) -> PodInfo:
        pods = self.commands.kubectl.get_pods(
            self.settings.strimzi_namespace, self.constants.STRIMZI_OPERATOR_LABEL
        )
        if not pods:
            where = (
                f"namespace '{self.settings.strimzi_namespace}'"
                if self.settings.strimzi_namespace
                else "any namespace"
            )
            raise DeploymentError(
                f"Strimzi operator not found in {where}",
                "Kafka is provided by the Strimzi operator and must be installed "
                "first:\n"
                "  • Run ./deploy-strimzi.sh to install Strimzi and Kafka\n"
                "  • Or point at an existing cluster:\n"
                "      export KAFKA_BOOTSTRAP_SERVERS="
                "my-kafka-bootstrap.my-namespace:9092",
            )
        return pods[0]

    def _check_operator_version(self, operator: PodInfo) -> None:
        image = next(iter(operator.images), "")
        if image and not strimzi_version_supported(image, self.constants):
            series = ", ".join(
                s.rstrip(".") for s in self.constants.STRIMZI_SUPPORTED_SERIES
            )
            self.console.warn(
                f"Strimzi operator image {image} is outside the tested "
                f"versions ({series})"
            )

    def _find_cluster(self, namespace: str) -> KafkaClusterInfo:
        clusters = self.commands.kubectl.get_kafka_clusters(namespace)
        if not clusters:
            raise DeploymentError(
                f"No Kafka cluster found in namespace '{namespace}'",
                "Create a Kafka cluster with the Strimzi operator "
                "(./deploy-strimzi.sh) or set KAFKA_NAMESPACE / "
                "KAFKA_BOOTSTRAP_SERVERS",
            )
        cluster = clusters[0]
        self.console.ok(f"Found Kafka cluster: {cluster.name}")
        return cluster

    def _check_cluster(self, cluster: KafkaClusterInfo) -> None:
        if not cluster.ready:
            self.console.warn(f"Kafka cluster '{cluster.name}' is not ready yet")
        if cluster.version and not kafka_version_supported(
            cluster.version, self.constants
        ):
            self.console.warn(
                f"Kafka version {cluster.version} differs from the tested "
                f"version {self.constants.KAFKA_SUPPORTED_VERSION}"
            )

    def _read_handoff_file(self) -> str | None:
        path = self.paths.kafka_bootstrap_env_file
        if not path.is_file():
            return None
        value = dotenv_values(path).get("KAFKA_BOOTSTRAP_SERVERS")
        logger.debug(f"Kafka handoff file {path}: {value!r}")
        if value:
            self.console.info(f"Using Kafka bootstrap servers from {path}")
        return value or None


# =============================================================================
# Keycloak
# =============================================================================


@dataclass(frozen=True)
class KeycloakReference:
    """Detected Keycloak instance; ``found`` is False when none exists."""

    found: bool
    namespace: str = ""
    url: str = ""
    api_version: str = ""


class KeycloakDetector:
    """Finds a Red Hat Build of Keycloak instance for JWT authentication."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.constants = constants or DEFAULT_CONSTANTS

    def detect(self) -> KeycloakReference:
        """Look for Keycloak by custom resource, then by service label."""
        self.console.info("Detecting Keycloak...")
        kubectl = self.commands.kubectl

        namespace = ""
        url = ""
        api_version = ""

        instances = kubectl.get_keycloak_instances()
        if instances:
            instance = instances[0]
            namespace = instance.namespace
            api_version = instance.api_version
            if instance.hostname:
                url = self._https(instance.hostname)
        else:
            label = self.constants.KEYCLOAK_SERVICE_LABEL
            for candidate in self.constants.KEYCLOAK_CANDIDATE_NAMESPACES:
                if kubectl.get_services(candidate, label):
                    namespace = candidate
                    break

        if not namespace:
            self.console.warn("Keycloak not found; JWT authentication will be disabled")
            self.console.info("To enable it, deploy Keycloak first: ./deploy-rhbk.sh")
            return KeycloakReference(found=False)

        if not url:
            url = self._url_from_routes(namespace)

        self.console.ok(f"Found Keycloak in namespace: {namespace}")
        if url:
            self.console.info(f"Keycloak URL: {url}")
        else:
            self.console.info("Keycloak URL will be auto-detected by the chart")

        self._check_client_secret(namespace)
        return KeycloakReference(
            found=True, namespace=namespace, url=url, api_version=api_version
        )

    def _url_from_routes(self, namespace: str) -> str:
        routes = self.commands.kubectl.get_routes(namespace)
        preferred = [r for r in routes if r.name == self.constants.KEYCLOAK_ROUTE_NAME]
        fallback = [r for r in routes if "keycloak" in r.name]
        for route in preferred + fallback:
            if route.host:
                return self._https(route.host)
        return ""

    def _check_client_secret(self, namespace: str) -> None:
        name = self.constants.KEYCLOAK_CLIENT_SECRET
        if self.commands.kubectl.secret_exists(name, namespace):
            self.console.ok(f"Keycloak client secret '{name}' found")
        else:
            self.console.warn(
                f"Keycloak client secret '{name}' not found in namespace "
                f"'{namespace}'; the cost management operator will not be able "
                "to authenticate"
            )

    @staticmethod
    def _https(host: str) -> str:
        return host if host.startswith("https://") else f"https://{host}"
