"""Installer constants and path resolution.

This module centralizes the names, labels, ports and timeouts that the
installer relies on. Anything a user may change lives in InstallerSettings;
everything here is fixed by the chart and the surrounding operators.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ros_ocp_installer.config import InstallerSettings


@dataclass(frozen=True)
class InstallerConstants:
    """Constants for the ROS-OCP Helm deployment.

    All attributes are immutable.
    """

    # Chart identity
    CHART_NAME: str = "ros-ocp"
    CHART_REPOSITORY: str = "insights-onprem/ros-helm-chart"
    RELEASE_ASSET_MARKER: str = "latest"
    GITHUB_API_URL: str = "https://api.github.com"

    # Namespace labelling for the Cost Management Metrics Operator
    NAMESPACE_LABELS: tuple[tuple[str, str], ...] = (
        ("cost_management_optimizations", "true"),
    )

    # Object storage credentials
    STORAGE_SECRET_SUFFIX: str = "-storage-credentials"
    ODF_SECRET_NAME: str = "ros-ocp-odf-credentials"
    ODF_ACCESS_KEY_FIELD: str = "access-key"
    ODF_SECRET_KEY_FIELD: str = "secret-key"
    NOOBAA_SECRET_NAME: str = "noobaa-admin"
    NOOBAA_NAMESPACE: str = "openshift-storage"
    NOOBAA_ACCESS_KEY_FIELD: str = "AWS_ACCESS_KEY_ID"
    NOOBAA_SECRET_KEY_FIELD: str = "AWS_SECRET_ACCESS_KEY"
    MINIO_ACCESS_KEY: str = "minioaccesskey"
    MINIO_SECRET_KEY: str = "miniosecretkey"

    # Kafka (Strimzi)
    STRIMZI_OPERATOR_LABEL: str = "name=strimzi-cluster-operator"
    STRIMZI_SUPPORTED_SERIES: tuple[str, ...] = ("0.43.", "0.44.", "0.45.")
    KAFKA_SUPPORTED_VERSION: str = "3.8.0"
    KAFKA_BOOTSTRAP_PORT: int = 9092
    KAFKA_BOOTSTRAP_HELM_KEY: str = "kafka.bootstrapServers"

    # Keycloak (RHBK)
    KEYCLOAK_CANDIDATE_NAMESPACES: tuple[str, ...] = ("keycloak", "keycloak-system")
    KEYCLOAK_SERVICE_LABEL: str = "app=keycloak"
    KEYCLOAK_ROUTE_NAME: str = "keycloak"
    KEYCLOAK_CLIENT_SECRET: str = "keycloak-client-secret-cost-management-operator"

    # OpenShift fallback overrides when no values file is available
    OPENSHIFT_FALLBACK_OVERRIDES: tuple[str, ...] = (
        "global.storageClass=odf-storagecluster-ceph-rbd",
        "ingress.auth.enabled=false",
        "ingress.upload.requireAuth=false",
    )

    # Readiness
    INSTANCE_LABEL_KEY: str = "app.kubernetes.io/instance"
    POD_READY_TIMEOUT: str = "900s"
    POD_FIELD_SELECTOR: str = "status.phase!=Succeeded"

    # Ingress controller (KIND)
    INGRESS_NAMESPACE: str = "ingress-nginx"
    INGRESS_CONTROLLER_LABEL: str = "app.kubernetes.io/name=ingress-nginx"
    INGRESS_CONTROLLER_SERVICE: str = "ingress-nginx-controller"
    INGRESS_POD_READY_TIMEOUT: str = "300s"
    INGRESS_HTTP_PORT: int = 32061
    INGRESS_PROBE_ATTEMPTS: int = 10
    INGRESS_PROBE_INTERVAL: float = 3.0
    INGRESS_LOG_MARKERS: tuple[str, ...] = (
        "Starting NGINX Ingress controller",
        "Configuration changes detected",
    )

    # Health checks
    API_POD_LABEL: str = "app.kubernetes.io/name=rosocp-api"
    API_INTERNAL_STATUS_URL: str = "http://localhost:8000/status"
    INGRESS_FORWARD_PORTS: tuple[int, int] = (18080, 8080)
    KRUIZE_FORWARD_PORTS: tuple[int, int] = (18081, 8080)
    PORT_FORWARD_SETTLE_SECONDS: float = 3.0
    PORT_FORWARD_GRACE_SECONDS: float = 1.0
    PORT_FORWARD_REQUEST_TIMEOUT: str = "90s"
    PROBE_CONNECT_TIMEOUT: float = 60.0
    PROBE_READ_TIMEOUT: float = 90.0

    # Cleanup
    HELM_UNINSTALL_SETTLE_SECONDS: float = 5.0
    PVC_DELETE_TIMEOUT: float = 60.0
    NAMESPACE_DELETE_TIMEOUT: float = 120.0
    DELETE_POLL_INTERVAL: float = 2.0

    # Follow-up test scripts
    TEST_SCRIPT_BASE_URL: str = (
        "https://raw.githubusercontent.com/insights-onprem/ros-ocp-backend/"
        "refs/heads/main/deployment/kubernetes/scripts"
    )

    @property
    def namespace_labels(self) -> dict[str, str]:
        return dict(self.NAMESPACE_LABELS)

    @property
    def latest_release_url(self) -> str:
        """GitHub API URL of the chart repository's latest release."""
        return f"{self.GITHUB_API_URL}/repos/{self.CHART_REPOSITORY}/releases/latest"

    @property
    def ingress_base_url(self) -> str:
        return f"http://localhost:{self.INGRESS_HTTP_PORT}"


class InstallerPaths:
    """Resolves user-supplied file locations against the working directory."""

    def __init__(self, working_dir: Path, settings: InstallerSettings) -> None:
        """Initialize installer paths.

        Args:
            working_dir: Directory relative paths are resolved against
            settings: Active installer settings
        """
        self._working_dir = working_dir
        self._settings = settings

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self._working_dir / path

    @property
    def working_dir(self) -> Path:
        return self._working_dir

    @property
    def values_file(self) -> Path | None:
        """User-supplied values file, if any."""
        if self._settings.values_file is None:
            return None
        return self._resolve(self._settings.values_file)

    @property
    def openshift_values_file(self) -> Path:
        return self._resolve(self._settings.openshift_values_file)

    @property
    def local_chart(self) -> Path:
        return self._resolve(self._settings.local_chart_path)

    @property
    def kafka_bootstrap_env_file(self) -> Path:
        return self._resolve(self._settings.kafka_bootstrap_env_file)


DEFAULT_CONSTANTS = InstallerConstants()
