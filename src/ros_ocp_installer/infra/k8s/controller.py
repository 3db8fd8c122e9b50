"""Abstract Kubernetes controller interface.

Defines the cluster operations the installer needs. The concrete backend is
kr8s for typed resources, with kubectl for the few operations that have no
clean API equivalent (waiting, exec, logs and human-readable tables).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@dataclass
class PodInfo:
    """Information about a Kubernetes pod."""

    name: str
    namespace: str
    status: str
    ready: bool = False
    images: list[str] = field(default_factory=list)
    restarts: int = 0
    ip: str = ""
    node: str = ""


@dataclass
class ServiceInfo:
    """Information about a Kubernetes Service."""

    name: str
    namespace: str
    type: str = ""
    cluster_ip: str = ""
    ports: str = ""


@dataclass
class RouteInfo:
    """An OpenShift Route."""

    name: str
    namespace: str
    host: str = ""
    path: str = ""


@dataclass
class KafkaClusterInfo:
    """A Strimzi ``Kafka`` custom resource."""

    name: str
    namespace: str
    ready: bool = False
    version: str = ""


@dataclass
class KeycloakInstanceInfo:
    """A Keycloak operator ``Keycloak`` custom resource."""

    name: str
    namespace: str
    hostname: str = ""
    api_version: str = ""


@dataclass
class PersistentVolumeInfo:
    """A PersistentVolume and the namespace of the claim bound to it."""

    name: str
    claim_namespace: str = ""
    claim_name: str = ""


# =============================================================================
# Abstract Controller
# =============================================================================


class KubernetesController(ABC):
    """Abstract base class for Kubernetes operations.

    All methods are async. Use ``run_sync()`` to call them from the
    synchronous CLI code.

    Failures of mutating operations are reported as ``CommandResult`` with
    ``success=False``; query methods return empty values when the resource
    does not exist.
    """

    # =========================================================================
    # Cluster
    # =========================================================================

    @abstractmethod
    async def get_current_context(self) -> str:
        """Return the active kubeconfig context, or "" when none is set."""
        ...

    @abstractmethod
    async def cluster_reachable(self) -> bool:
        """Return True if the API server answers a node listing."""
        ...

    @abstractmethod
    async def routes_api_available(self, namespace: str) -> bool:
        """Return True if the OpenShift Route API answers a list query."""
        ...

    # =========================================================================
    # Namespaces
    # =========================================================================

    @abstractmethod
    async def namespace_exists(self, namespace: str) -> bool: ...

    @abstractmethod
    async def create_namespace(self, namespace: str) -> CommandResult: ...

    @abstractmethod
    async def label_namespace(
        self, namespace: str, labels: dict[str, str]
    ) -> CommandResult:
        """Apply labels to a namespace, overwriting existing values."""
        ...

    @abstractmethod
    async def delete_namespace(self, namespace: str) -> CommandResult:
        """Request namespace deletion without waiting for it to finish."""
        ...

    # =========================================================================
    # Secrets
    # =========================================================================

    @abstractmethod
    async def secret_exists(self, name: str, namespace: str) -> bool: ...

    @abstractmethod
    async def get_secret_data(
        self, name: str, namespace: str
    ) -> dict[str, str] | None:
        """Return the base64-encoded ``data`` map, or None if absent."""
        ...

    @abstractmethod
    async def create_secret(
        self, name: str, namespace: str, string_data: dict[str, str]
    ) -> CommandResult:
        """Create an Opaque secret from plain-text values."""
        ...

    # =========================================================================
    # Pods
    # =========================================================================

    @abstractmethod
    async def get_pods(
        self, namespace: str | None, label_selector: str | None = None
    ) -> list[PodInfo]:
        """List pods; ``namespace=None`` searches all namespaces."""
        ...

    @abstractmethod
    async def wait_for_pods(
        self,
        namespace: str,
        label_selector: str,
        *,
        timeout: str = "300s",
        field_selector: str | None = None,
    ) -> CommandResult:
        """Block until matching pods report the Ready condition."""
        ...

    @abstractmethod
    async def get_pod_logs(
        self,
        pod: str,
        namespace: str,
        *,
        tail: int | None = None,
        since: str | None = None,
    ) -> CommandResult: ...

    @abstractmethod
    async def exec_in_pod(
        self, pod: str, namespace: str, command: list[str]
    ) -> CommandResult: ...

    # =========================================================================
    # Services and Networking
    # =========================================================================

    @abstractmethod
    async def get_services(
        self, namespace: str, label_selector: str | None = None
    ) -> list[ServiceInfo]: ...

    @abstractmethod
    async def get_endpoint_addresses(self, name: str, namespace: str) -> list[str]:
        """Return the ready IP addresses behind a service's endpoints."""
        ...

    @abstractmethod
    async def get_routes(self, namespace: str) -> list[RouteInfo]: ...

    @abstractmethod
    async def get_resource_text(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        output: str | None = None,
        all_namespaces: bool = False,
    ) -> CommandResult:
        """Render ``kubectl get`` output for display."""
        ...

    # =========================================================================
    # Storage
    # =========================================================================

    @abstractmethod
    async def get_pvcs(self, namespace: str) -> list[str]: ...

    @abstractmethod
    async def delete_pvc(self, name: str, namespace: str) -> CommandResult: ...

    @abstractmethod
    async def get_persistent_volumes(self) -> list[PersistentVolumeInfo]: ...

    @abstractmethod
    async def delete_persistent_volume(self, name: str) -> CommandResult: ...

    # =========================================================================
    # Operator Custom Resources
    # =========================================================================

    @abstractmethod
    async def get_kafka_clusters(self, namespace: str) -> list[KafkaClusterInfo]: ...

    @abstractmethod
    async def get_keycloak_instances(self) -> list[KeycloakInstanceInfo]:
        """List Keycloak custom resources across all namespaces."""
        ...
