"""Kubectl command abstractions.

Sync wrapper around the async KubernetesController. Every method delegates to
the controller through run_sync() so the installer pipeline can stay
synchronous.
"""

from __future__ import annotations

from ros_ocp_installer.infra.k8s import get_k8s_controller, run_sync
from ros_ocp_installer.infra.k8s.controller import (
    CommandResult,
    KafkaClusterInfo,
    KeycloakInstanceInfo,
    KubernetesController,
    PersistentVolumeInfo,
    PodInfo,
    RouteInfo,
    ServiceInfo,
)


class KubectlCommands:
    """Kubernetes operations for the installer.

    Provides operations for:
    - Cluster context and connectivity
    - Namespace management
    - Secrets
    - Pods (listing, waiting, logs, exec)
    - Services, endpoints and routes
    - Storage cleanup
    - Strimzi and Keycloak custom resources
    """

    def __init__(self, controller: KubernetesController | None = None) -> None:
        """Initialize kubectl commands.

        Args:
            controller: Async controller to delegate to (defaults to kr8s)
        """
        self._controller = controller or get_k8s_controller()

    # =========================================================================
    # Cluster
    # =========================================================================

    def get_current_context(self) -> str:
        """Get the current kubectl context name ("" when unset)."""
        return run_sync(self._controller.get_current_context())

    def cluster_reachable(self) -> bool:
        return run_sync(self._controller.cluster_reachable())

    def routes_api_available(self, namespace: str) -> bool:
        """Check whether the OpenShift Route API is served."""
        return run_sync(self._controller.routes_api_available(namespace))

    # =========================================================================
    # Namespace Management
    # =========================================================================

    def namespace_exists(self, namespace: str) -> bool:
        return run_sync(self._controller.namespace_exists(namespace))

    def create_namespace(self, namespace: str) -> CommandResult:
        return run_sync(self._controller.create_namespace(namespace))

    def label_namespace(self, namespace: str, labels: dict[str, str]) -> CommandResult:
        return run_sync(self._controller.label_namespace(namespace, labels))

    def delete_namespace(self, namespace: str) -> CommandResult:
        return run_sync(self._controller.delete_namespace(namespace))

    # =========================================================================
    # Secrets
    # =========================================================================

    def secret_exists(self, name: str, namespace: str) -> bool:
        return run_sync(self._controller.secret_exists(name, namespace))

    def get_secret_data(self, name: str, namespace: str) -> dict[str, str] | None:
        """Get the base64-encoded data of a secret, or None if it is absent."""
        return run_sync(self._controller.get_secret_data(name, namespace))

    def create_secret(
        self, name: str, namespace: str, string_data: dict[str, str]
    ) -> CommandResult:
        return run_sync(self._controller.create_secret(name, namespace, string_data))

    # =========================================================================
    # Pods
    # =========================================================================

    def get_pods(
        self, namespace: str | None, label_selector: str | None = None
    ) -> list[PodInfo]:
        """List pods, across all namespaces when namespace is None."""
        return run_sync(self._controller.get_pods(namespace, label_selector))

    def wait_for_pods(
        self,
        namespace: str,
        label_selector: str,
        *,
        timeout: str = "300s",
        field_selector: str | None = None,
    ) -> CommandResult:
        return run_sync(
            self._controller.wait_for_pods(
                namespace,
                label_selector,
                timeout=timeout,
                field_selector=field_selector,
            )
        )

    def get_pod_logs(
        self,
        pod: str,
        namespace: str,
        *,
        tail: int | None = None,
        since: str | None = None,
    ) -> CommandResult:
        return run_sync(
            self._controller.get_pod_logs(pod, namespace, tail=tail, since=since)
        )

    def exec_in_pod(
        self, pod: str, namespace: str, command: list[str]
    ) -> CommandResult:
        return run_sync(self._controller.exec_in_pod(pod, namespace, command))

    # =========================================================================
    # Services and Networking
    # =========================================================================

    def get_services(
        self, namespace: str, label_selector: str | None = None
    ) -> list[ServiceInfo]:
        return run_sync(self._controller.get_services(namespace, label_selector))

    def get_endpoint_addresses(self, name: str, namespace: str) -> list[str]:
        return run_sync(self._controller.get_endpoint_addresses(name, namespace))

    def get_routes(self, namespace: str) -> list[RouteInfo]:
        return run_sync(self._controller.get_routes(namespace))

    def get_resource_text(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        output: str | None = None,
        all_namespaces: bool = False,
    ) -> CommandResult:
        """Render ``kubectl get`` output for display."""
        return run_sync(
            self._controller.get_resource_text(
                resource, namespace, output=output, all_namespaces=all_namespaces
            )
        )

    # =========================================================================
    # Storage
    # =========================================================================

    def get_pvcs(self, namespace: str) -> list[str]:
        return run_sync(self._controller.get_pvcs(namespace))

    def delete_pvc(self, name: str, namespace: str) -> CommandResult:
        return run_sync(self._controller.delete_pvc(name, namespace))

    def get_persistent_volumes(self) -> list[PersistentVolumeInfo]:
        return run_sync(self._controller.get_persistent_volumes())

    def delete_persistent_volume(self, name: str) -> CommandResult:
        return run_sync(self._controller.delete_persistent_volume(name))

    # =========================================================================
    # Operator Custom Resources
    # =========================================================================

    def get_kafka_clusters(self, namespace: str) -> list[KafkaClusterInfo]:
        return run_sync(self._controller.get_kafka_clusters(namespace))

    def get_keycloak_instances(self) -> list[KeycloakInstanceInfo]:
        return run_sync(self._controller.get_keycloak_instances())
