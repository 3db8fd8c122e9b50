"""Kr8s-based implementation of KubernetesController.

Uses the kr8s library for native async Kubernetes operations.
"""

from __future__ import annotations

import asyncio
import json
import subprocess
from collections.abc import Sequence
from typing import Any

import httpx
import kr8s
from kr8s.asyncio.objects import (
    Namespace,
    Node,
    PersistentVolume,
    PersistentVolumeClaim,
    Pod,
    Secret,
    Service,
    new_class,
)
from loguru import logger

from .controller import (
    CommandResult,
    KafkaClusterInfo,
    KeycloakInstanceInfo,
    KubernetesController,
    PersistentVolumeInfo,
    PodInfo,
    RouteInfo,
    ServiceInfo,
)

# Operator-managed kinds are not built into kr8s
Kafka = new_class(kind="Kafka", version="kafka.strimzi.io/v1beta2", namespaced=True)
Keycloak = new_class(
    kind="Keycloak", version="k8s.keycloak.org/v2alpha1", namespaced=True
)
Route = new_class(kind="Route", version="route.openshift.io/v1", namespaced=True)

# The API server refused or never answered the request
API_ERRORS: tuple[type[Exception], ...] = (
    kr8s.ServerError,
    kr8s.APITimeoutError,
    httpx.TransportError,
)


def _condition_true(raw: dict[str, Any], condition_type: str) -> bool:
    conditions = raw.get("status", {}).get("conditions") or []
    return any(
        c.get("type") == condition_type and c.get("status") == "True"
        for c in conditions
    )


class Kr8sController(KubernetesController):
    """Kubernetes controller using kr8s library.

    Note: The kr8s API client is NOT cached because it's tied to the event loop
    that was running when created. ``run_sync()`` creates a new event loop per
    call, so each operation asks for a fresh client.
    """

    async def _get_api(self) -> Any:  # Returns kr8s._api.Api
        return await kr8s.asyncio.api()

    async def _kubectl(
        self, args: Sequence[str], *, timeout: float | None = None
    ) -> CommandResult:
        """Run kubectl in a worker thread and capture its output."""
        cmd = ["kubectl", *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        def _run() -> CommandResult:
            try:
                result = subprocess.run(
                    cmd, capture_output=True, text=True, timeout=timeout
                )
            except subprocess.TimeoutExpired:
                return CommandResult(
                    success=False,
                    stderr=f"kubectl {args[0]} timed out after {timeout}s",
                    returncode=124,
                )
            except FileNotFoundError:
                return CommandResult(
                    success=False, stderr="kubectl not found", returncode=127
                )
            return CommandResult(
                success=result.returncode == 0,
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
            )

        return await asyncio.to_thread(_run)

    # =========================================================================
    # Cluster
    # =========================================================================

    async def get_current_context(self) -> str:
        """Get the current kubectl context name.

        Note: Uses kubectl so the answer matches what the user sees.
        """
        result = await self._kubectl(["config", "current-context"], timeout=30)
        if not result.success:
            return ""
        return result.stdout.strip()

    async def cluster_reachable(self) -> bool:
        try:
            api = await self._get_api()
            async for _ in Node.list(api=api):
                break
            return True
        except Exception as e:
            logger.debug(f"Node listing failed: {e}")
            return False

    async def routes_api_available(self, namespace: str) -> bool:
        try:
            api = await self._get_api()
            async for _ in Route.list(namespace=namespace, api=api):
                break
            return True
        except Exception as e:
            logger.debug(f"Route API query failed: {e}")
            return False

    # =========================================================================
    # Namespaces
    # =========================================================================

    async def namespace_exists(self, namespace: str) -> bool:
        try:
            api = await self._get_api()
            await Namespace.get(namespace, api=api)
            return True
        except kr8s.NotFoundError:
            return False
        except API_ERRORS as e:
            logger.debug(f"Namespace lookup for {namespace} failed: {e}")
            return False

    async def create_namespace(self, namespace: str) -> CommandResult:
        try:
            api = await self._get_api()
            ns = Namespace(
                {
                    "apiVersion": "v1",
                    "kind": "Namespace",
                    "metadata": {"name": namespace},
                },
                api=api,
            )
            await ns.create()
            return CommandResult(success=True, stdout=f"namespace/{namespace} created")
        except API_ERRORS as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    async def label_namespace(
        self, namespace: str, labels: dict[str, str]
    ) -> CommandResult:
        try:
            api = await self._get_api()
            ns = await Namespace.get(namespace, api=api)
            await ns.label(labels)
            return CommandResult(success=True)
        except (kr8s.NotFoundError, *API_ERRORS) as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    async def delete_namespace(self, namespace: str) -> CommandResult:
        try:
            api = await self._get_api()
            ns = await Namespace.get(namespace, api=api)
            await ns.delete()
            return CommandResult(success=True, stdout=f"namespace/{namespace} deleted")
        except kr8s.NotFoundError:
            return CommandResult(success=True, stdout="already deleted")
        except API_ERRORS as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    # =========================================================================
    # Secrets
    # =========================================================================

    async def secret_exists(self, name: str, namespace: str) -> bool:
        return await self.get_secret_data(name, namespace) is not None

    async def get_secret_data(
        self, name: str, namespace: str
    ) -> dict[str, str] | None:
        try:
            api = await self._get_api()
            secret = await Secret.get(name, namespace=namespace, api=api)
        except kr8s.NotFoundError:
            return None
        except API_ERRORS as e:
            logger.debug(f"Reading secret {namespace}/{name} failed: {e}")
            return None
        return dict(secret.raw.get("data") or {})

    async def create_secret(
        self, name: str, namespace: str, string_data: dict[str, str]
    ) -> CommandResult:
        try:
            api = await self._get_api()
            secret = Secret(
                {
                    "apiVersion": "v1",
                    "kind": "Secret",
                    "type": "Opaque",
                    "metadata": {"name": name, "namespace": namespace},
                    "stringData": string_data,
                },
                api=api,
            )
            await secret.create()
            return CommandResult(success=True, stdout=f"secret/{name} created")
        except API_ERRORS as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    # =========================================================================
    # Pods
    # =========================================================================

    async def get_pods(
        self, namespace: str | None, label_selector: str | None = None
    ) -> list[PodInfo]:
        pods: list[PodInfo] = []
        try:
            api = await self._get_api()
            kwargs: dict[str, Any] = {"namespace": namespace or kr8s.ALL, "api": api}
            if label_selector:
                kwargs["label_selector"] = label_selector

            async for pod in Pod.list(**kwargs):
                raw = pod.raw
                status = raw.get("status", {})
                container_statuses = status.get("containerStatuses") or []
                pods.append(
                    PodInfo(
                        name=pod.name,
                        namespace=pod.namespace or "",
                        status=status.get("phase", "Unknown"),
                        ready=_condition_true(raw, "Ready"),
                        images=[
                            c.get("image", "")
                            for c in raw.get("spec", {}).get("containers") or []
                        ],
                        restarts=sum(
                            cs.get("restartCount", 0) for cs in container_statuses
                        ),
                        ip=status.get("podIP", ""),
                        node=raw.get("spec", {}).get("nodeName", ""),
                    )
                )
        except API_ERRORS as e:
            logger.debug(f"Pod listing in {namespace or 'all namespaces'} failed: {e}")
        return pods

    async def wait_for_pods(
        self,
        namespace: str,
        label_selector: str,
        *,
        timeout: str = "300s",
        field_selector: str | None = None,
    ) -> CommandResult:
        """Wait for pods to be ready.

        Note: Uses kubectl wait, which kr8s has no direct equivalent for.
        """
        args = [
            "wait",
            "--for=condition=ready",
            "pod",
            "-l",
            label_selector,
            "-n",
            namespace,
            f"--timeout={timeout}",
        ]
        if field_selector:
            args.append(f"--field-selector={field_selector}")
        return await self._kubectl(args, timeout=self._parse_timeout(timeout) + 30)

    async def get_pod_logs(
        self,
        pod: str,
        namespace: str,
        *,
        tail: int | None = None,
        since: str | None = None,
    ) -> CommandResult:
        args = ["logs", pod, "-n", namespace]
        if tail is not None:
            args.append(f"--tail={tail}")
        if since:
            args.append(f"--since={since}")
        return await self._kubectl(args, timeout=60)

    async def exec_in_pod(
        self, pod: str, namespace: str, command: list[str]
    ) -> CommandResult:
        return await self._kubectl(["exec", "-n", namespace, pod, "--", *command])

    # =========================================================================
    # Services and Networking
    # =========================================================================

    async def get_services(
        self, namespace: str, label_selector: str | None = None
    ) -> list[ServiceInfo]:
        services: list[ServiceInfo] = []
        try:
            api = await self._get_api()
            kwargs: dict[str, Any] = {"namespace": namespace, "api": api}
            if label_selector:
                kwargs["label_selector"] = label_selector

            async for svc in Service.list(**kwargs):
                spec = svc.raw.get("spec", {})
                ports = ",".join(
                    f"{p.get('port')}/{p.get('protocol', 'TCP')}"
                    for p in spec.get("ports") or []
                )
                services.append(
                    ServiceInfo(
                        name=svc.name,
                        namespace=svc.namespace or namespace,
                        type=spec.get("type", ""),
                        cluster_ip=spec.get("clusterIP", ""),
                        ports=ports,
                    )
                )
        except API_ERRORS as e:
            logger.debug(f"Service listing in {namespace} failed: {e}")
        return services

    async def get_endpoint_addresses(self, name: str, namespace: str) -> list[str]:
        result = await self._kubectl(
            ["get", "endpoints", name, "-n", namespace, "-o", "json"], timeout=30
        )
        if not result.success:
            return []
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            return []
        return [
            address["ip"]
            for subset in data.get("subsets") or []
            for address in subset.get("addresses") or []
            if address.get("ip")
        ]

    async def get_routes(self, namespace: str) -> list[RouteInfo]:
        routes: list[RouteInfo] = []
        try:
            api = await self._get_api()
            async for route in Route.list(namespace=namespace, api=api):
                spec = route.raw.get("spec", {})
                routes.append(
                    RouteInfo(
                        name=route.name,
                        namespace=route.namespace or namespace,
                        host=spec.get("host", ""),
                        path=spec.get("path", ""),
                    )
                )
        except (*API_ERRORS, ValueError) as e:
            # ValueError: Route kind unknown to this cluster
            logger.debug(f"Route listing in {namespace} failed: {e}")
        return routes

    async def get_resource_text(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        output: str | None = None,
        all_namespaces: bool = False,
    ) -> CommandResult:
        args = ["get", *resource.split()]
        if all_namespaces:
            args.append("-A")
        elif namespace:
            args.extend(["-n", namespace])
        if output:
            args.extend(["-o", output])
        return await self._kubectl(args, timeout=60)

    # =========================================================================
    # Storage
    # =========================================================================

    async def get_pvcs(self, namespace: str) -> list[str]:
        try:
            api = await self._get_api()
            return [
                pvc.name
                async for pvc in PersistentVolumeClaim.list(
                    namespace=namespace, api=api
                )
            ]
        except API_ERRORS as e:
            logger.debug(f"PVC listing in {namespace} failed: {e}")
            return []

    async def delete_pvc(self, name: str, namespace: str) -> CommandResult:
        try:
            api = await self._get_api()
            pvc = await PersistentVolumeClaim.get(name, namespace=namespace, api=api)
            await pvc.delete()
            return CommandResult(success=True)
        except kr8s.NotFoundError:
            return CommandResult(success=True, stdout="already deleted")
        except API_ERRORS as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    async def get_persistent_volumes(self) -> list[PersistentVolumeInfo]:
        volumes: list[PersistentVolumeInfo] = []
        try:
            api = await self._get_api()
            async for pv in PersistentVolume.list(api=api):
                claim = pv.raw.get("spec", {}).get("claimRef") or {}
                volumes.append(
                    PersistentVolumeInfo(
                        name=pv.name,
                        claim_namespace=claim.get("namespace", ""),
                        claim_name=claim.get("name", ""),
                    )
                )
        except API_ERRORS as e:
            logger.debug(f"PersistentVolume listing failed: {e}")
        return volumes

    async def delete_persistent_volume(self, name: str) -> CommandResult:
        try:
            api = await self._get_api()
            pv = await PersistentVolume.get(name, api=api)
            await pv.delete()
            return CommandResult(success=True)
        except kr8s.NotFoundError:
            return CommandResult(success=True, stdout="already deleted")
        except API_ERRORS as e:
            return CommandResult(success=False, stderr=str(e), returncode=1)

    # =========================================================================
    # Operator Custom Resources
    # =========================================================================

    async def get_kafka_clusters(self, namespace: str) -> list[KafkaClusterInfo]:
        clusters: list[KafkaClusterInfo] = []
        try:
            api = await self._get_api()
            async for kafka in Kafka.list(namespace=namespace, api=api):
                clusters.append(
                    KafkaClusterInfo(
                        name=kafka.name,
                        namespace=kafka.namespace or namespace,
                        ready=_condition_true(kafka.raw, "Ready"),
                        version=kafka.raw.get("spec", {})
                        .get("kafka", {})
                        .get("version", ""),
                    )
                )
        except (*API_ERRORS, ValueError) as e:
            # CRD not installed
            logger.debug(f"Kafka listing failed: {e}")
        return clusters

    async def get_keycloak_instances(self) -> list[KeycloakInstanceInfo]:
        instances: list[KeycloakInstanceInfo] = []
        try:
            api = await self._get_api()
            async for kc in Keycloak.list(namespace=kr8s.ALL, api=api):
                instances.append(
                    KeycloakInstanceInfo(
                        name=kc.name,
                        namespace=kc.namespace or "",
                        hostname=kc.raw.get("status", {}).get("hostname", ""),
                        api_version=kc.raw.get("apiVersion", ""),
                    )
                )
        except (*API_ERRORS, ValueError) as e:
            logger.debug(f"Keycloak listing failed: {e}")
        return instances

    # =========================================================================
    # Helpers
    # =========================================================================

    def _parse_timeout(self, timeout: str) -> float:
        """Parse a timeout string like '120s' or '5m' to seconds."""
        if timeout.endswith("s"):
            return float(timeout[:-1])
        elif timeout.endswith("m"):
            return float(timeout[:-1]) * 60
        elif timeout.endswith("h"):
            return float(timeout[:-1]) * 3600
        else:
            return float(timeout)
