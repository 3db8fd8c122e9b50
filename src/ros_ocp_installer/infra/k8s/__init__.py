"""Kubernetes infrastructure abstraction layer.

Example:
    from ros_ocp_installer.infra.k8s import get_k8s_controller, run_sync

    controller = get_k8s_controller()
    pods = run_sync(controller.get_pods("ros-ocp"))
"""

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
from .helpers import get_k8s_controller
from .port_forward import PortForwardError, service_port_forward
from .utils import run_sync

__all__ = [
    "KubernetesController",
    "get_k8s_controller",
    # Data classes
    "CommandResult",
    "PodInfo",
    "ServiceInfo",
    "RouteInfo",
    "KafkaClusterInfo",
    "KeycloakInstanceInfo",
    "PersistentVolumeInfo",
    # Port forwarding
    "PortForwardError",
    "service_port_forward",
    # Utilities
    "run_sync",
]
