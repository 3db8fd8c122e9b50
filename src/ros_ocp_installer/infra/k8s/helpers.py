from __future__ import annotations

from cachetools.func import lru_cache  # type: ignore

from .controller import KubernetesController


@lru_cache(maxsize=1)
def get_k8s_controller() -> KubernetesController:
    """Get the process-wide KubernetesController.

    Returns:
        An instance of KubernetesController
    """
    from .kr8s_controller import Kr8sController

    return Kr8sController()
