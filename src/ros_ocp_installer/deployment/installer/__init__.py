"""ROS-OCP installer pipeline components.

- prerequisites: local tools and cluster access
- platform: OpenShift / Kubernetes detection and RunContext
- namespace: namespace creation and labelling
- dependencies: Kafka (Strimzi) and Keycloak verification
- secret_manager: object storage credentials
- chart_source: local chart or latest GitHub release
- helm_release: helm upgrade --install and user flag handling
- readiness: pod and ingress readiness
- health_checks: post-deploy health battery
- diagnostics: ingress troubleshooting cascade
- status_display: deployment status summary
- cleanup: teardown
- deployer: the orchestrator tying them together
"""

from .deployer import InstallOutcome, RosInstaller
from .errors import ChartDownloadError, DeploymentError

__all__ = ["RosInstaller", "InstallOutcome", "DeploymentError", "ChartDownloadError"]
