"""Environment-driven installer settings.

Every knob of the installer is read from an environment variable of the same
name (``HELM_RELEASE_NAME``, ``NAMESPACE``, ``VALUES_FILE`` ...). A ``.env``
file in the working directory is honoured as well. Empty variables are treated
as unset so that ``VALUES_FILE=`` falls back to the default.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InstallerSettings(BaseSettings):
    """Resolved configuration for one installer run."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    helm_release_name: str = "ros-ocp"
    namespace: str = "ros-ocp"
    values_file: Path | None = None
    use_local_chart: bool = False
    local_chart_path: Path = Path("../ros-ocp")

    # Kafka discovery
    strimzi_namespace: str | None = None
    kafka_namespace: str | None = None
    kafka_bootstrap_servers: str | None = None
    kafka_bootstrap_env_file: Path = Path("/tmp/kafka-bootstrap-servers.env")

    helm_timeout: str = "600s"

    # KIND diagnostics
    container_runtime: str = "podman"
    kind_cluster_name: str = "kind"

    openshift_values_file: Path = Path("openshift-values.yaml")

    log_level: str = Field(default="WARNING")

    @field_validator("helm_release_name", "namespace")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def load_settings() -> InstallerSettings:
    """Read settings from the current environment."""
    settings = InstallerSettings()
    logger.debug(
        f"Loaded settings: release={settings.helm_release_name} "
        f"namespace={settings.namespace} local_chart={settings.use_local_chart}"
    )
    return settings
