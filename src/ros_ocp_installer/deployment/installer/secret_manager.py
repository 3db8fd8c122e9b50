"""Object storage credentials for the chart.

The chart expects a secret named ``<fullname>-storage-credentials`` holding
``access-key`` and ``secret-key``. On OpenShift the values come from ODF
(an existing ``ros-ocp-odf-credentials`` secret, or the NooBaa admin account);
on plain Kubernetes the bundled MinIO development credentials are used.
"""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

from loguru import logger

from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants
from .errors import DeploymentError
from .naming import storage_secret_name
from .platform import Platform

if TYPE_CHECKING:
    from ..shell_commands import ShellCommands


def decode_secret_field(data: dict[str, str], key: str, secret: str) -> str:
    """Decode one base64 field of a secret's ``data`` map.

    Raises:
        DeploymentError: If the field is missing, empty, or not valid
            base64-encoded UTF-8
    """
    encoded = data.get(key)
    if not encoded:
        raise DeploymentError(
            f"Secret '{secret}' has no '{key}' field",
            f"Recreate '{secret}' with a non-empty '{key}' entry.",
        )
    try:
        value = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DeploymentError(
            f"Secret '{secret}' field '{key}' is not valid base64 text",
            str(e),
        ) from e
    if not value:
        raise DeploymentError(f"Secret '{secret}' field '{key}' decodes to empty")
    return value


class StorageSecretProvisioner:
    """Creates the storage credentials secret exactly once per namespace."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        constants: InstallerConstants | None = None,
    ) -> None:
        """Initialize the provisioner.

        Args:
            commands: Shell command executor
            console: Console for progress output
            constants: Secret names and field keys
        """
        self.commands = commands
        self.console = console
        self.constants = constants or DEFAULT_CONSTANTS

    def ensure(self, release_name: str, namespace: str, platform: Platform) -> str:
        """Create the storage credentials secret if it does not exist.

        Args:
            release_name: Helm release name (determines the secret name)
            namespace: Target namespace
            platform: Detected platform

        Returns:
            Name of the storage credentials secret

        Raises:
            DeploymentError: If no credential source is available or a
                secret cannot be created
        """
        secret_name = storage_secret_name(release_name)
        self.console.info(f"Ensuring storage credentials secret: {secret_name}")

        if self.commands.kubectl.secret_exists(secret_name, namespace):
            self.console.warn(
                f"Secret '{secret_name}' already exists, leaving it unchanged"
            )
            return secret_name

        if platform is Platform.OPENSHIFT:
            access_key, secret_key = self._odf_credentials(namespace)
        else:
            self.console.info("Using MinIO development credentials")
            access_key = self.constants.MINIO_ACCESS_KEY
            secret_key = self.constants.MINIO_SECRET_KEY

        self._create(secret_name, namespace, access_key, secret_key)
        self.console.ok(f"Storage credentials secret '{secret_name}' created")
        return secret_name

    # =========================================================================
    # OpenShift Data Foundation
    # =========================================================================

    def _odf_credentials(self, namespace: str) -> tuple[str, str]:
        c = self.constants
        kubectl = self.commands.kubectl

        odf_data = kubectl.get_secret_data(c.ODF_SECRET_NAME, namespace)
        if odf_data is not None:
            self.console.info(f"Using ODF credentials from '{c.ODF_SECRET_NAME}'")
            name = c.ODF_SECRET_NAME
            return (
                decode_secret_field(odf_data, c.ODF_ACCESS_KEY_FIELD, name),
                decode_secret_field(odf_data, c.ODF_SECRET_KEY_FIELD, name),
            )

        noobaa_data = kubectl.get_secret_data(c.NOOBAA_SECRET_NAME, c.NOOBAA_NAMESPACE)
        if noobaa_data is not None:
            self.console.info(
                f"Deriving ODF credentials from {c.NOOBAA_NAMESPACE}/"
                f"{c.NOOBAA_SECRET_NAME}"
            )
            access_key = decode_secret_field(
                noobaa_data, c.NOOBAA_ACCESS_KEY_FIELD, c.NOOBAA_SECRET_NAME
            )
            secret_key = decode_secret_field(
                noobaa_data, c.NOOBAA_SECRET_KEY_FIELD, c.NOOBAA_SECRET_NAME
            )
            self._create(c.ODF_SECRET_NAME, namespace, access_key, secret_key)
            self.console.ok(f"ODF credentials secret '{c.ODF_SECRET_NAME}' created")
            return access_key, secret_key

        raise DeploymentError(
            "No ODF credentials available for object storage",
            f"Neither '{c.ODF_SECRET_NAME}' in namespace '{namespace}' nor "
            f"'{c.NOOBAA_SECRET_NAME}' in '{c.NOOBAA_NAMESPACE}' exists.\n"
            "Create the credentials secret manually:\n"
            f"  kubectl create secret generic {c.ODF_SECRET_NAME} "
            f"--namespace={namespace} \\\n"
            f"    --from-literal={c.ODF_ACCESS_KEY_FIELD}=<your-access-key> \\\n"
            f"    --from-literal={c.ODF_SECRET_KEY_FIELD}=<your-secret-key>",
        )

    def _create(
        self, name: str, namespace: str, access_key: str, secret_key: str
    ) -> None:
        logger.debug(f"Creating secret {namespace}/{name}")
        result = self.commands.kubectl.create_secret(
            name,
            namespace,
            {
                self.constants.ODF_ACCESS_KEY_FIELD: access_key,
                self.constants.ODF_SECRET_KEY_FIELD: secret_key,
            },
        )
        if not result.success:
            raise DeploymentError(
                f"Failed to create secret '{name}'", result.stderr or None
            )
