"""Short-lived ``kubectl port-forward`` sessions to cluster services.

Health checks on OpenShift reach in-cluster services through a local port.
The forwarder is started, given a few seconds to bind, used, and always torn
down when the block exits.
"""

from __future__ import annotations

import subprocess
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager

from loguru import logger


class PortForwardError(Exception):
    """Error during port forwarding setup."""


@contextmanager
def service_port_forward(
    service: str,
    namespace: str,
    local_port: int,
    remote_port: int,
    *,
    wait_time: float = 3.0,
    request_timeout: str = "90s",
    sleep: Callable[[float], None] = time.sleep,
) -> Generator[str]:
    """Forward ``localhost:<local_port>`` to ``svc/<service>:<remote_port>``.

    Args:
        service: Service name (without the ``svc/`` prefix)
        namespace: Namespace of the service
        local_port: Port to bind on localhost
        remote_port: Service port to forward to
        wait_time: Seconds to wait for the forwarder to bind
        request_timeout: kubectl ``--request-timeout`` value
        sleep: Sleep function, replaceable in tests

    Yields:
        Base URL of the forwarded service, e.g. ``http://localhost:18080``

    Raises:
        PortForwardError: If kubectl cannot be started or exits during startup
    """
    cmd = [
        "kubectl",
        "port-forward",
        "-n",
        namespace,
        f"svc/{service}",
        f"{local_port}:{remote_port}",
        f"--request-timeout={request_timeout}",
    ]
    logger.debug(f"Starting port-forward: {' '.join(cmd)}")

    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError as e:
        raise PortForwardError("kubectl not found") from e

    try:
        sleep(wait_time)

        if process.poll() is not None:
            stderr = process.stderr.read() if process.stderr else ""
            raise PortForwardError(
                f"Port forward to svc/{service} exited early: {stderr.strip()}"
            )

        yield f"http://localhost:{local_port}"
    finally:
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        logger.debug(f"Port-forward to svc/{service} stopped")
