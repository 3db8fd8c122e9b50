"""HTTP operations: endpoint probes, release metadata and downloads.

Built on requests. Probes never raise; transport errors are folded into the
ProbeResult so callers can count failures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import requests
from loguru import logger

from .types import ProbeResult


class HttpCommands:
    """HTTP client used by the installer.

    Provides operations for:
    - Health probes (pass/fail like ``curl -f``)
    - Verbose probes for diagnostics
    - JSON metadata fetches
    - File downloads
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()

    def probe(
        self,
        url: str,
        *,
        connect_timeout: float = 10.0,
        read_timeout: float = 30.0,
    ) -> ProbeResult:
        """Request ``url`` and report success for any status below 400.

        Redirects are not followed.
        """
        try:
            response = self._session.get(
                url,
                timeout=(connect_timeout, read_timeout),
                allow_redirects=False,
            )
        except requests.RequestException as e:
            logger.debug(f"Probe {url} failed: {e}")
            return ProbeResult(url=url, ok=False, error=str(e))

        ok = response.status_code < 400
        logger.debug(f"Probe {url} -> {response.status_code}")
        return ProbeResult(url=url, ok=ok, status_code=response.status_code)

    def verbose_probe(self, url: str, *, max_lines: int = 20) -> str:
        """Describe a request/response exchange for troubleshooting output."""
        lines = [f"> GET {url}"]
        try:
            response = self._session.get(url, timeout=(10, 30), allow_redirects=False)
        except requests.RequestException as e:
            lines.append(f"* Request failed: {e}")
            return "\n".join(lines)

        lines.append(f"< HTTP {response.status_code} {response.reason}")
        lines.extend(f"< {k}: {v}" for k, v in response.headers.items())
        body = response.text.splitlines()
        lines.extend(body)
        return "\n".join(lines[:max_lines])

    def get_json(self, url: str, *, timeout: float = 30.0) -> Any:
        """Fetch and decode a JSON document.

        Raises:
            requests.RequestException: On transport errors or non-2xx status
            ValueError: If the body is not JSON
        """
        response = self._session.get(
            url,
            timeout=timeout,
            headers={"Accept": "application/vnd.github+json"},
        )
        response.raise_for_status()
        return response.json()

    def download(self, url: str, destination: Path, *, timeout: float = 120.0) -> Path:
        """Stream ``url`` to ``destination``, following redirects.

        Raises:
            requests.RequestException: On transport errors or non-2xx status
        """
        logger.debug(f"Downloading {url} -> {destination}")
        with self._session.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with destination.open("wb") as fh:
                for chunk in response.iter_content(chunk_size=64 * 1024):
                    fh.write(chunk)
        return destination
