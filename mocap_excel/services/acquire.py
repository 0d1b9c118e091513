from __future__ import annotations

import logging
from pathlib import Path

import requests

"""Byte acquisition: the only I/O boundary.

Both entry points resolve to a complete in-memory buffer before any parsing
starts. Failures raise AcquisitionError immediately; nothing is retried.
"""

__all__ = [
    "AcquisitionError",
    "fetch_url_bytes",
    "is_url",
    "read_file_bytes",
]

logger = logging.getLogger(__name__)


class AcquisitionError(Exception):
    """File could not be read or the HTTP fetch did not succeed."""


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def read_file_bytes(path: str | Path) -> bytes:
    path = Path(path)
    if not path.exists():
        raise AcquisitionError(f"File not found: {path}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise AcquisitionError(f"Could not read {path}: {e}") from e


def fetch_url_bytes(url: str, timeout: float | None = None) -> bytes:
    """GET ``url`` and return the body.

    Raises:
        AcquisitionError: transport failure or a non-2xx response; the message
            carries the status code and reason
    """
    logger.debug(f"fetching workbook url={url}")
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise AcquisitionError(f"Failed to fetch Excel: {e}") from e
    try:
        if not 200 <= response.status_code < 300:
            raise AcquisitionError(
                f"Failed to fetch Excel: {response.status_code} {response.reason}"
            )
        return response.content
    finally:
        response.close()
