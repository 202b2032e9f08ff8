"""Metadata server fetch collaborator.

The refresher only depends on the :class:`MetadataClient` protocol.
:class:`HttpMetadataClient` is the production implementation talking to the
instance metadata server over HTTP with ``httpx``. Transport errors and 5xx
answers are retried with a linear backoff; a 404 means the key is not set
and is raised immediately as :class:`MetadataNotFoundError`. Any other
``httpx`` failure, such as an undecodable body, is raised as
:class:`MetadataError` without retry.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

import httpx

from workload_certs.errors import MetadataError, MetadataNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_METADATA_URL = "http://169.254.169.254/computeMetadata/v1/"
METADATA_FLAVOR_HEADER = {"Metadata-Flavor": "Google"}


class MetadataClient(Protocol):
    """Narrow read interface onto the instance metadata server."""

    def fetch_key(self, key: str) -> bytes:
        """Return the raw value of *key*.

        Raises
        ------
        MetadataError
            If the value cannot be fetched.
        """
        ...

    def fetch_attribute(self, key: str) -> str:
        """Return the value of *key* decoded as text.

        Raises
        ------
        MetadataError
            If the value cannot be fetched.
        """
        ...


class HttpMetadataClient:
    """Fetch metadata keys over HTTP.

    Parameters
    ----------
    base_url:
        Root of the metadata API, keys are appended to it.
    timeout:
        Per-request timeout in seconds.
    attempts:
        Maximum number of requests made for one key.
    backoff_seconds:
        Sleep before retry *n* is ``n * backoff_seconds``.
    transport:
        Optional ``httpx`` transport, used by tests to stub the server.
    sleep:
        Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_METADATA_URL,
        timeout: float = 2.0,
        attempts: int = 5,
        backoff_seconds: float = 1.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        self._attempts = attempts
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=METADATA_FLAVOR_HEADER,
            transport=transport,
        )

    def __enter__(self) -> HttpMetadataClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # MetadataClient interface
    # ------------------------------------------------------------------

    def fetch_key(self, key: str) -> bytes:
        last_error = ""
        for attempt in range(1, self._attempts + 1):
            try:
                response = self._client.get(key)
            except httpx.TransportError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
            except httpx.HTTPError as exc:
                raise MetadataError(key, f"{type(exc).__name__}: {exc}") from exc
            else:
                if response.status_code == 404:
                    raise MetadataNotFoundError(key)
                if response.is_success:
                    return response.content
                if response.status_code < 500:
                    raise MetadataError(key, f"HTTP {response.status_code}")
                last_error = f"HTTP {response.status_code}"

            if attempt < self._attempts:
                delay = attempt * self._backoff_seconds
                logger.warning(
                    "Error fetching metadata key %s (attempt %d/%d), retrying in %.1fs: %s",
                    key,
                    attempt,
                    self._attempts,
                    delay,
                    last_error,
                )
                self._sleep(delay)

        raise MetadataError(
            key, f"exhausted {self._attempts} attempts, last error: {last_error}"
        )

    def fetch_attribute(self, key: str) -> str:
        return self.fetch_key(key).decode("utf-8", errors="replace")


__all__ = [
    "DEFAULT_METADATA_URL",
    "HttpMetadataClient",
    "METADATA_FLAVOR_HEADER",
    "MetadataClient",
]
