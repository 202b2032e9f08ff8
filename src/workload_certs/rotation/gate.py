"""Enablement gate and config-status mirror.

Both fail closed: a VM that never opted in, or whose workload certificate
configuration is absent, must not produce failures on every scheduled run.
"""
from __future__ import annotations

import logging

from workload_certs.errors import MetadataError
from workload_certs.metadata.client import MetadataClient
from workload_certs.metadata.keys import CONFIG_STATUS_KEY, ENABLE_WORKLOAD_CERTS_KEY

logger = logging.getLogger(__name__)


def is_enabled(client: MetadataClient) -> bool:
    """Return True only if the enablement attribute is exactly ``"true"``.

    Absence, transport errors and any other value all yield False.
    """
    try:
        value = client.fetch_attribute(ENABLE_WORKLOAD_CERTS_KEY)
    except MetadataError as exc:
        logger.debug("Workload certificates not enabled: %s", exc)
        return False

    if value != "true":
        logger.debug("Workload certificates not enabled: %s=%r", ENABLE_WORKLOAD_CERTS_KEY, value)
        return False
    return True


def fetch_config_status(client: MetadataClient) -> bytes | None:
    """Return the raw config-status blob, or None if it cannot be fetched.

    Every failure, including the 404 answered for an unconfigured VM, is
    read as "feature not configured".
    """
    try:
        return client.fetch_key(CONFIG_STATUS_KEY)
    except MetadataError as exc:
        logger.info("Workload certificate config status unavailable: %s", exc)
        return None


__all__ = ["fetch_config_status", "is_enabled"]
