"""Refresh cycle orchestration, enablement gate and config-status mirror."""
from __future__ import annotations

from workload_certs.rotation.gate import fetch_config_status, is_enabled
from workload_certs.rotation.refresher import (
    DEFAULT_OUTPUT_PATHS,
    CredentialRefresher,
    OutputPaths,
    RefreshResult,
    refresh_creds,
)

__all__ = [
    "CredentialRefresher",
    "DEFAULT_OUTPUT_PATHS",
    "OutputPaths",
    "RefreshResult",
    "fetch_config_status",
    "is_enabled",
    "refresh_creds",
]
