"""workload-certs — atomic rotation of workload identity credentials.

Fetches the workload certificate, private key and trust anchors from the
instance metadata server and publishes them behind a single symlink that
mutual-TLS consumers read.

Example
-------
>>> import workload_certs
>>> workload_certs.__version__
'0.1.0'

Quick start
-----------
::

    from pathlib import Path
    from workload_certs import HttpMetadataClient, OutputPaths, refresh_creds

    with HttpMetadataClient() as client:
        result = refresh_creds(client, OutputPaths.under(Path("/run/secrets")))
"""
from __future__ import annotations

__version__: str = "0.1.0"

from workload_certs.clock import Clock, FixedClock, SystemClock
from workload_certs.config import ConfigError, Settings
from workload_certs.credentials.inspect import BundleStatus, inspect_bundle
from workload_certs.credentials.writers import write_trust_anchors, write_workload_identities
from workload_certs.errors import (
    FilesystemError,
    InvalidSpiffeIDError,
    MalformedPayloadError,
    MetadataError,
    MetadataNotFoundError,
    UnknownTrustDomainError,
    WorkloadCertsError,
)
from workload_certs.metadata.client import HttpMetadataClient, MetadataClient
from workload_certs.rotation.gate import fetch_config_status, is_enabled
from workload_certs.rotation.refresher import (
    CredentialRefresher,
    OutputPaths,
    RefreshResult,
    refresh_creds,
)
from workload_certs.trust.domain import find_domain

__all__ = [
    "__version__",
    # collaborators
    "Clock",
    "FixedClock",
    "HttpMetadataClient",
    "MetadataClient",
    "SystemClock",
    # config
    "ConfigError",
    "Settings",
    # refresh
    "CredentialRefresher",
    "OutputPaths",
    "RefreshResult",
    "fetch_config_status",
    "is_enabled",
    "refresh_creds",
    # credentials
    "BundleStatus",
    "find_domain",
    "inspect_bundle",
    "write_trust_anchors",
    "write_workload_identities",
    # errors
    "FilesystemError",
    "InvalidSpiffeIDError",
    "MalformedPayloadError",
    "MetadataError",
    "MetadataNotFoundError",
    "UnknownTrustDomainError",
    "WorkloadCertsError",
]
