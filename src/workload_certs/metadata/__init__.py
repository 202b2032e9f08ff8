"""Instance metadata server access."""
from __future__ import annotations

from workload_certs.metadata.client import (
    DEFAULT_METADATA_URL,
    METADATA_FLAVOR_HEADER,
    HttpMetadataClient,
    MetadataClient,
)

__all__ = [
    "DEFAULT_METADATA_URL",
    "HttpMetadataClient",
    "METADATA_FLAVOR_HEADER",
    "MetadataClient",
]
