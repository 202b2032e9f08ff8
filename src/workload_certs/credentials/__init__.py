"""Workload credential payloads, file writers and bundle inspection."""
from __future__ import annotations

from workload_certs.credentials.inspect import BundleStatus, inspect_bundle
from workload_certs.credentials.models import (
    TrustAnchor,
    WorkloadCredential,
    WorkloadIdentities,
    WorkloadTrustAnchors,
    parse_trust_anchors,
    parse_workload_identities,
)
from workload_certs.credentials.writers import (
    BUNDLE_FILES,
    CA_CERTIFICATES_FILE,
    CERTIFICATES_FILE,
    CONFIG_STATUS_FILE,
    PRIVATE_KEY_FILE,
    write_trust_anchors,
    write_workload_identities,
)

__all__ = [
    "BUNDLE_FILES",
    "BundleStatus",
    "CA_CERTIFICATES_FILE",
    "CERTIFICATES_FILE",
    "CONFIG_STATUS_FILE",
    "PRIVATE_KEY_FILE",
    "TrustAnchor",
    "WorkloadCredential",
    "WorkloadIdentities",
    "WorkloadTrustAnchors",
    "inspect_bundle",
    "parse_trust_anchors",
    "parse_workload_identities",
    "write_trust_anchors",
    "write_workload_identities",
]
