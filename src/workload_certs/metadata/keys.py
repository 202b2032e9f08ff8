"""Metadata keys read during a refresh cycle."""
from __future__ import annotations

# Instance attribute opting the VM into workload certificates.
ENABLE_WORKLOAD_CERTS_KEY = "instance/attributes/enable-workload-certificate"

# Status of the workload certificate configuration; 404 when not configured.
CONFIG_STATUS_KEY = "instance/gce-workload-certificates/config-status"

WORKLOAD_IDENTITIES_KEY = "instance/gce-workload-certificates/workload-identities"
TRUST_ANCHORS_KEY = "instance/gce-workload-certificates/trust-anchors"

__all__ = [
    "CONFIG_STATUS_KEY",
    "ENABLE_WORKLOAD_CERTS_KEY",
    "TRUST_ANCHORS_KEY",
    "WORKLOAD_IDENTITIES_KEY",
]
