"""SPIFFE trust domain resolution."""
from __future__ import annotations

from workload_certs.trust.domain import SPIFFE_SCHEME, find_domain, trust_domain

__all__ = ["SPIFFE_SCHEME", "find_domain", "trust_domain"]
