"""Trust domain resolution for SPIFFE IDs.

A SPIFFE ID has the form ``spiffe://<trust-domain>/ns/<namespace>/sa/<name>``.
The trust domain is the URI authority and is looked up verbatim among the
trust anchor keys. Matching is exact: ``"A.global.B"`` and ``"B.global.A"``
are different domains.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from workload_certs.errors import InvalidSpiffeIDError, UnknownTrustDomainError

SPIFFE_SCHEME = "spiffe://"

_V = TypeVar("_V")


def trust_domain(spiffe_id: str) -> str:
    """Return the authority segment of *spiffe_id*.

    Raises
    ------
    InvalidSpiffeIDError
        If *spiffe_id* does not use the ``spiffe://`` scheme or has an empty
        authority.
    """
    if not spiffe_id.startswith(SPIFFE_SCHEME):
        raise InvalidSpiffeIDError(spiffe_id)
    domain = spiffe_id[len(SPIFFE_SCHEME):].split("/", 1)[0]
    if not domain:
        raise InvalidSpiffeIDError(spiffe_id)
    return domain


def find_domain(anchors: Mapping[str, _V], spiffe_id: str) -> str:
    """Return the key of *anchors* equal to the trust domain of *spiffe_id*.

    Parameters
    ----------
    anchors:
        Trust anchors keyed by trust domain name. Values are not inspected.
    spiffe_id:
        The workload's SPIFFE ID.

    Returns
    -------
    str
        The matching trust domain.

    Raises
    ------
    UnknownTrustDomainError
        If no key equals the trust domain.
    InvalidSpiffeIDError
        If *spiffe_id* is not a SPIFFE URI.
    """
    domain = trust_domain(spiffe_id)
    if domain not in anchors:
        raise UnknownTrustDomainError(domain, sorted(anchors))
    return domain


__all__ = ["SPIFFE_SCHEME", "find_domain", "trust_domain"]
