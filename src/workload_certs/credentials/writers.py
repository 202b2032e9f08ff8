"""Credential file writers.

Each writer decodes one metadata payload and writes its files into a
content directory that must already exist. Files are truncated and
rewritten with a fixed world-readable mode; PEM contents are copied
verbatim and never validated.
"""
from __future__ import annotations

import logging
from pathlib import Path

from workload_certs.credentials.models import parse_trust_anchors, parse_workload_identities
from workload_certs.errors import FilesystemError, MalformedPayloadError
from workload_certs.trust.domain import find_domain

logger = logging.getLogger(__name__)

CONFIG_STATUS_FILE = "config_status"
CERTIFICATES_FILE = "certificates.pem"
PRIVATE_KEY_FILE = "private_key.pem"
CA_CERTIFICATES_FILE = "ca_certificates.pem"

#: Every artifact of a fully populated content directory.
BUNDLE_FILES: tuple[str, ...] = (
    CONFIG_STATUS_FILE,
    CERTIFICATES_FILE,
    PRIVATE_KEY_FILE,
    CA_CERTIFICATES_FILE,
)

FILE_MODE = 0o644


def write_file(directory: Path, name: str, content: bytes) -> Path:
    """Write *content* to ``directory / name`` with mode :data:`FILE_MODE`.

    Raises
    ------
    FilesystemError
        If the file cannot be written.
    """
    path = directory / name
    try:
        path.write_bytes(content)
        path.chmod(FILE_MODE)
    except OSError as exc:
        raise FilesystemError(f"write {name}", path, exc) from exc
    logger.debug("Wrote %s (%d bytes)", path, len(content))
    return path


def write_workload_identities(directory: Path, payload: bytes | str) -> str:
    """Write ``certificates.pem`` and ``private_key.pem`` into *directory*.

    Parameters
    ----------
    directory:
        Existing content directory.
    payload:
        Raw workload-identities document.

    Returns
    -------
    str
        The SPIFFE ID the credentials were issued for.

    Raises
    ------
    MalformedPayloadError
        If the payload cannot be decoded or does not hold exactly one
        workload credential.
    FilesystemError
        If a file cannot be written.
    """
    identities = parse_workload_identities(payload)
    credentials = identities.workload_credentials
    if len(credentials) != 1:
        raise MalformedPayloadError(
            f"Expected exactly one workload credential, found {len(credentials)}: "
            f"{sorted(credentials)}"
        )

    spiffe_id, credential = next(iter(credentials.items()))
    write_file(directory, CERTIFICATES_FILE, credential.certificate_pem.encode("utf-8"))
    write_file(directory, PRIVATE_KEY_FILE, credential.private_key_pem.encode("utf-8"))
    return spiffe_id


def write_trust_anchors(payload: bytes | str, directory: Path, spiffe_id: str) -> str:
    """Write ``ca_certificates.pem`` for the trust domain of *spiffe_id*.

    Returns
    -------
    str
        The trust domain whose anchors were written.

    Raises
    ------
    MalformedPayloadError
        If the payload cannot be decoded.
    UnknownTrustDomainError
        If the payload has no anchors for the SPIFFE ID's trust domain.
    FilesystemError
        If the file cannot be written.
    """
    anchors = parse_trust_anchors(payload)
    domain = find_domain(anchors.trust_anchors, spiffe_id)
    pem = anchors.trust_anchors[domain].trust_anchors_pem
    write_file(directory, CA_CERTIFICATES_FILE, pem.encode("utf-8"))
    return domain


__all__ = [
    "BUNDLE_FILES",
    "CA_CERTIFICATES_FILE",
    "CERTIFICATES_FILE",
    "CONFIG_STATUS_FILE",
    "FILE_MODE",
    "PRIVATE_KEY_FILE",
    "write_file",
    "write_trust_anchors",
    "write_workload_identities",
]
