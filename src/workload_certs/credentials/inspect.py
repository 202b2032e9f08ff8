"""Read-only inspection of the published credential bundle.

Used by the ``status`` command. The leaf certificate is parsed with
``cryptography`` purely to report its subject, SPIFFE URI and validity
window; a certificate that does not parse is reported, not rejected.
"""
from __future__ import annotations

import datetime
import os
from dataclasses import dataclass, field
from pathlib import Path

from cryptography import x509

from workload_certs.credentials.writers import BUNDLE_FILES, CERTIFICATES_FILE


@dataclass
class BundleStatus:
    """Snapshot of what the stable symlink currently publishes.

    Parameters
    ----------
    stable_symlink:
        The consumer-facing path that was inspected.
    target:
        The content directory the symlink points at, or None when the
        symlink is absent.
    present_files:
        Bundle artifacts found in *target*.
    missing_files:
        Bundle artifacts absent from *target*.
    subject:
        RFC 4514 subject of the leaf certificate, when parseable.
    spiffe_ids:
        SPIFFE URIs from the leaf certificate's SAN extension.
    not_before, not_after:
        Validity window of the leaf certificate, when parseable.
    parse_error:
        Why the leaf certificate could not be parsed, if it could not.
    """

    stable_symlink: Path
    target: Path | None = None
    present_files: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    subject: str = ""
    spiffe_ids: list[str] = field(default_factory=list)
    not_before: datetime.datetime | None = None
    not_after: datetime.datetime | None = None
    parse_error: str = ""

    @property
    def published(self) -> bool:
        """True if the symlink resolves to a directory with every artifact."""
        return self.target is not None and not self.missing_files

    def days_remaining(self, now: datetime.datetime | None = None) -> int | None:
        """Whole days until the leaf certificate expires, or None if unknown."""
        if self.not_after is None:
            return None
        reference = now or datetime.datetime.now(datetime.timezone.utc)
        return (self.not_after - reference).days


def inspect_bundle(stable_symlink: Path) -> BundleStatus:
    """Describe the bundle currently published at *stable_symlink*."""
    status = BundleStatus(stable_symlink=stable_symlink)
    try:
        target = Path(os.readlink(stable_symlink))
    except OSError:
        return status
    # Relative targets resolve against the directory holding the link.
    status.target = target if target.is_absolute() else stable_symlink.parent / target

    for name in BUNDLE_FILES:
        if (status.target / name).is_file():
            status.present_files.append(name)
        else:
            status.missing_files.append(name)

    if CERTIFICATES_FILE in status.present_files:
        _describe_certificate(status, (status.target / CERTIFICATES_FILE).read_bytes())
    return status


def _describe_certificate(status: BundleStatus, pem: bytes) -> None:
    """Fill certificate fields of *status* from the first PEM block in *pem*."""
    try:
        cert = x509.load_pem_x509_certificate(pem)
    except ValueError as exc:
        status.parse_error = str(exc)
        return

    status.subject = cert.subject.rfc4514_string()
    status.not_before = cert.not_valid_before_utc
    status.not_after = cert.not_valid_after_utc
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return
    status.spiffe_ids = [
        uri
        for uri in san.value.get_values_for_type(x509.UniformResourceIdentifier)
        if uri.startswith("spiffe://")
    ]


__all__ = ["BundleStatus", "inspect_bundle"]
