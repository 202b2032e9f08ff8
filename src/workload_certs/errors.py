"""Exception hierarchy for workload certificate refresh.

Every hard failure of a refresh cycle is raised as a subclass of
WorkloadCertsError so the CLI can report it and exit non-zero without
catching unrelated exceptions.
"""
from __future__ import annotations

from pathlib import Path


class WorkloadCertsError(Exception):
    """Base class for all refresh failures."""


class MetadataError(WorkloadCertsError):
    """Raised when a metadata key cannot be fetched.

    Parameters
    ----------
    key:
        The metadata key that was requested.
    reason:
        Human-readable description of the failure.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Error fetching metadata key {key!r}: {reason}")


class MetadataNotFoundError(MetadataError):
    """Raised when the metadata server answers 404 for a key."""

    def __init__(self, key: str) -> None:
        super().__init__(key, "HTTP 404")


class MalformedPayloadError(WorkloadCertsError):
    """Raised when a metadata payload cannot be decoded into the expected shape."""


class InvalidSpiffeIDError(MalformedPayloadError):
    """Raised when a SPIFFE ID is not a ``spiffe://`` URI with a trust domain."""

    def __init__(self, spiffe_id: str) -> None:
        self.spiffe_id = spiffe_id
        super().__init__(f"Invalid SPIFFE ID {spiffe_id!r}")


class UnknownTrustDomainError(WorkloadCertsError):
    """Raised when no trust anchor matches the trust domain of a SPIFFE ID."""

    def __init__(self, domain: str, known: list[str]) -> None:
        self.domain = domain
        self.known = known
        super().__init__(
            f"Unknown trust domain {domain!r}, trust anchors available for: {known}"
        )


class FilesystemError(WorkloadCertsError):
    """Raised when a filesystem step of the refresh cycle fails.

    Parameters
    ----------
    step:
        Short label of the failing step (e.g. ``"create content directory"``).
    path:
        The path the step was operating on.
    cause:
        The underlying OS error.
    """

    def __init__(self, step: str, path: Path, cause: OSError | None = None) -> None:
        self.step = step
        self.path = path
        self.cause = cause
        message = f"Error during {step} at {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


__all__ = [
    "FilesystemError",
    "InvalidSpiffeIDError",
    "MalformedPayloadError",
    "MetadataError",
    "MetadataNotFoundError",
    "UnknownTrustDomainError",
    "WorkloadCertsError",
]
