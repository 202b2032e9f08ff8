"""Test that the quickstart API works for workload-certs."""
from __future__ import annotations

import os
from pathlib import Path


def test_quickstart_import() -> None:
    import workload_certs

    assert workload_certs.__version__ == "0.1.0"


def test_quickstart_refresh(metadata, tmp_path: Path) -> None:
    from workload_certs import FixedClock, OutputPaths, refresh_creds

    paths = OutputPaths.under(tmp_path)
    result = refresh_creds(metadata, paths, FixedClock("2024-01-01T00:00:00Z"))

    assert result.rotated
    assert os.readlink(paths.stable_symlink) == str(
        tmp_path / "workload-spiffe-contents-2024-01-01T00:00:00Z"
    )


def test_quickstart_status(metadata, tmp_path: Path) -> None:
    from workload_certs import FixedClock, OutputPaths, inspect_bundle, refresh_creds

    paths = OutputPaths.under(tmp_path)
    refresh_creds(metadata, paths, FixedClock("1"))

    assert inspect_bundle(paths.stable_symlink).published


def test_quickstart_errors_share_base() -> None:
    from workload_certs import (
        FilesystemError,
        MalformedPayloadError,
        MetadataError,
        UnknownTrustDomainError,
        WorkloadCertsError,
    )

    for exc in (FilesystemError, MalformedPayloadError, MetadataError, UnknownTrustDomainError):
        assert issubclass(exc, WorkloadCertsError)
