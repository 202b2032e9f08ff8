"""Credential refresh cycle — fetch, stage and atomically publish.

Consumers read credentials through a single stable symlink. Each cycle
writes a brand new content directory, points a temporary symlink at it
and renames that symlink over the stable one. The rename is the only
step that changes what readers see, so a reader observes either the
previous complete bundle or the new complete bundle and nothing in
between. A failed cycle leaves the stable symlink and the directory it
points at untouched.

Directories of failed cycles are left on disk; nothing prunes them yet.

One cycle::

    gate -> config status -> mkdir -> config_status -> bootstrap link
         -> fetch -> write identity -> write anchors -> stage link
         -> snapshot -> rename -> remove superseded directory

The refresher holds no lock and must not run concurrently against the
same output paths.
"""
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from workload_certs.clock import Clock, SystemClock
from workload_certs.credentials.writers import (
    CONFIG_STATUS_FILE,
    write_file,
    write_trust_anchors,
    write_workload_identities,
)
from workload_certs.errors import FilesystemError
from workload_certs.metadata.client import MetadataClient
from workload_certs.metadata.keys import TRUST_ANCHORS_KEY, WORKLOAD_IDENTITIES_KEY
from workload_certs.rotation.gate import fetch_config_status, is_enabled

logger = logging.getLogger(__name__)

CONTENT_DIR_MODE = 0o755


@dataclass(frozen=True)
class OutputPaths:
    """Where a refresh cycle writes.

    Parameters
    ----------
    content_dir_prefix:
        Content directories are created as ``<prefix>-<label>``.
    temp_symlink_prefix:
        Staging symlinks are created as ``<prefix>-<label>``.
    stable_symlink:
        The path consumers read credentials from.

    Relative paths are made absolute against the working directory.
    """

    content_dir_prefix: Path
    temp_symlink_prefix: Path
    stable_symlink: Path

    def __post_init__(self) -> None:
        # Symlink targets resolve against the link's directory, not the cwd.
        for name in ("content_dir_prefix", "temp_symlink_prefix", "stable_symlink"):
            object.__setattr__(self, name, Path(getattr(self, name)).absolute())

    @classmethod
    def under(cls, root: Path) -> OutputPaths:
        """Return the standard layout rooted at *root*."""
        return cls(
            content_dir_prefix=root / "workload-spiffe-contents",
            temp_symlink_prefix=root / "workload-spiffe-symlink",
            stable_symlink=root / "workload-spiffe-credentials",
        )

    def content_dir(self, label: str) -> Path:
        return Path(f"{self.content_dir_prefix}-{label}")

    def temp_symlink(self, label: str) -> Path:
        return Path(f"{self.temp_symlink_prefix}-{label}")


DEFAULT_OUTPUT_PATHS = OutputPaths.under(Path("/run/secrets"))


@dataclass
class RefreshResult:
    """Outcome of one refresh cycle.

    Parameters
    ----------
    rotated:
        True if a new bundle was published.
    reason:
        Human-readable description of why rotation did or did not occur.
    content_dir:
        The newly published content directory.
    spiffe_id:
        SPIFFE ID of the published credentials.
    trust_domain:
        Trust domain whose anchors were published.
    removed_dir:
        The superseded content directory that was deleted, if any.
    """

    rotated: bool
    reason: str
    content_dir: Path | None = None
    spiffe_id: str | None = None
    trust_domain: str | None = None
    removed_dir: Path | None = None


class CredentialRefresher:
    """Runs refresh cycles against one set of output paths.

    Parameters
    ----------
    client:
        Metadata fetch collaborator.
    paths:
        Output locations; defaults to the ``/run/secrets`` layout.
    clock:
        Source of the per-cycle naming label.
    """

    def __init__(
        self,
        client: MetadataClient,
        paths: OutputPaths = DEFAULT_OUTPUT_PATHS,
        clock: Clock | None = None,
    ) -> None:
        self._client = client
        self._paths = paths
        self._clock = clock or SystemClock()

    @property
    def paths(self) -> OutputPaths:
        return self._paths

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def refresh(self) -> RefreshResult:
        """Run one refresh cycle.

        Returns
        -------
        RefreshResult
            ``rotated=False`` when the feature is disabled or unconfigured.

        Raises
        ------
        MetadataError
            If workload identities or trust anchors cannot be fetched.
        MalformedPayloadError
            If a payload cannot be decoded.
        UnknownTrustDomainError
            If no trust anchor matches the workload's trust domain.
        FilesystemError
            If any filesystem step fails.
        """
        if not is_enabled(self._client):
            logger.info("Workload certificate refresh is not enabled, skipping")
            return RefreshResult(rotated=False, reason="workload certificates not enabled")

        config_status = fetch_config_status(self._client)
        if config_status is None:
            return RefreshResult(rotated=False, reason="workload certificates not configured")

        label = self._clock.now()
        content_dir = self._paths.content_dir(label)
        temp_symlink = self._paths.temp_symlink(label)
        stable_symlink = self._paths.stable_symlink

        logger.info("Creating timestamp contents dir %s", content_dir)
        try:
            content_dir.mkdir(mode=CONTENT_DIR_MODE, parents=True)
        except OSError as exc:
            raise FilesystemError("create content directory", content_dir, exc) from exc

        write_file(content_dir, CONFIG_STATUS_FILE, config_status)

        if not os.path.lexists(stable_symlink):
            # Nothing reads the path yet, so linking directly is safe.
            logger.info("Creating initial symlink %s -> %s", stable_symlink, content_dir)
            self._symlink(content_dir, stable_symlink, "create initial symlink")

        identities = self._client.fetch_key(WORKLOAD_IDENTITIES_KEY)
        anchors = self._client.fetch_key(TRUST_ANCHORS_KEY)

        spiffe_id = write_workload_identities(content_dir, identities)
        domain = write_trust_anchors(anchors, content_dir, spiffe_id)
        logger.info("Rotating workload credentials for %s (trust domain %s)", spiffe_id, domain)

        self._symlink(content_dir, temp_symlink, "create temporary symlink")

        old_target = self._read_link(stable_symlink)

        logger.info("Rotating symlink %s", stable_symlink)
        try:
            os.replace(temp_symlink, stable_symlink)
        except OSError as exc:
            raise FilesystemError("rotate symlink", stable_symlink, exc) from exc

        removed_dir = self._remove_superseded(old_target)
        return RefreshResult(
            rotated=True,
            reason=f"published {content_dir}",
            content_dir=content_dir,
            spiffe_id=spiffe_id,
            trust_domain=domain,
            removed_dir=removed_dir,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _symlink(target: Path, link: Path, step: str) -> None:
        try:
            os.symlink(target, link)
        except OSError as exc:
            raise FilesystemError(step, link, exc) from exc

    @staticmethod
    def _read_link(link: Path) -> str:
        """Return the current target of *link*, or "" if it cannot be read."""
        try:
            return os.readlink(link)
        except OSError as exc:
            logger.info("Error reading existing symlink %s: %s", link, exc)
            return ""

    def _remove_superseded(self, old_target: str) -> Path | None:
        stable_symlink = self._paths.stable_symlink
        try:
            new_target = os.readlink(stable_symlink)
        except OSError as exc:
            raise FilesystemError("read published symlink", stable_symlink, exc) from exc

        if not old_target or old_target == new_target:
            return None

        old_dir = Path(old_target)
        if not old_dir.is_absolute():
            old_dir = stable_symlink.parent / old_dir
        logger.info("Remove old content dir %s", old_dir)
        try:
            shutil.rmtree(old_dir)
        except FileNotFoundError:
            logger.info("Old content dir %s already gone", old_dir)
        except OSError as exc:
            raise FilesystemError("remove superseded content directory", old_dir, exc) from exc
        return old_dir


def refresh_creds(
    client: MetadataClient,
    paths: OutputPaths = DEFAULT_OUTPUT_PATHS,
    clock: Clock | None = None,
) -> RefreshResult:
    """Run a single refresh cycle; see :meth:`CredentialRefresher.refresh`."""
    return CredentialRefresher(client, paths, clock).refresh()


__all__ = [
    "CONTENT_DIR_MODE",
    "CredentialRefresher",
    "DEFAULT_OUTPUT_PATHS",
    "OutputPaths",
    "RefreshResult",
    "refresh_creds",
]
