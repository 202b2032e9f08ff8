"""Runtime settings read from the environment.

The refresher runs as a bare scheduled invocation, so there are no flags
that change rotation behaviour. Environment variables exist to relocate
the output tree and tune the metadata client, mainly for testing.

Environment Variables:
    WORKLOAD_CERTS_METADATA_URL: metadata API root
        (default: http://169.254.169.254/computeMetadata/v1/)
    WORKLOAD_CERTS_TIMEOUT: per-request timeout in seconds (default: 2)
    WORKLOAD_CERTS_ATTEMPTS: requests per key before giving up (default: 5)
    WORKLOAD_CERTS_CONTENT_DIR_PREFIX: default /run/secrets/workload-spiffe-contents
    WORKLOAD_CERTS_TEMP_SYMLINK_PREFIX: default /run/secrets/workload-spiffe-symlink
    WORKLOAD_CERTS_SYMLINK: default /run/secrets/workload-spiffe-credentials
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from workload_certs.errors import WorkloadCertsError
from workload_certs.metadata.client import DEFAULT_METADATA_URL
from workload_certs.rotation.refresher import DEFAULT_OUTPUT_PATHS, OutputPaths

ENV_PREFIX = "WORKLOAD_CERTS_"


class ConfigError(WorkloadCertsError):
    """Raised when an environment variable holds an invalid value."""


class Settings(BaseModel):
    """Refresher settings."""

    model_config = ConfigDict(frozen=True)

    metadata_url: str = DEFAULT_METADATA_URL
    timeout: float = Field(default=2.0, gt=0)
    attempts: int = Field(default=5, ge=1)
    content_dir_prefix: Path = DEFAULT_OUTPUT_PATHS.content_dir_prefix
    temp_symlink_prefix: Path = DEFAULT_OUTPUT_PATHS.temp_symlink_prefix
    symlink: Path = DEFAULT_OUTPUT_PATHS.stable_symlink

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``WORKLOAD_CERTS_*`` variables.

        Raises
        ------
        ConfigError
            If a variable cannot be converted to its setting's type.
        """
        env = os.environ if environ is None else environ
        values = {
            name: env[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in env
        }
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid {ENV_PREFIX}* environment: {exc}") from exc

    def output_paths(self) -> OutputPaths:
        return OutputPaths(
            content_dir_prefix=self.content_dir_prefix,
            temp_symlink_prefix=self.temp_symlink_prefix,
            stable_symlink=self.symlink,
        )


__all__ = ["ConfigError", "ENV_PREFIX", "Settings"]
