"""Tests for workload_certs.config and workload_certs.clock."""
from __future__ import annotations

import re
from pathlib import Path

import pytest

from workload_certs.clock import FixedClock, SystemClock
from workload_certs.config import ConfigError, Settings
from workload_certs.metadata.client import DEFAULT_METADATA_URL
from workload_certs.rotation.refresher import DEFAULT_OUTPUT_PATHS, OutputPaths


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.metadata_url == DEFAULT_METADATA_URL
        assert settings.timeout == 2.0
        assert settings.attempts == 5
        assert settings.output_paths() == DEFAULT_OUTPUT_PATHS

    def test_default_paths_under_run_secrets(self) -> None:
        paths = Settings().output_paths()
        assert paths.stable_symlink == Path("/run/secrets/workload-spiffe-credentials")
        assert paths.content_dir("1") == Path("/run/secrets/workload-spiffe-contents-1")
        assert paths.temp_symlink("1") == Path("/run/secrets/workload-spiffe-symlink-1")

    def test_reads_environment(self, tmp_path: Path) -> None:
        env = {
            "WORKLOAD_CERTS_METADATA_URL": "http://localhost:8080/",
            "WORKLOAD_CERTS_TIMEOUT": "0.5",
            "WORKLOAD_CERTS_ATTEMPTS": "1",
            "WORKLOAD_CERTS_CONTENT_DIR_PREFIX": str(tmp_path / "contents"),
            "WORKLOAD_CERTS_TEMP_SYMLINK_PREFIX": str(tmp_path / "symlink"),
            "WORKLOAD_CERTS_SYMLINK": str(tmp_path / "credentials"),
        }
        settings = Settings.from_env(env)

        assert settings.metadata_url == "http://localhost:8080/"
        assert settings.timeout == 0.5
        assert settings.attempts == 1
        assert settings.output_paths() == OutputPaths(
            content_dir_prefix=tmp_path / "contents",
            temp_symlink_prefix=tmp_path / "symlink",
            stable_symlink=tmp_path / "credentials",
        )

    def test_ignores_unrelated_variables(self) -> None:
        settings = Settings.from_env({"HOME": "/root", "WORKLOAD_CERTS_UNKNOWN": "x"})
        assert settings == Settings()

    @pytest.mark.parametrize(
        "name, value",
        [
            ("WORKLOAD_CERTS_TIMEOUT", "soon"),
            ("WORKLOAD_CERTS_TIMEOUT", "0"),
            ("WORKLOAD_CERTS_ATTEMPTS", "0"),
        ],
    )
    def test_invalid_values_raise(self, name: str, value: str) -> None:
        with pytest.raises(ConfigError):
            Settings.from_env({name: value})


class TestClock:
    def test_system_clock_is_rfc3339_utc(self) -> None:
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", SystemClock().now())

    def test_fixed_clock(self) -> None:
        clock = FixedClock("1")
        assert clock.now() == "1"
        clock.set("2")
        assert clock.now() == "2"
