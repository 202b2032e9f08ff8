"""Tests for workload_certs.metadata.client — HttpMetadataClient over httpx."""
from __future__ import annotations

import httpx
import pytest

from workload_certs.errors import MetadataError, MetadataNotFoundError
from workload_certs.metadata.client import HttpMetadataClient
from workload_certs.rotation.gate import fetch_config_status, is_enabled

BASE_URL = "http://metadata.test/computeMetadata/v1/"


class _Server:
    """Scripted responses for an httpx.MockTransport."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(server: _Server, attempts: int = 3, sleeps: list[float] | None = None) -> HttpMetadataClient:
    recorded = sleeps if sleeps is not None else []
    return HttpMetadataClient(
        base_url=BASE_URL,
        attempts=attempts,
        backoff_seconds=0.5,
        transport=httpx.MockTransport(server),
        sleep=recorded.append,
    )


class TestFetchKey:
    def test_returns_body(self) -> None:
        server = _Server(httpx.Response(200, content=b"payload"))
        with _client(server) as client:
            assert client.fetch_key("instance/attributes/foo") == b"payload"

    def test_sends_flavor_header_and_path(self) -> None:
        server = _Server(httpx.Response(200, content=b""))
        with _client(server) as client:
            client.fetch_key("instance/attributes/foo")
        request = server.requests[0]
        assert request.headers["Metadata-Flavor"] == "Google"
        assert request.url.path == "/computeMetadata/v1/instance/attributes/foo"

    def test_404_raises_not_found_without_retry(self) -> None:
        server = _Server(httpx.Response(404), httpx.Response(200))
        with _client(server) as client:
            with pytest.raises(MetadataNotFoundError):
                client.fetch_key("instance/attributes/foo")
        assert len(server.requests) == 1

    def test_client_error_raises_without_retry(self) -> None:
        server = _Server(httpx.Response(403), httpx.Response(200))
        with _client(server) as client:
            with pytest.raises(MetadataError, match="HTTP 403"):
                client.fetch_key("k")
        assert len(server.requests) == 1

    def test_transport_error_is_retried(self) -> None:
        sleeps: list[float] = []
        server = _Server(
            httpx.ConnectError("refused"),
            httpx.Response(503),
            httpx.Response(200, content=b"ok"),
        )
        with _client(server, attempts=3, sleeps=sleeps) as client:
            assert client.fetch_key("k") == b"ok"
        assert sleeps == [0.5, 1.0]

    def test_exhausted_attempts_raise(self) -> None:
        sleeps: list[float] = []
        server = _Server(*(httpx.ConnectError("refused") for _ in range(3)))
        with _client(server, attempts=3, sleeps=sleeps) as client:
            with pytest.raises(MetadataError, match="exhausted 3 attempts"):
                client.fetch_key("k")
        assert len(sleeps) == 2

    def test_undecodable_body_raises_metadata_error(self) -> None:
        server = _Server(
            httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip")),
            httpx.Response(200, content=b"ok"),
        )
        with _client(server) as client:
            with pytest.raises(MetadataError, match="DecodingError"):
                client.fetch_key("k")
        assert len(server.requests) == 1

    def test_not_found_is_metadata_error(self) -> None:
        assert issubclass(MetadataNotFoundError, MetadataError)

    def test_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            HttpMetadataClient(attempts=0)


class TestFetchAttribute:
    def test_decodes_text(self) -> None:
        server = _Server(httpx.Response(200, content=b"true"))
        with _client(server) as client:
            assert client.fetch_attribute("instance/attributes/enable") == "true"


class TestGateOverHttp:
    def _garbled(self) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip"))

    def test_undecodable_enable_attribute_is_disabled(self) -> None:
        with _client(_Server(self._garbled())) as client:
            assert is_enabled(client) is False

    def test_undecodable_config_status_is_unconfigured(self) -> None:
        with _client(_Server(self._garbled())) as client:
            assert fetch_config_status(client) is None
