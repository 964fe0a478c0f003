# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import dataclasses
from datetime import datetime, timezone

import pytest

from directprobe.models import (
    DEFAULT_WAIT_MS,
    STATUS_EXCEPTION,
    ProbeResponse,
    ProbeResult,
    RequestSpec,
    TlsVersion,
)

NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _spec(**kwargs) -> RequestSpec:
    kwargs.setdefault("address", "10.0.0.5")
    kwargs.setdefault("port", 443)
    kwargs.setdefault("request", b"GET / HTTP/1.1\r\nHost: www.example.test\r\n\r\n")
    return RequestSpec(**kwargs)


def test_request_spec_defaults():
    spec = _spec()
    assert spec.use_tls is False
    assert spec.tls_version is TlsVersion.TLS12
    assert spec.include_certificate is False
    assert spec.full_response is False
    assert spec.wait_ms == DEFAULT_WAIT_MS == 200
    assert spec.server_name is None


def test_request_spec_coerces_tls_version_and_buffers():
    spec = _spec(tls_version="tls13", request=bytearray(b"PING\r\n"))
    assert spec.tls_version is TlsVersion.TLS13
    assert spec.request == b"PING\r\n"
    assert isinstance(spec.request, bytes)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"port": 0},
        {"port": 65536},
        {"port": True},
        {"address": ""},
        {"address": "   "},
        {"wait_ms": -1},
        {"tls_version": "tls14"},
    ],
)
def test_request_spec_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        _spec(**kwargs)


def test_request_spec_rejects_text_request():
    with pytest.raises(TypeError):
        _spec(request="GET / HTTP/1.1\r\n\r\n")


def test_request_spec_is_immutable():
    spec = _spec()
    with pytest.raises(dataclasses.FrozenInstanceError):
        spec.port = 80  # type: ignore[misc]


def test_request_spec_settings_echo():
    spec = _spec(use_tls=True, tls_version=TlsVersion.TLS11, include_certificate=True, wait_ms=500, server_name="www.example.test")
    assert spec.settings() == {
        "address": "10.0.0.5",
        "port": 443,
        "useTls": True,
        "tlsVersion": "tls11",
        "includeCertificate": True,
        "fullResponse": False,
        "waitMs": 500,
        "serverName": "www.example.test",
    }


def test_probe_response_headers_are_read_only_snapshot():
    source = {"Server": "nginx"}
    response = ProbeResponse(headers=source)
    source["Server"] = "changed"

    assert response.headers["Server"] == "nginx"
    with pytest.raises(TypeError):
        response.headers["X-New"] = "1"  # type: ignore[index]
    assert response.header("server") == "nginx"


def test_probe_result_requires_exception_exactly_for_999():
    spec = _spec()
    with pytest.raises(ValueError):
        ProbeResult(settings=spec, timestamp=NOW, request=spec.request, status_code=STATUS_EXCEPTION)
    with pytest.raises(ValueError):
        ProbeResult(settings=spec, timestamp=NOW, request=spec.request, status_code=200, exception="boom")


def test_probe_result_defaults_are_empty():
    spec = _spec()
    result = ProbeResult(settings=spec, timestamp=NOW, request=spec.request)

    assert result.status_code == 0
    assert result.exception is None
    assert result.response.body == ""
    assert dict(result.response.headers) == {}
    assert result.response.certificate is None


def test_probe_result_to_dict_shape():
    spec = _spec()
    result = ProbeResult(
        settings=spec,
        timestamp=NOW,
        request=spec.request,
        response=ProbeResponse(body="ok", headers={"Content-Length": "2"}),
        status_code=200,
    )

    data = result.to_dict()

    assert set(data) == {"settings", "timestamp", "request", "response", "statusCode"}
    assert data["timestamp"] == "2025-01-02T03:04:05+00:00"
    assert data["statusCode"] == 200
    assert data["response"] == {"body": "ok", "headers": {"Content-Length": "2"}}
    assert data["settings"]["waitMs"] == 200


def test_failed_result_to_dict_includes_exception():
    spec = _spec()
    result = ProbeResult(
        settings=spec,
        timestamp=NOW,
        request=spec.request,
        status_code=STATUS_EXCEPTION,
        exception="ConnectError (Network connectivity issue): refused",
    )

    data = result.to_dict()

    assert data["statusCode"] == 999
    assert data["exception"].startswith("ConnectError")
    assert result.failed is True
