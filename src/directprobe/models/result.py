# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for probe results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from ..http.headers import header_value
from .request import RequestSpec

STATUS_INITIALIZED = 0
STATUS_EXCEPTION = 999


@dataclass(frozen=True)
class CertificateInfo:
    """Descriptor of the peer certificate presented during the TLS handshake."""

    subject: str
    issuer: str
    not_before: datetime
    not_after: datetime
    serial_number: str
    thumbprint: str
    sha256_fingerprint: str = ""
    version: str = ""
    signature_algorithm: str | None = None
    subject_alt_names: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "issuer": self.issuer,
            "notBefore": self.not_before.isoformat(),
            "notAfter": self.not_after.isoformat(),
            "serialNumber": self.serial_number,
            "thumbprint": self.thumbprint,
            "sha256Fingerprint": self.sha256_fingerprint,
            "version": self.version,
            "signatureAlgorithm": self.signature_algorithm,
            "subjectAltNames": list(self.subject_alt_names),
        }


@dataclass(frozen=True)
class ProbeResponse:
    certificate: CertificateInfo | None = None
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Snapshot into a read-only view so a built result cannot be mutated.
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return header_value(self.headers, name, default)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"body": self.body, "headers": dict(self.headers)}
        if self.certificate is not None:
            data["certificate"] = self.certificate.to_dict()
        return data


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of a single probe.

    ``status_code`` is 0 when no status line was parsed, the numeric HTTP status
    when one was, and 999 when a pipeline stage failed. ``exception`` is set if
    and only if ``status_code`` is 999.
    """

    settings: RequestSpec
    timestamp: datetime
    request: bytes
    response: ProbeResponse = field(default_factory=ProbeResponse)
    status_code: int = STATUS_INITIALIZED
    exception: str | None = None
    protocol: str | None = None
    reason: str | None = None
    tls_protocol: str | None = None
    raw_response: bytes = b""

    def __post_init__(self) -> None:
        if (self.status_code == STATUS_EXCEPTION) != (self.exception is not None):
            raise ValueError("exception must be set exactly when status_code is 999")
        if self.status_code < 0:
            raise ValueError(f"status_code must not be negative, got {self.status_code}")

    @property
    def failed(self) -> bool:
        return self.status_code == STATUS_EXCEPTION

    @property
    def succeeded(self) -> bool:
        return not self.failed and self.status_code != STATUS_INITIALIZED

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{settings, timestamp, request, response, statusCode, exception?}`` shape."""
        data: dict[str, Any] = {
            "settings": self.settings.settings(),
            "timestamp": self.timestamp.isoformat(),
            # latin-1 maps every byte to one code point, so arbitrary payloads survive.
            "request": self.request.decode("latin-1"),
            "response": self.response.to_dict(),
            "statusCode": self.status_code,
        }
        if self.exception is not None:
            data["exception"] = self.exception
        if self.protocol is not None:
            data["protocol"] = self.protocol
        if self.reason is not None:
            data["reason"] = self.reason
        if self.tls_protocol is not None:
            data["tlsProtocol"] = self.tls_protocol
        return data


__all__ = [
    "STATUS_EXCEPTION",
    "STATUS_INITIALIZED",
    "CertificateInfo",
    "ProbeResponse",
    "ProbeResult",
]
