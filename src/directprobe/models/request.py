# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_WAIT_MS = 200


class TlsVersion(str, Enum):
    SSL2 = "ssl2"
    SSL3 = "ssl3"
    TLS = "tls"
    TLS11 = "tls11"
    TLS12 = "tls12"
    TLS13 = "tls13"


@dataclass(frozen=True)
class RequestSpec:
    """
    Everything needed to run one probe.

    ``request`` is sent to ``address:port`` exactly as given; it is never
    parsed, normalized or completed with extra headers.
    """

    address: str
    port: int
    request: bytes
    use_tls: bool = False
    tls_version: TlsVersion = TlsVersion.TLS12
    include_certificate: bool = False
    full_response: bool = False
    wait_ms: int = DEFAULT_WAIT_MS
    server_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.address, str) or not self.address.strip():
            raise ValueError("address must be a non-empty host name or IP literal")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 1 <= self.port <= 65535:
            raise ValueError(f"port must be an integer between 1 and 65535, got {self.port!r}")
        if isinstance(self.request, (bytearray, memoryview)):
            object.__setattr__(self, "request", bytes(self.request))
        elif not isinstance(self.request, bytes):
            raise TypeError(f"request must be bytes, got {type(self.request).__name__}")
        try:
            object.__setattr__(self, "tls_version", TlsVersion(self.tls_version))
        except ValueError:
            allowed = ", ".join(v.value for v in TlsVersion)
            raise ValueError(f"tls_version must be one of {allowed}, got {self.tls_version!r}") from None
        if isinstance(self.wait_ms, bool) or not isinstance(self.wait_ms, int) or self.wait_ms < 0:
            raise ValueError(f"wait_ms must be a non-negative integer, got {self.wait_ms!r}")

    def settings(self) -> dict[str, Any]:
        """Echo of the options this probe ran with, keyed as in the serialized result."""
        return {
            "address": self.address,
            "port": self.port,
            "useTls": self.use_tls,
            "tlsVersion": self.tls_version.value,
            "includeCertificate": self.include_certificate,
            "fullResponse": self.full_response,
            "waitMs": self.wait_ms,
            "serverName": self.server_name,
        }


__all__ = ["DEFAULT_WAIT_MS", "RequestSpec", "TlsVersion"]
