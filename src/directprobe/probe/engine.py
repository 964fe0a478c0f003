# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe engine: runs one connection lifecycle and packages the outcome."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from datetime import datetime, timezone

from ..config import ProbeSettings, load_probe_settings
from ..errors import ParseAmbiguity, describe_exception
from ..http.parser import ParsedResponse, parse_response
from ..models.request import DEFAULT_WAIT_MS, RequestSpec, TlsVersion
from ..models.result import (
    STATUS_EXCEPTION,
    STATUS_INITIALIZED,
    CertificateInfo,
    ProbeResponse,
    ProbeResult,
)
from ..transport.connector import open_connection
from ..transport.stream import collect_response, transmit_request
from ..transport.tls import InsecureTrustPolicy, extract_certificate, resolve_server_name, upgrade_to_tls

logger = logging.getLogger(__name__)


class ProbeEngine:
    """
    Send raw requests straight to an address and capture what comes back.

    ``run`` never raises: every failure is reported on the returned ProbeResult
    with ``status_code`` 999. Engines hold no per-probe state and may be shared.
    """

    def __init__(self, settings: ProbeSettings | None = None, trust_policy: InsecureTrustPolicy | None = None):
        self.settings = settings or load_probe_settings()
        self.trust_policy = trust_policy or InsecureTrustPolicy(allow_legacy=self.settings.allow_legacy_tls)

    def run(self, spec: RequestSpec) -> ProbeResult:
        timestamp = datetime.now(timezone.utc)
        target = f"{spec.address}:{spec.port}"
        certificate: CertificateInfo | None = None
        tls_protocol: str | None = None
        raw = b""

        try:
            with ExitStack() as stack:
                stream = stack.enter_context(open_connection(spec.address, spec.port, settings=self.settings))
                if spec.use_tls:
                    stream = stack.enter_context(
                        upgrade_to_tls(
                            stream,
                            spec.tls_version,
                            server_name=resolve_server_name(spec.address, spec.server_name),
                            settings=self.settings,
                            trust_policy=self.trust_policy,
                        )
                    )
                    tls_protocol = stream.version()
                    if spec.include_certificate:
                        certificate = extract_certificate(stream)
                transmit_request(stream, spec.request)
                raw = collect_response(stream, spec.wait_ms, settings=self.settings)
                parsed = parse_response(raw, full_response=spec.full_response)
        except Exception as exc:  # noqa: BLE001
            logger.info("Probe of %s failed: %s", target, exc)
            return self._failure(spec, timestamp, exc, certificate=certificate, tls_protocol=tls_protocol, raw=raw)

        if parsed.status_code == STATUS_EXCEPTION:
            exc = ParseAmbiguity("peer reported status 999, which is reserved for probe failures")
            return self._failure(spec, timestamp, exc, certificate=certificate, tls_protocol=tls_protocol, raw=raw)

        logger.debug("Probe of %s finished with status %s", target, parsed.status_code)
        return self._success(spec, timestamp, parsed, certificate=certificate, tls_protocol=tls_protocol, raw=raw)

    def _success(
        self,
        spec: RequestSpec,
        timestamp: datetime,
        parsed: ParsedResponse,
        *,
        certificate: CertificateInfo | None,
        tls_protocol: str | None,
        raw: bytes,
    ) -> ProbeResult:
        return ProbeResult(
            settings=spec,
            timestamp=timestamp,
            request=spec.request,
            response=ProbeResponse(certificate=certificate, body=parsed.body, headers=parsed.headers),
            status_code=parsed.status_code if parsed.status_code is not None else STATUS_INITIALIZED,
            protocol=parsed.protocol,
            reason=parsed.reason,
            tls_protocol=tls_protocol,
            raw_response=raw,
        )

    def _failure(
        self,
        spec: RequestSpec,
        timestamp: datetime,
        exc: BaseException,
        *,
        certificate: CertificateInfo | None,
        tls_protocol: str | None,
        raw: bytes,
    ) -> ProbeResult:
        return ProbeResult(
            settings=spec,
            timestamp=timestamp,
            request=spec.request,
            response=ProbeResponse(certificate=certificate),
            status_code=STATUS_EXCEPTION,
            exception=describe_exception(exc),
            tls_protocol=tls_protocol,
            raw_response=raw,
        )


def send_raw_request(
    address: str,
    port: int,
    request: bytes,
    *,
    use_tls: bool = False,
    tls_version: TlsVersion | str = TlsVersion.TLS12,
    include_certificate: bool = False,
    full_response: bool = False,
    wait_ms: int = DEFAULT_WAIT_MS,
    server_name: str | None = None,
    settings: ProbeSettings | None = None,
) -> ProbeResult:
    """
    One-shot helper around ProbeEngine.

    Invalid arguments raise ValueError/TypeError before anything is sent; once
    the probe starts, failures are reported on the result instead.
    """
    spec = RequestSpec(
        address=address,
        port=port,
        request=request,
        use_tls=use_tls,
        tls_version=tls_version,
        include_certificate=include_certificate,
        full_response=full_response,
        wait_ms=wait_ms,
        server_name=server_name,
    )
    return ProbeEngine(settings).run(spec)


__all__ = ["ProbeEngine", "send_raw_request"]
