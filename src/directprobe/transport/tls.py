# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
TLS session setup and peer certificate extraction.

Probes target individual hosts by address, so the presented certificate
routinely fails name or chain validation. Every handshake therefore runs under
InsecureTrustPolicy, which accepts any chain. This is the intended behaviour of
the tool and never produces an error.
"""

from __future__ import annotations

import ipaddress
import logging
import socket
import ssl
import warnings

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from ..config import ProbeSettings, load_probe_settings
from ..errors import TlsError
from ..models.request import TlsVersion
from ..models.result import CertificateInfo
from .connector import connect_host

logger = logging.getLogger(__name__)

_PROTOCOL_VERSIONS: dict[TlsVersion, ssl.TLSVersion | None] = {
    TlsVersion.SSL2: None,
    TlsVersion.SSL3: ssl.TLSVersion.SSLv3,
    TlsVersion.TLS: ssl.TLSVersion.TLSv1,
    TlsVersion.TLS11: ssl.TLSVersion.TLSv1_1,
    TlsVersion.TLS12: ssl.TLSVersion.TLSv1_2,
    TlsVersion.TLS13: ssl.TLSVersion.TLSv1_3,
}

_LEGACY_VERSIONS = {TlsVersion.SSL3, TlsVersion.TLS, TlsVersion.TLS11}


class InsecureTrustPolicy:
    """Trust policy that accepts every certificate chain without verification."""

    def __init__(self, *, allow_legacy: bool = True):
        self.allow_legacy = allow_legacy

    def build_context(self, version: TlsVersion) -> ssl.SSLContext:
        """Return a client context pinned to exactly ``version``."""
        protocol = _PROTOCOL_VERSIONS.get(version)
        if protocol is None:
            raise TlsError(f"unsupported protocol version {version.value}: not available in the local TLS library")

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        try:
            with warnings.catch_warnings():
                # Setting SSLv3, TLSv1 or TLSv1_1 emits DeprecationWarning.
                warnings.simplefilter("ignore", DeprecationWarning)
                context.minimum_version = protocol
                context.maximum_version = protocol
        except (ValueError, ssl.SSLError) as exc:
            raise TlsError(f"unsupported protocol version {version.value}", cause=exc) from exc

        if version in _LEGACY_VERSIONS and self.allow_legacy:
            try:
                context.set_ciphers("DEFAULT:@SECLEVEL=0")
            except ssl.SSLError as exc:
                logger.debug("Could not lower cipher security level for %s: %s", version.value, exc)
        return context


def resolve_server_name(address: str, server_name: str | None) -> str | None:
    """SNI to send: the explicit name, else the address unless it is an IP literal."""
    if server_name:
        return server_name
    try:
        ipaddress.ip_address(connect_host(address))
    except ValueError:
        return address
    return None


def upgrade_to_tls(
    sock: socket.socket,
    version: TlsVersion,
    *,
    server_name: str | None = None,
    settings: ProbeSettings | None = None,
    trust_policy: InsecureTrustPolicy | None = None,
) -> ssl.SSLSocket:
    """Run a TLS handshake over ``sock`` and return the encrypted stream."""
    settings = settings or load_probe_settings()
    policy = trust_policy or InsecureTrustPolicy(allow_legacy=settings.allow_legacy_tls)
    context = policy.build_context(version)
    logger.debug("Starting %s handshake (SNI %s)", version.value, server_name or "-")
    try:
        tls_sock = context.wrap_socket(sock, server_hostname=server_name)
    except OSError as exc:
        raise TlsError(f"TLS handshake failed ({version.value})", cause=exc) from exc
    tls_sock.settimeout(settings.io_timeout)
    logger.debug("Negotiated %s with cipher %s", tls_sock.version(), (tls_sock.cipher() or ("-",))[0])
    return tls_sock


def _signature_algorithm(cert: x509.Certificate) -> str | None:
    try:
        algorithm = cert.signature_hash_algorithm
    except UnsupportedAlgorithm:
        return None
    return algorithm.name if algorithm is not None else None


def _subject_alt_names(cert: x509.Certificate) -> tuple[str, ...]:
    try:
        extension = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return ()
    names = list(extension.value.get_values_for_type(x509.DNSName))
    names.extend(str(ip) for ip in extension.value.get_values_for_type(x509.IPAddress))
    return tuple(names)


def certificate_from_der(der: bytes) -> CertificateInfo:
    """Build a CertificateInfo from a DER-encoded X.509 certificate."""
    try:
        cert = x509.load_der_x509_certificate(der)
        return CertificateInfo(
            subject=cert.subject.rfc4514_string(),
            issuer=cert.issuer.rfc4514_string(),
            not_before=cert.not_valid_before_utc,
            not_after=cert.not_valid_after_utc,
            serial_number=format(cert.serial_number, "X"),
            thumbprint=cert.fingerprint(hashes.SHA1()).hex().upper(),
            sha256_fingerprint=cert.fingerprint(hashes.SHA256()).hex().upper(),
            version=cert.version.name,
            signature_algorithm=_signature_algorithm(cert),
            subject_alt_names=_subject_alt_names(cert),
        )
    except ValueError as exc:
        raise TlsError("peer certificate could not be decoded", cause=exc) from exc


def extract_certificate(tls_sock: ssl.SSLSocket) -> CertificateInfo | None:
    """Return the peer certificate of an established session, or None when none was sent."""
    try:
        der = tls_sock.getpeercert(binary_form=True)
    except (ValueError, ssl.SSLError) as exc:
        raise TlsError("failed to read peer certificate", cause=exc) from exc
    if not der:
        return None
    return certificate_from_der(der)


__all__ = [
    "InsecureTrustPolicy",
    "certificate_from_der",
    "extract_certificate",
    "resolve_server_name",
    "upgrade_to_tls",
]
