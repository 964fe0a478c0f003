# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum


class ErrorCategory(str, Enum):
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    TIMEOUT = "TIMEOUT"
    TLS_ERROR = "TLS_ERROR"
    WRITE_ERROR = "WRITE_ERROR"
    READ_ERROR = "READ_ERROR"
    PARSE_AMBIGUITY = "PARSE_AMBIGUITY"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class ProbeError(Exception):
    """Base class for failures raised by a probe pipeline stage."""

    category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ConnectError(ProbeError):
    """Name resolution or TCP connect failure."""

    category = ErrorCategory.CONNECTION_ERROR


class TlsError(ProbeError):
    """TLS handshake failure or unsupported protocol version."""

    category = ErrorCategory.TLS_ERROR


class WriteError(ProbeError):
    category = ErrorCategory.WRITE_ERROR


class ReadError(ProbeError):
    category = ErrorCategory.READ_ERROR


class ParseAmbiguity(ProbeError):
    """The first response line is not an HTTP status line."""

    category = ErrorCategory.PARSE_AMBIGUITY


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map probe and socket/ssl exceptions to ErrorCategory.

    For ProbeError the underlying cause wins when it is more specific than the
    stage category (e.g. a connect timeout or a DNS failure).
    """
    if isinstance(exc, ProbeError):
        if exc.cause is not None and isinstance(exc, ConnectError):
            cause_category = categorize_exception(exc.cause)
            if cause_category in (ErrorCategory.DNS_ERROR, ErrorCategory.TIMEOUT):
                return cause_category
        return exc.category

    if isinstance(exc, (ssl.SSLError, ssl.CertificateError)):
        return ErrorCategory.TLS_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (socket.timeout, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ConnectionError, OSError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "Name resolution failure",
        ErrorCategory.TIMEOUT: "Network timeout during probe",
        ErrorCategory.TLS_ERROR: "TLS handshake failure",
        ErrorCategory.WRITE_ERROR: "Failed to transmit request",
        ErrorCategory.READ_ERROR: "Failed to read response",
        ErrorCategory.PARSE_AMBIGUITY: "Response is not an HTTP status line",
        ErrorCategory.UNKNOWN_ERROR: "Unexpected error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")


def describe_exception(exc: BaseException) -> str:
    """Render an exception as the single-line description stored on a ProbeResult."""
    category = categorize_exception(exc)
    detail = str(exc).strip()
    cause = exc.cause if isinstance(exc, ProbeError) else None
    if cause is not None:
        cause_detail = str(cause).strip() or type(cause).__name__
        if cause_detail not in detail:
            detail = f"{detail}: {cause_detail}" if detail else cause_detail
    reason = error_category_to_reason(category)
    if not detail:
        detail = type(exc).__name__
    return f"{type(exc).__name__} ({reason}): {detail}"


__all__ = [
    "ConnectError",
    "ErrorCategory",
    "ParseAmbiguity",
    "ProbeError",
    "ReadError",
    "TlsError",
    "WriteError",
    "categorize_exception",
    "describe_exception",
    "error_category_to_reason",
]
