# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
directprobe package entrypoint.

Sends caller-built raw HTTP requests straight to an address and port, with an
optional unverified TLS session, and returns a structured ProbeResult. Useful
for checking a single host behind a load balancer or a freshly deployed
TLS/redirect configuration without going through name resolution.
"""

from .config import ProbeSettings, load_probe_settings
from .errors import (
    ConnectError,
    ErrorCategory,
    ParseAmbiguity,
    ProbeError,
    ReadError,
    TlsError,
    WriteError,
)
from .log import setup_logging
from .models import (
    STATUS_EXCEPTION,
    STATUS_INITIALIZED,
    CertificateInfo,
    ProbeResponse,
    ProbeResult,
    RequestSpec,
    TlsVersion,
)
from .probe import ProbeEngine, send_raw_request
from .transport import InsecureTrustPolicy
from .version import __version__

__all__ = [
    "STATUS_EXCEPTION",
    "STATUS_INITIALIZED",
    "CertificateInfo",
    "ConnectError",
    "ErrorCategory",
    "InsecureTrustPolicy",
    "ParseAmbiguity",
    "ProbeEngine",
    "ProbeError",
    "ProbeResponse",
    "ProbeResult",
    "ProbeSettings",
    "ReadError",
    "RequestSpec",
    "TlsError",
    "TlsVersion",
    "WriteError",
    "load_probe_settings",
    "send_raw_request",
    "setup_logging",
    "__version__",
]
