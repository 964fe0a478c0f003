# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for directprobe."""

from .request import DEFAULT_WAIT_MS, RequestSpec, TlsVersion
from .result import (
    STATUS_EXCEPTION,
    STATUS_INITIALIZED,
    CertificateInfo,
    ProbeResponse,
    ProbeResult,
)

__all__ = [
    "DEFAULT_WAIT_MS",
    "STATUS_EXCEPTION",
    "STATUS_INITIALIZED",
    "CertificateInfo",
    "ProbeResponse",
    "ProbeResult",
    "RequestSpec",
    "TlsVersion",
]
