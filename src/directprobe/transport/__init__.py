# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport layer exports."""

from .connector import connect_host, open_connection
from .stream import collect_response, transmit_request
from .tls import (
    InsecureTrustPolicy,
    certificate_from_der,
    extract_certificate,
    resolve_server_name,
    upgrade_to_tls,
)

__all__ = [
    "InsecureTrustPolicy",
    "certificate_from_der",
    "collect_response",
    "connect_host",
    "extract_certificate",
    "open_connection",
    "resolve_server_name",
    "transmit_request",
    "upgrade_to_tls",
]
