# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TCP connection setup."""

from __future__ import annotations

import logging
import socket

from ..config import ProbeSettings, load_probe_settings
from ..errors import ConnectError

logger = logging.getLogger(__name__)


def connect_host(address: str) -> str:
    """Strip URL-style brackets from an IPv6 literal such as ``[::1]``."""
    if address.startswith("[") and address.endswith("]"):
        return address[1:-1]
    return address


def open_connection(address: str, port: int, *, settings: ProbeSettings | None = None) -> socket.socket:
    """
    Open a TCP connection to ``address:port``.

    The returned socket is owned by the caller and must be closed by it.
    """
    settings = settings or load_probe_settings()
    host = connect_host(address)
    logger.debug("Connecting to %s:%d (timeout %.1fs)", host, port, settings.connect_timeout)
    try:
        sock = socket.create_connection((host, port), timeout=settings.connect_timeout)
    except OSError as exc:
        raise ConnectError(f"could not connect to {address}:{port}", cause=exc) from exc
    sock.settimeout(settings.io_timeout)
    return sock


__all__ = ["connect_host", "open_connection"]
