# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request transmission and settle-then-drain response collection."""

from __future__ import annotations

import logging
import socket
import ssl
import time

from ..config import ProbeSettings, load_probe_settings
from ..errors import ReadError, WriteError

logger = logging.getLogger(__name__)


def transmit_request(stream: socket.socket, payload: bytes) -> int:
    """Write ``payload`` to the stream byte-for-byte and return the number of bytes sent."""
    if not payload:
        return 0
    try:
        stream.sendall(payload)
    except OSError as exc:
        raise WriteError(f"failed to send {len(payload)} request bytes", cause=exc) from exc
    logger.debug("Sent %d request bytes", len(payload))
    return len(payload)


def collect_response(stream: socket.socket, wait_ms: int, *, settings: ProbeSettings | None = None) -> bytes:
    """
    Sleep for ``wait_ms`` and then read whatever the peer has sent so far.

    The delay is a fixed settle interval, not a completion signal: bytes that
    arrive after the drain are not collected. Reads never block; an idle stream
    simply ends the drain, so an empty buffer is a valid result.
    """
    settings = settings or load_probe_settings()
    if wait_ms > 0:
        time.sleep(wait_ms / 1000)

    buffer = bytearray()
    stream.setblocking(False)
    while True:
        try:
            chunk = stream.recv(settings.recv_chunk_size)
        except (BlockingIOError, ssl.SSLWantReadError, ssl.SSLWantWriteError):
            break
        except ssl.SSLZeroReturnError:
            break
        except (ConnectionResetError, ConnectionAbortedError) as exc:
            if not buffer:
                raise ReadError("connection reset before any response bytes arrived", cause=exc) from exc
            logger.debug("Peer reset the connection after %d bytes: %s", len(buffer), exc)
            break
        except OSError as exc:
            raise ReadError(f"failed to read response after {len(buffer)} bytes", cause=exc) from exc
        if not chunk:
            break
        remaining = settings.max_response_bytes - len(buffer)
        if len(chunk) > remaining:
            buffer.extend(chunk[:remaining])
            logger.warning("Response truncated at %d bytes", settings.max_response_bytes)
            break
        buffer.extend(chunk)
        if len(buffer) >= settings.max_response_bytes:
            logger.warning("Response reached the %d byte cap; any further bytes were not read", settings.max_response_bytes)
            break

    logger.debug("Collected %d response bytes", len(buffer))
    return bytes(buffer)


__all__ = ["collect_response", "transmit_request"]
