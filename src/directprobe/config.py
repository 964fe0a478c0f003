# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for directprobe."""

import os
from dataclasses import dataclass


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ProbeSettings:
    """Transport defaults shared by every probe an engine runs."""

    connect_timeout: float = 10.0
    io_timeout: float = 10.0
    max_response_bytes: int = 16 * 1024 * 1024
    recv_chunk_size: int = 64 * 1024
    allow_legacy_tls: bool = True

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        connect_timeout = _float_env("DIRECTPROBE_CONNECT_TIMEOUT", cls.connect_timeout)
        if connect_timeout <= 0:
            connect_timeout = cls.connect_timeout
        io_timeout = _float_env("DIRECTPROBE_IO_TIMEOUT", cls.io_timeout)
        if io_timeout <= 0:
            io_timeout = cls.io_timeout
        max_response_bytes = _int_env("DIRECTPROBE_MAX_RESPONSE_BYTES", cls.max_response_bytes)
        if max_response_bytes <= 0:
            max_response_bytes = cls.max_response_bytes
        recv_chunk_size = _int_env("DIRECTPROBE_RECV_CHUNK_SIZE", cls.recv_chunk_size)
        if recv_chunk_size <= 0:
            recv_chunk_size = cls.recv_chunk_size
        return cls(
            connect_timeout=connect_timeout,
            io_timeout=io_timeout,
            max_response_bytes=max_response_bytes,
            recv_chunk_size=recv_chunk_size,
            allow_legacy_tls=_bool_env("DIRECTPROBE_ALLOW_LEGACY_TLS", cls.allow_legacy_tls),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
