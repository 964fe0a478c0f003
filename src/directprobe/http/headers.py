# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header mapping utilities.

HTTP header field names are case-insensitive (RFC 9110), but probe results report
names exactly as the server sent them. Duplicates are folded case-insensitively:
the first spelling and position are kept and the last value wins.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping


def set_header(headers: MutableMapping[str, str], name: str, value: str) -> None:
    """Insert ``name`` or overwrite the value of an existing case-insensitive match."""
    lower = name.lower()
    for existing in headers:
        if existing.lower() == lower:
            headers[existing] = value
            return
    headers[name] = value


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths the exact key before falling back to a full scan.
    """
    if not headers or not name:
        return default

    if name in headers:
        value = headers[name]
        return default if value is None else str(value).strip()

    lower = name.lower()
    for key, value in headers.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


__all__ = ["header_value", "set_header"]
