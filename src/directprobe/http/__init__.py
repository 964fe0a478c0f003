# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP response parsing exports."""

from .headers import header_value, set_header
from .parser import (
    ParsedResponse,
    StatusLine,
    decode_response,
    parse_header_line,
    parse_response,
    parse_status_line,
)

__all__ = [
    "ParsedResponse",
    "StatusLine",
    "decode_response",
    "header_value",
    "parse_header_line",
    "parse_response",
    "parse_status_line",
    "set_header",
]
