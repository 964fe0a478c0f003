# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Split a captured raw response into status line, headers and body."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..errors import ParseAmbiguity
from .headers import set_header

logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_STATUS_LINE_RE = re.compile(
    r"^(?P<protocol>[A-Za-z][A-Za-z0-9.+-]*/\d+(?:\.\d+)?)[ \t]+(?P<code>\d{3})(?:[ \t]+(?P<reason>.*))?$"
)


@dataclass(frozen=True)
class StatusLine:
    protocol: str
    status_code: int
    reason: str = ""


@dataclass
class ParsedResponse:
    status_code: int | None = None
    protocol: str | None = None
    reason: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


def decode_response(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def parse_status_line(line: str) -> StatusLine:
    """Parse ``<protocol> <code> <reason>``; raise ParseAmbiguity when the line does not fit."""
    match = _STATUS_LINE_RE.match(line.strip())
    if not match:
        preview = line[:80]
        raise ParseAmbiguity(f"first response line is not an HTTP status line: {preview!r}")
    return StatusLine(
        protocol=match.group("protocol"),
        status_code=int(match.group("code")),
        reason=(match.group("reason") or "").strip(),
    )


def parse_header_line(line: str) -> tuple[str, str] | None:
    name, sep, value = line.partition(":")
    name = name.strip()
    if not sep or not name:
        return None
    return name, value.strip()


def parse_response(raw: bytes, *, full_response: bool) -> ParsedResponse:
    """
    Parse a raw response buffer.

    An empty buffer yields an empty ParsedResponse. A first line that is not a
    status line leaves ``status_code`` unset; headers and body are still split
    out of the remaining lines.
    """
    parsed = ParsedResponse()
    if not raw:
        return parsed

    lines = _LINE_SPLIT_RE.split(decode_response(raw))

    try:
        status = parse_status_line(lines[0])
    except ParseAmbiguity as exc:
        logger.warning("%s", exc)
    else:
        parsed.status_code = status.status_code
        parsed.protocol = status.protocol
        parsed.reason = status.reason

    index = 1
    while index < len(lines):
        line = lines[index]
        index += 1
        if line == "":
            break
        header = parse_header_line(line)
        if header is None:
            logger.debug("Skipping malformed header line %r", line)
            continue
        set_header(parsed.headers, *header)

    if full_response:
        parsed.body = "\n".join(line for line in lines[index:] if line.strip())

    return parsed


__all__ = [
    "ParsedResponse",
    "StatusLine",
    "decode_response",
    "parse_header_line",
    "parse_response",
    "parse_status_line",
]
