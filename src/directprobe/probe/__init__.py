# SPDX-FileCopyrightText: 2025 The directprobe Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe engine exports."""

from .engine import ProbeEngine, send_raw_request

__all__ = ["ProbeEngine", "send_raw_request"]
