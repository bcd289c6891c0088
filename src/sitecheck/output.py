# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Result and summary rendering for the CLI."""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import TextIO

from .models.probe import ProbeResult
from .models.stats import StatsRecord


def format_result(result: ProbeResult) -> str:
    return json.dumps(result.to_dict(), sort_keys=False)


def print_result(result: ProbeResult, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    out.write(format_result(result) + "\n")
    out.flush()


def format_summary(records: Sequence[StatsRecord]) -> str:
    lines = ["--- stats summary ---"]
    for record in records:
        lines.append(
            f"{record.url} -> checks: {record.checks}, uptime: {record.uptime_percent:.1f}%, "
            f"avg_rt_ms: {record.avg_response_time_ms:.1f}"
        )
    lines.append("---------------------")
    return "\n".join(lines)


def print_summary(records: Sequence[StatsRecord], stream: TextIO | None = None, *, as_json: bool = False) -> None:
    out = stream or sys.stdout
    if as_json:
        out.write(json.dumps({"summary": [record.to_dict() for record in records]}) + "\n")
    else:
        out.write(format_summary(records) + "\n")
    out.flush()


__all__ = ["format_result", "format_summary", "print_result", "print_summary"]
