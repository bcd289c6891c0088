# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-URL uptime and latency counters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class StatsRecord:
    url: str
    checks: int = 0
    successes: int = 0
    total_response_time_ms: int = 0

    def record(self, ok: bool, response_time_ms: int) -> None:
        self.checks += 1
        if ok:
            self.successes += 1
        self.total_response_time_ms += response_time_ms

    @property
    def uptime_percent(self) -> float:
        if self.checks == 0:
            return 0.0
        return 100.0 * self.successes / self.checks

    @property
    def avg_response_time_ms(self) -> float:
        if self.checks == 0:
            return 0.0
        return self.total_response_time_ms / self.checks

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "checks": self.checks,
            "successes": self.successes,
            "uptime_percent": round(self.uptime_percent, 2),
            "avg_response_time_ms": round(self.avg_response_time_ms, 2),
        }
