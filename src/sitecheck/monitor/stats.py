# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cumulative per-URL statistics across rounds."""

from __future__ import annotations

from dataclasses import replace

from ..models.probe import ProbeResult
from ..models.stats import StatsRecord


class StatsAggregator:
    """
    Running uptime/latency history keyed by URL, in first-seen order.

    Not thread-safe: only the coordinating thread calls `update`. Counters are
    never reset for the lifetime of the aggregator. Results for jobs that were
    cancelled before being probed are not counted as checks.
    """

    def __init__(self) -> None:
        self._records: dict[str, StatsRecord] = {}

    def update(self, result: ProbeResult) -> None:
        if result.outcome.is_cancelled:
            return
        record = self._records.get(result.url)
        if record is None:
            record = StatsRecord(url=result.url)
            self._records[result.url] = record
        record.record(result.ok, result.response_time_ms)

    def snapshot(self) -> list[StatsRecord]:
        return [replace(record) for record in self._records.values()]

    def get(self, url: str) -> StatsRecord | None:
        record = self._records.get(url)
        return replace(record) if record is not None else None

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["StatsAggregator"]
