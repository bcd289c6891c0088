# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level sitecheck facade for one-off probes and monitoring runs."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import suppress

from .cancel import CancellationToken
from .config import HttpSettings, MonitorSettings, load_monitor_settings
from .http.client import HttpClient, create_default_http_client
from .models.probe import ProbeResult, ProbeTarget
from .models.stats import StatsRecord
from .monitor.pool import WorkerPool
from .monitor.scheduler import ResultSink, RoundCallback, RoundScheduler
from .monitor.stats import StatsAggregator
from .probe.retry import RetryingProbe


class SiteCheck:
    """
    Convenience wrapper that wires one HTTP client, probe and aggregator.

    Statistics accumulate across every `run()` on the same instance. The
    cancellation token can be raised from any thread (or a signal handler)
    to stop a periodic run after the current round drains.
    """

    def __init__(
        self,
        settings: MonitorSettings | None = None,
        http_client: HttpClient | None = None,
        *,
        http_settings: HttpSettings | None = None,
        cancel: CancellationToken | None = None,
    ):
        self.settings = (settings or load_monitor_settings()).validate()
        self.http_client = http_client or create_default_http_client(http_settings)
        self.cancel = cancel if cancel is not None else CancellationToken()
        self.prober = RetryingProbe.from_settings(self.http_client, self.settings)
        self.aggregator = StatsAggregator()

    def probe(self, target: ProbeTarget | str) -> ProbeResult:
        if isinstance(target, str):
            target = ProbeTarget(url=target)
        return self.prober.probe(target, cancel=self.cancel)

    def run(
        self,
        targets: Sequence[ProbeTarget],
        *,
        sink: ResultSink | None = None,
        on_round_complete: RoundCallback | None = None,
        max_rounds: int | None = None,
    ) -> int:
        """Probe `targets` once, or every `settings.period` seconds until cancelled. Returns completed rounds."""
        if not targets:
            return 0
        pool = WorkerPool(
            self.prober,
            worker_count=min(self.settings.worker_count, len(targets)),
            cancel=self.cancel,
        )
        scheduler = RoundScheduler(
            pool,
            targets,
            period=self.settings.period,
            aggregator=self.aggregator,
            sink=sink,
            on_round_complete=on_round_complete,
            max_rounds=max_rounds,
        )
        return scheduler.run()

    def stats(self) -> list[StatsRecord]:
        return self.aggregator.snapshot()

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> "SiteCheck":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["SiteCheck"]
