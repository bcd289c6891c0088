# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Concurrent probing engine: worker pool, round scheduling and statistics."""

from .pool import WorkerPool
from .scheduler import ResultSink, RoundCallback, RoundScheduler, SchedulerState
from .stats import StatsAggregator

__all__ = [
    "ResultSink",
    "RoundCallback",
    "RoundScheduler",
    "SchedulerState",
    "StatsAggregator",
    "WorkerPool",
]
