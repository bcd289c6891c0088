# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
sitecheck package entrypoint.

This package monitors reachability and health of HTTP(S) endpoints with a
bounded pool of worker threads, per-attempt timeouts and retries, and
cumulative uptime/latency statistics across periodic rounds. HTTP behavior is
abstracted behind an injectable client interface, and domain objects are
modeled with typed dataclasses.
"""

from .cancel import CancellationToken
from .config import HttpSettings, MonitorSettings, load_http_settings, load_monitor_settings
from .errors import ConfigError, ErrorCategory, SiteCheckError, TargetError, WorkerPoolError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import (
    HeaderCheck,
    HeaderMatch,
    Job,
    OutcomeKind,
    ProbeOutcome,
    ProbeResult,
    ProbeTarget,
    StatsRecord,
    ValidationReason,
)
from .monitor import RoundScheduler, SchedulerState, StatsAggregator, WorkerPool
from .probe import RetryingProbe, RetryPolicy
from .runtime import SiteCheck
from .targets import build_targets
from .version import __version__

__all__ = [
    "CancellationToken",
    "ConfigError",
    "ErrorCategory",
    "HeaderCheck",
    "HeaderMatch",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "Job",
    "MonitorSettings",
    "OutcomeKind",
    "ProbeOutcome",
    "ProbeResult",
    "ProbeTarget",
    "RetryPolicy",
    "RetryingProbe",
    "RoundScheduler",
    "SchedulerState",
    "SiteCheck",
    "SiteCheckError",
    "StatsAggregator",
    "StatsRecord",
    "StubHttpClient",
    "TargetError",
    "ValidationReason",
    "WorkerPool",
    "WorkerPoolError",
    "build_targets",
    "create_default_http_client",
    "load_http_settings",
    "load_monitor_settings",
    "setup_logging",
    "__version__",
]
