# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for sitecheck."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .probe import (
    HeaderCheck,
    HeaderMatch,
    Job,
    OutcomeKind,
    ProbeOutcome,
    ProbeResult,
    ProbeTarget,
    ValidationReason,
)
from .stats import StatsRecord

__all__ = [
    "HeaderCheck",
    "HeaderMatch",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "Job",
    "OutcomeKind",
    "ProbeOutcome",
    "ProbeResult",
    "ProbeTarget",
    "StatsRecord",
    "ValidationReason",
]
