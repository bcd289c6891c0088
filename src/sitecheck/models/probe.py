# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe targets, outcomes and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class HeaderMatch(str, Enum):
    EXACT = "exact"
    IGNORE_CASE = "ignore_case"
    CONTAINS = "contains"


@dataclass(frozen=True)
class HeaderCheck:
    """A response header that must be present with a matching value."""

    name: str
    expected: str
    match: HeaderMatch = HeaderMatch.EXACT

    def matches(self, value: str) -> bool:
        if self.match == HeaderMatch.IGNORE_CASE:
            return value.lower() == self.expected.lower()
        if self.match == HeaderMatch.CONTAINS:
            return self.expected in value
        return value == self.expected


@dataclass(frozen=True)
class ProbeTarget:
    url: str
    required_headers: tuple[HeaderCheck, ...] = ()
    required_body_substring: str | None = None

    @property
    def needs_body(self) -> bool:
        return bool(self.required_body_substring)


class OutcomeKind(str, Enum):
    SUCCESS = "SUCCESS"
    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    TIMEOUT = "TIMEOUT"


class ValidationReason(str, Enum):
    HEADER_MISMATCH = "HEADER_MISMATCH"
    BODY_MISMATCH = "BODY_MISMATCH"


CANCELLED_MESSAGE = "cancelled"


@dataclass(frozen=True)
class ProbeOutcome:
    """
    Classified result of one probe attempt.

    `kind` selects the variant: SUCCESS carries `status_code`, VALIDATION_FAILURE
    carries `reason` (and the observed status), TRANSPORT_ERROR carries `message`,
    TIMEOUT carries nothing beyond an optional message.
    """

    kind: OutcomeKind
    status_code: int | None = None
    reason: ValidationReason | None = None
    message: str | None = None
    error_category: str | None = None

    @classmethod
    def success(cls, status_code: int) -> "ProbeOutcome":
        return cls(kind=OutcomeKind.SUCCESS, status_code=status_code)

    @classmethod
    def validation_failure(
        cls, reason: ValidationReason, *, status_code: int | None = None, message: str | None = None
    ) -> "ProbeOutcome":
        return cls(kind=OutcomeKind.VALIDATION_FAILURE, reason=reason, status_code=status_code, message=message)

    @classmethod
    def transport_error(cls, message: str, *, error_category: str | None = None) -> "ProbeOutcome":
        return cls(kind=OutcomeKind.TRANSPORT_ERROR, message=message, error_category=error_category)

    @classmethod
    def timeout(cls, message: str | None = None) -> "ProbeOutcome":
        return cls(kind=OutcomeKind.TIMEOUT, message=message, error_category="TIMEOUT")

    @classmethod
    def cancelled(cls) -> "ProbeOutcome":
        return cls(kind=OutcomeKind.TRANSPORT_ERROR, message=CANCELLED_MESSAGE, error_category="CANCELLED")

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.kind in (OutcomeKind.TIMEOUT, OutcomeKind.TRANSPORT_ERROR) and not self.is_cancelled

    @property
    def is_cancelled(self) -> bool:
        return self.kind == OutcomeKind.TRANSPORT_ERROR and self.error_category == "CANCELLED"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProbeResult:
    target: ProbeTarget
    outcome: ProbeOutcome
    attempts: int
    response_time_ms: int
    timestamp: datetime = field(default_factory=utc_now)
    round_id: int = 0

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {self.attempts}")
        if self.response_time_ms < 0:
            raise ValueError(f"response_time_ms must be >= 0, got {self.response_time_ms}")

    @classmethod
    def cancelled(cls, target: ProbeTarget, *, round_id: int = 0) -> "ProbeResult":
        """Result for a job that was dequeued after cancellation and never probed."""
        return cls(target=target, outcome=ProbeOutcome.cancelled(), attempts=1, response_time_ms=0, round_id=round_id)

    @property
    def url(self) -> str:
        return self.target.url

    @property
    def ok(self) -> bool:
        return self.outcome.is_success

    def to_dict(self) -> dict[str, Any]:
        outcome = self.outcome
        return {
            "url": self.target.url,
            "round": self.round_id,
            "outcome": outcome.kind.value,
            "status_code": outcome.status_code,
            "reason": outcome.reason.value if outcome.reason else None,
            "message": outcome.message,
            "attempts": self.attempts,
            "response_time_ms": self.response_time_ms,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }


@dataclass(frozen=True)
class Job:
    target: ProbeTarget
    round_id: int
