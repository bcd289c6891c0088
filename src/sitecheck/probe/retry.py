# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Timeout-bounded, retrying probe around an HttpClient."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..cancel import CancellationToken
from ..config import MonitorSettings
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse
from ..models.probe import OutcomeKind, ProbeOutcome, ProbeResult, ProbeTarget
from .validation import classify_response

logger = logging.getLogger(__name__)

RETRYABLE_KINDS = frozenset({OutcomeKind.TIMEOUT, OutcomeKind.TRANSPORT_ERROR})


@dataclass
class RetryPolicy:
    """
    Which outcomes are retried and how often.

    `retry_on` can only narrow RETRYABLE_KINDS; SUCCESS and VALIDATION_FAILURE
    are always terminal. `retry_delay` is a linear backoff step in seconds.
    """

    max_retries: int = 1
    retry_on: Iterable[OutcomeKind] = field(default_factory=lambda: set(RETRYABLE_KINDS))
    retry_delay: float = 0.0

    @property
    def max_attempts(self) -> int:
        return max(0, self.max_retries) + 1

    def should_retry(self, outcome: ProbeOutcome) -> bool:
        return outcome.is_retryable and outcome.kind in set(self.retry_on)

    @classmethod
    def from_settings(cls, settings: MonitorSettings) -> "RetryPolicy":
        return cls(max_retries=max(0, settings.max_retries), retry_delay=max(0.0, settings.retry_delay))


class RetryingProbe:
    """
    Probe one target: send, classify, and retry transient failures.

    `response_time_ms` on the returned result is the wall time of the attempt
    that produced the final outcome, not the sum over attempts. An attempt
    that returns after `timeout` seconds is classified as TIMEOUT even if the
    client eventually produced a response.
    """

    def __init__(
        self,
        http_client: HttpClient,
        *,
        timeout: float = 5.0,
        retry_policy: RetryPolicy | None = None,
        fail_on_http_error: bool = False,
    ):
        self.http_client = http_client
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.fail_on_http_error = fail_on_http_error

    @classmethod
    def from_settings(cls, http_client: HttpClient, settings: MonitorSettings) -> "RetryingProbe":
        return cls(
            http_client,
            timeout=settings.timeout,
            retry_policy=RetryPolicy.from_settings(settings),
            fail_on_http_error=settings.fail_on_http_error,
        )

    def probe(
        self,
        target: ProbeTarget,
        *,
        round_id: int = 0,
        cancel: CancellationToken | None = None,
    ) -> ProbeResult:
        policy = self.retry_policy
        attempt = 0
        while True:
            attempt += 1
            outcome, elapsed_ms = self._attempt(target)
            if not policy.should_retry(outcome) or attempt >= policy.max_attempts:
                break
            if cancel is not None and cancel.is_cancelled:
                logger.debug("Not retrying %s after attempt %d: cancelled", target.url, attempt)
                break
            logger.debug(
                "Attempt %d/%d for %s failed (%s: %s); retrying",
                attempt,
                policy.max_attempts,
                target.url,
                outcome.kind.value,
                outcome.message,
            )
            delay = policy.retry_delay * attempt
            if delay > 0:
                if cancel is not None:
                    if cancel.wait(delay):
                        break
                else:
                    time.sleep(delay)

        return ProbeResult(
            target=target,
            outcome=outcome,
            attempts=attempt,
            response_time_ms=elapsed_ms,
            round_id=round_id,
        )

    def _attempt(self, target: ProbeTarget) -> tuple[ProbeOutcome, int]:
        request = HttpRequest(url=target.url, timeout=self.timeout, read_body=target.needs_body)
        started = time.perf_counter()
        try:
            response = self.http_client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                url=target.url,
                error_category="UNKNOWN_ERROR",
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )
        elapsed = time.perf_counter() - started
        elapsed_ms = max(0, int(elapsed * 1000))

        outcome = classify_response(target, response, fail_on_http_error=self.fail_on_http_error)
        if outcome.kind != OutcomeKind.TIMEOUT and elapsed > self.timeout:
            outcome = ProbeOutcome.timeout(f"no response within {self.timeout:g}s")
        return outcome, elapsed_ms


__all__ = ["RETRYABLE_KINDS", "RetryPolicy", "RetryingProbe"]
