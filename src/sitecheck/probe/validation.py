# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Classify a single HTTP attempt into a ProbeOutcome."""

from __future__ import annotations

from ..errors import ErrorCategory, error_category_to_reason
from ..http.headers import find_header
from ..http.models import HttpResponse
from ..models.probe import ProbeOutcome, ProbeTarget, ValidationReason


def classify_response(
    target: ProbeTarget,
    response: HttpResponse,
    *,
    fail_on_http_error: bool = False,
) -> ProbeOutcome:
    """
    Turn a raw HttpResponse into exactly one ProbeOutcome variant.

    Header checks run in declaration order before the body check; the first
    failing check decides the outcome.
    """
    if not response.ok:
        category = response.error_category or ErrorCategory.UNKNOWN_ERROR.value
        if category == ErrorCategory.TIMEOUT.value:
            return ProbeOutcome.timeout(response.error_message)
        message = response.error_message or error_category_to_reason(category) or "request error"
        return ProbeOutcome.transport_error(message, error_category=category)

    status_code = int(response.status_code or 0)
    if fail_on_http_error and status_code >= 400:
        return ProbeOutcome.transport_error(f"HTTP {status_code}", error_category="HTTP_STATUS")

    for check in target.required_headers:
        got = find_header(response.headers, check.name)
        if got is None:
            return ProbeOutcome.validation_failure(
                ValidationReason.HEADER_MISMATCH,
                status_code=status_code,
                message=f"missing required header: {check.name}",
            )
        if not check.matches(got):
            return ProbeOutcome.validation_failure(
                ValidationReason.HEADER_MISMATCH,
                status_code=status_code,
                message=f"header mismatch: {check.name} expected '{check.expected}' got '{got}'",
            )

    needle = target.required_body_substring
    if needle and needle not in (response.text or ""):
        message = f"body validation failed: missing substring '{needle}'"
        if response.meta.get("body_truncated"):
            message += " (body truncated)"
        return ProbeOutcome.validation_failure(
            ValidationReason.BODY_MISMATCH,
            status_code=status_code,
            message=message,
        )

    return ProbeOutcome.success(status_code)


__all__ = ["classify_response"]
