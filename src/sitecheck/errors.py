# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class SiteCheckError(Exception):
    """Base class for sitecheck failures that abort a run."""


class ConfigError(SiteCheckError, ValueError):
    """Engine or HTTP settings are out of range."""


class TargetError(SiteCheckError, ValueError):
    """A target URL or check option could not be loaded."""


class WorkerPoolError(SiteCheckError, RuntimeError):
    """A worker thread failed unexpectedly; the round cannot be trusted."""


def _is_dns_failure(exc: BaseException) -> bool:
    cause: BaseException | None = exc
    while cause is not None:
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return True
        cause = cause.__cause__ or cause.__context__
    return False


def _is_tls_failure(exc: BaseException) -> bool:
    cause: BaseException | None = exc
    while cause is not None:
        if isinstance(cause, (ssl.SSLError, ssl.CertificateError)):
            return True
        cause = cause.__cause__ or cause.__context__
    return False


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps socket and ssl errors, so the cause chain is inspected before
    falling back to the httpx class.
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if _is_dns_failure(exc):
        return ErrorCategory.DNS_ERROR

    if _is_tls_failure(exc):
        return ErrorCategory.SSL_ERROR

    if isinstance(
        exc,
        (
            httpx.ConnectError,
            httpx.RemoteProtocolError,
            httpx.NetworkError,
            httpx.ProxyError,
            httpx.TooManyRedirects,
            ConnectionError,
        ),
    ):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | str | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "No response within timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Request error",
        ErrorCategory.NONE: "",
        None: "",
    }
    if isinstance(category, str) and not isinstance(category, ErrorCategory):
        try:
            category = ErrorCategory(category)
        except ValueError:
            return "Request error"
    return mapping.get(category, "Request error")


__all__ = [
    "ConfigError",
    "ErrorCategory",
    "SiteCheckError",
    "TargetError",
    "WorkerPoolError",
    "categorize_exception",
    "error_category_to_reason",
]
