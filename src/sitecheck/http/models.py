# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across sitecheck."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    timeout: float | None = None
    read_body: bool = True


@dataclass
class HttpResponse:
    """
    Normalized HTTP response or transport failure for a single attempt.

    `ok` means a response was received, whatever its status code. When `ok` is
    False, `error_category` holds an `ErrorCategory` value and `status_code` is None.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    url: str | None = None
    elapsed_ms: int = 0
    error_category: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)


__all__ = ["Headers", "HttpRequest", "HttpResponse"]
