# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from ..config import DEFAULT_USER_AGENT
from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .headers import find_header, normalize_headers
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse

__all__ = [
    "DEFAULT_USER_AGENT",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "StubHttpClient",
    "create_default_http_client",
    "find_header",
    "normalize_headers",
]
