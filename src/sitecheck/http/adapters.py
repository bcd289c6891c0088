# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Union

from .client import HttpClient
from .models import HttpRequest, HttpResponse

StubEntry = Union[HttpResponse, Sequence[HttpResponse], Callable[[HttpRequest], HttpResponse]]


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests and dry runs.

    Each URL maps to a fixed response, a sequence of responses (one per call,
    the last one repeating) or a callable receiving the request. Calls are
    recorded and safe to make from several threads.
    """

    def __init__(self, responses: dict[str, StubEntry] | None = None):
        self._responses: dict[str, StubEntry] = dict(responses or {})
        self._calls: dict[str, int] = {}
        self._lock = threading.Lock()
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: StubEntry) -> None:
        with self._lock:
            self._responses[url] = response

    def calls(self, url: str) -> int:
        with self._lock:
            return self._calls.get(url, 0)

    def request(self, request: HttpRequest) -> HttpResponse:
        with self._lock:
            self.requests.append(request)
            index = self._calls.get(request.url, 0)
            self._calls[request.url] = index + 1
            entry = self._responses.get(request.url)

        if entry is None:
            return HttpResponse(
                ok=False,
                url=request.url,
                error_category="CONNECTION_ERROR",
                error_message="No stubbed response configured",
            )
        if callable(entry):
            return entry(request)
        if isinstance(entry, HttpResponse):
            return entry
        return entry[min(index, len(entry) - 1)]

    def close(self) -> None:
        self.closed = True


__all__ = ["StubHttpClient"]
