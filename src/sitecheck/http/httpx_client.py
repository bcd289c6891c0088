# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging
import time

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from .client import HttpClient
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.perf_counter() - started) * 1000))


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper, shared by all worker threads."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            max_redirects=self.settings.max_redirects,
            timeout=DEFAULT_TIMEOUT,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else DEFAULT_TIMEOUT
        max_body_bytes = self.settings.max_body_bytes

        started = time.perf_counter()
        deadline = started + timeout
        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                timeout=timeout,
            ) as resp:
                content = bytearray()
                truncated = False
                if request.read_body:
                    for chunk in resp.iter_bytes():
                        if time.perf_counter() > deadline:
                            # httpx timeouts are per read; a slow drip must still honour the attempt deadline.
                            raise httpx.ReadTimeout("response body not received within timeout")
                        if not chunk:
                            continue
                        remaining = max_body_bytes - len(content)
                        if remaining <= 0:
                            truncated = True
                            break
                        if len(chunk) > remaining:
                            content.extend(chunk[:remaining])
                            truncated = True
                            break
                        content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=normalize_headers(resp.headers),
                text=text,
                url=str(resp.url),
                elapsed_ms=_elapsed_ms(started),
                meta={"body_truncated": truncated, "body_bytes_read": len(content)},
            )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.debug("Request to %s failed (%s): %s", request.url, category.value, exc)
            return HttpResponse(
                ok=False,
                url=request.url,
                elapsed_ms=_elapsed_ms(started),
                error_category=category.value,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )

    def close(self) -> None:
        self._client.close()


__all__ = ["DEFAULT_TIMEOUT", "HttpxClient"]
