# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Case-insensitive response header access."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Union

HeaderSource = Union[Mapping[str, object], Iterable[tuple[str, object]], None]


def normalize_headers(headers: HeaderSource) -> dict[str, str]:
    """
    Lowercase-keyed, string-valued copy of `headers`.

    Accepts plain dicts, httpx.Headers and iterables of (name, value) pairs.
    Repeated names keep the last value.
    """
    if not headers:
        return {}
    pairs = headers.items() if isinstance(headers, Mapping) else headers
    out: dict[str, str] = {}
    for name, value in pairs:
        key = str(name or "").strip().lower()
        if key:
            out[key] = "" if value is None else str(value).strip()
    return out


def find_header(headers: HeaderSource, name: str) -> str | None:
    """Value of header `name`, or None when absent; an empty header returns ""."""
    if not name:
        return None
    return normalize_headers(headers).get(name.strip().lower())


__all__ = ["HeaderSource", "find_header", "normalize_headers"]
