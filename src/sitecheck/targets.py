# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Load ProbeTargets from URL lists, files and check options."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

from .errors import TargetError
from .models.probe import HeaderCheck, HeaderMatch, ProbeTarget

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}


def parse_header(raw: str, match: HeaderMatch = HeaderMatch.EXACT) -> HeaderCheck:
    """Parse a `Name: Value` option into a HeaderCheck."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise TargetError(f"invalid header check {raw!r}; expected 'Name: Value'")
    return HeaderCheck(name=name.strip(), expected=value.strip(), match=match)


def validate_url(url: str) -> str:
    raw = str(url or "").strip()
    try:
        parts = urlsplit(raw)
    except ValueError as exc:
        raise TargetError(f"malformed URL {raw!r}: {exc}") from exc
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise TargetError(f"unsupported URL {raw!r}; only http and https are probed")
    if not parts.netloc:
        raise TargetError(f"malformed URL {raw!r}: missing host")
    return raw


def read_urls_from_file(path: str | Path) -> list[str]:
    """One URL per line; blank lines and `#` comments are skipped."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise TargetError(f"cannot read URL file {path}: {exc}") from exc
    urls = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            urls.append(stripped)
    return urls


def build_targets(
    urls: Iterable[str],
    *,
    headers: Iterable[HeaderCheck | str] = (),
    contains: str | None = None,
) -> list[ProbeTarget]:
    """
    Validate URLs and attach the shared header/body checks.

    Order is preserved; repeated URLs are probed once per round.
    """
    checks = tuple(parse_header(item) if isinstance(item, str) else item for item in headers)
    targets: list[ProbeTarget] = []
    seen: set[str] = set()
    for url in urls:
        valid = validate_url(url)
        if valid in seen:
            logger.warning("Ignoring duplicate URL %s", valid)
            continue
        seen.add(valid)
        targets.append(ProbeTarget(url=valid, required_headers=checks, required_body_substring=contains or None))
    return targets


__all__ = ["build_targets", "parse_header", "read_urls_from_file", "validate_url"]
