# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for sitecheck."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigError
from .version import __version__

DEFAULT_USER_AGENT = f"sitecheck/{__version__} (+concurrent website status checker)"

_TRUTHY = {"1", "true", "yes", "on"}


def _number_env(name: str, default, cast=float):  # noqa: ANN001,ANN202
    """`cast(os.environ[name])`, or `default` when unset or unparsable."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def _period_env(name: str) -> float | None:
    # Unset, unparsable or non-positive all mean "run a single round".
    period = _number_env(name, None)
    return period if period is not None and period > 0 else None


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    max_redirects: int = 2
    verify_ssl: bool = True
    max_body_bytes: int = 4 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _number_env("SITECHECK_HTTP_MAX_BODY_BYTES", cls.max_body_bytes, int)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            user_agent=os.getenv("SITECHECK_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("SITECHECK_HTTP_REDIRECTS", cls.allow_redirects),
            max_redirects=max(0, _number_env("SITECHECK_HTTP_MAX_REDIRECTS", cls.max_redirects, int)),
            verify_ssl=_bool_env("SITECHECK_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class MonitorSettings:
    """
    Probing engine defaults.

    `timeout` bounds a single attempt; a job may take up to
    `(max_retries + 1) * timeout` plus any retry delay. `period` is the
    interval between round starts, or None for a single round.
    """

    timeout: float = 5.0
    max_retries: int = 1
    worker_count: int = 50
    period: float | None = None
    retry_delay: float = 0.0
    fail_on_http_error: bool = False

    @classmethod
    def from_env(cls) -> "MonitorSettings":
        return cls(
            timeout=_number_env("SITECHECK_TIMEOUT", cls.timeout),
            max_retries=_number_env("SITECHECK_RETRIES", cls.max_retries, int),
            worker_count=_number_env("SITECHECK_WORKERS", cls.worker_count, int),
            period=_period_env("SITECHECK_PERIOD"),
            retry_delay=_number_env("SITECHECK_RETRY_DELAY", cls.retry_delay),
            fail_on_http_error=_bool_env("SITECHECK_FAIL_ON_HTTP_ERROR", cls.fail_on_http_error),
        )

    def validate(self) -> "MonitorSettings":
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.worker_count < 1:
            raise ConfigError(f"worker_count must be >= 1, got {self.worker_count}")
        if self.period is not None and self.period <= 0:
            raise ConfigError(f"period must be positive when set, got {self.period}")
        if self.retry_delay < 0:
            raise ConfigError(f"retry_delay must be >= 0, got {self.retry_delay}")
        return self


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_monitor_settings() -> MonitorSettings:
    """Load engine settings from environment with sensible defaults."""
    return MonitorSettings.from_env()


__all__ = [
    "DEFAULT_USER_AGENT",
    "HttpSettings",
    "MonitorSettings",
    "load_http_settings",
    "load_monitor_settings",
]
