# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Broadcast cancellation shared by the coordinator and worker threads."""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    One-way shutdown flag backed by threading.Event.

    `cancel()` is idempotent and safe to call from signal handlers, other
    threads, or after the engine has terminated.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancel requested") -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        logger.info("Cancellation requested: %s", reason)

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or `timeout` elapses; return True if cancelled."""
        return self._event.wait(timeout)


__all__ = ["CancellationToken"]
