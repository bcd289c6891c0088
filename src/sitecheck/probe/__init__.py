# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-target probing: classification and retry."""

from .retry import RETRYABLE_KINDS, RetryingProbe, RetryPolicy
from .validation import classify_response

__all__ = ["RETRYABLE_KINDS", "RetryPolicy", "RetryingProbe", "classify_response"]
