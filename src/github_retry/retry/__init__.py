"""
GitHub Retry - Retry Logic.

Retry classification, rate-limit aware backoff and the retry loops that
compose them.
"""

from .config import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKOFF,
    DEFAULT_MIN_BACKOFF,
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
)
from .context import CONTEXT_EXTENSION, RequestContext
from .classify import AttemptOutcome, Decision, classify, is_fatal_transport_error
from .backoff import calculate_backoff, exponential_backoff
from .loop import async_send_with_retry, async_with_retry, send_with_retry, with_retry

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_BACKOFF",
    "DEFAULT_MIN_BACKOFF",
    "DEFAULT_RETRY_CONFIG",
    "RetryConfig",
    "CONTEXT_EXTENSION",
    "RequestContext",
    "AttemptOutcome",
    "Decision",
    "classify",
    "is_fatal_transport_error",
    "calculate_backoff",
    "exponential_backoff",
    "send_with_retry",
    "async_send_with_retry",
    "with_retry",
    "async_with_retry",
]
