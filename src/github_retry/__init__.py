"""
GitHub Retry - Resilient HTTP access to rate-limited REST APIs.

Decides after every attempt whether to retry and how long to wait, honoring
Retry-After and GitHub's X-Ratelimit-* headers.
"""

from .clients import AsyncRetryClient, RetryClient, new_async_client, new_client
from .exceptions import (
    RetryClientError,
    UnexpectedStatusError,
    RequestCancelledError,
    DeadlineExceededError,
    RetryExhaustedError,
)
from .retry import (
    CONTEXT_EXTENSION,
    DEFAULT_RETRY_CONFIG,
    AttemptOutcome,
    Decision,
    RequestContext,
    RetryConfig,
    async_with_retry,
    calculate_backoff,
    classify,
    is_fatal_transport_error,
    with_retry,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Clients
    "RetryClient",
    "AsyncRetryClient",
    "new_client",
    "new_async_client",
    # Exceptions
    "RetryClientError",
    "UnexpectedStatusError",
    "RequestCancelledError",
    "DeadlineExceededError",
    "RetryExhaustedError",
    # Retry
    "CONTEXT_EXTENSION",
    "DEFAULT_RETRY_CONFIG",
    "AttemptOutcome",
    "Decision",
    "RequestContext",
    "RetryConfig",
    "classify",
    "is_fatal_transport_error",
    "calculate_backoff",
    "with_retry",
    "async_with_retry",
]
