"""
Blocking httpx client with rate-limit aware retries.
"""

import functools
import logging

import httpx

from .base import RetryingClientMixin
from ..retry import DEFAULT_RETRY_CONFIG, RetryConfig, send_with_retry
from ..retry.loop import OnRetry

logger = logging.getLogger(__name__)


class RetryClient(RetryingClientMixin, httpx.Client):
    """
    httpx.Client that retries throttled, failed and 5xx attempts.

    Features:
    - Retry-After and X-Ratelimit-Reset aware waits
    - Exponential backoff between min and max backoff otherwise
    - No retries on redirect exhaustion, bad URL schemes or untrusted TLS
    - Sleeps interrupted by a cancelled RequestContext
    """

    def __init__(
        self,
        *,
        retry_config: RetryConfig | None = None,
        on_retry: OnRetry | None = None,
        **kwargs,
    ):
        """
        Initialize the client.

        Args:
            retry_config: Retry configuration for failed requests
            on_retry: Optional callback(attempt, outcome, delay) run before
                each retry instead of logging
            **kwargs: Passed to httpx.Client; redirects are followed by default
        """
        kwargs.setdefault("follow_redirects", True)
        super().__init__(**kwargs)
        self._configure_retry(retry_config, on_retry)

    def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        """Send `request`, retrying as the retry configuration allows."""
        return send_with_retry(
            functools.partial(super().send, request, **kwargs),
            self.retry_config,
            context=self._request_context(request),
            description=self._describe(request),
            on_retry=self.on_retry,
        )


def new_client(config: RetryConfig | None = None, **kwargs) -> RetryClient:
    """Create a RetryClient using the default retry configuration."""
    logger.debug(f"Creating retry client with {config or DEFAULT_RETRY_CONFIG}")
    return RetryClient(retry_config=config or DEFAULT_RETRY_CONFIG, **kwargs)
