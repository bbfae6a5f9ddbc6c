"""
Async httpx client with rate-limit aware retries.
"""

import functools

import httpx

from .base import RetryingClientMixin
from ..retry import DEFAULT_RETRY_CONFIG, RetryConfig, async_send_with_retry
from ..retry.loop import OnRetry


class AsyncRetryClient(RetryingClientMixin, httpx.AsyncClient):
    """
    httpx.AsyncClient counterpart of RetryClient.

    Cancelling the calling task interrupts the wait between attempts.
    """

    def __init__(
        self,
        *,
        retry_config: RetryConfig | None = None,
        on_retry: OnRetry | None = None,
        **kwargs,
    ):
        kwargs.setdefault("follow_redirects", True)
        super().__init__(**kwargs)
        self._configure_retry(retry_config, on_retry)

    async def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        return await async_send_with_retry(
            functools.partial(super().send, request, **kwargs),
            self.retry_config,
            context=self._request_context(request),
            description=self._describe(request),
            on_retry=self.on_retry,
        )


def new_async_client(config: RetryConfig | None = None, **kwargs) -> AsyncRetryClient:
    """Create an AsyncRetryClient using the default retry configuration."""
    return AsyncRetryClient(retry_config=config or DEFAULT_RETRY_CONFIG, **kwargs)
