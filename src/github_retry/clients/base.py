"""
Shared behavior of the retrying httpx clients.
"""

import httpx

from ..retry import CONTEXT_EXTENSION, RequestContext, RetryConfig
from ..retry.loop import OnRetry


class RetryingClientMixin:
    """
    Retry settings shared by the sync and async clients.

    A request can carry a `RequestContext` in its extensions under
    `CONTEXT_EXTENSION` to make the retry loop observe cancellation:

        client.get(url, extensions={CONTEXT_EXTENSION: ctx})
    """

    retry_config: RetryConfig
    on_retry: OnRetry | None

    def _configure_retry(
        self,
        retry_config: RetryConfig | None,
        on_retry: OnRetry | None,
    ) -> None:
        self.retry_config = retry_config or RetryConfig()
        self.on_retry = on_retry

    @staticmethod
    def _request_context(request: httpx.Request) -> RequestContext | None:
        context = request.extensions.get(CONTEXT_EXTENSION)
        if context is not None and not isinstance(context, RequestContext):
            raise TypeError(
                f"{CONTEXT_EXTENSION} extension must be a RequestContext, "
                f"got {type(context).__name__}"
            )
        return context

    @staticmethod
    def _describe(request: httpx.Request) -> str:
        return f"{request.method} {request.url}"
