"""
GitHub Retry - HTTP Clients.

httpx clients whose requests run through the retry loop.
"""

from .base import RetryingClientMixin
from .sync_client import RetryClient, new_client
from .async_client import AsyncRetryClient, new_async_client

__all__ = [
    "RetryingClientMixin",
    "RetryClient",
    "new_client",
    "AsyncRetryClient",
    "new_async_client",
]
