"""
GitHub Retry - Exception Hierarchy.

Custom exceptions for retrying HTTP clients with retry-awareness.
"""

from .base import (
    RetryClientError,
    UnexpectedStatusError,
    RequestCancelledError,
    DeadlineExceededError,
    RetryExhaustedError,
)

__all__ = [
    "RetryClientError",
    "UnexpectedStatusError",
    "RequestCancelledError",
    "DeadlineExceededError",
    "RetryExhaustedError",
]
