"""
Base exception classes for retrying HTTP client operations.

Each exception includes a `retryable` flag indicating whether the condition
it describes is transient and another attempt may succeed.
"""


class RetryClientError(Exception):
    """Base exception for all retry client errors."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class UnexpectedStatusError(RetryClientError):
    """Describes a response status the client did not expect."""

    def __init__(
        self,
        status_code: int,
        reason_phrase: str = "",
        *,
        retryable: bool = True,
    ):
        status = f"{status_code} {reason_phrase}".strip()
        super().__init__(
            f"unexpected HTTP status {status}",
            retryable=retryable,
            status_code=status_code,
        )
        self.reason_phrase = reason_phrase


class RequestCancelledError(RetryClientError):
    """Raised when the caller cancelled the request. Not retryable."""

    def __init__(self, message: str = "request cancelled"):
        super().__init__(message, retryable=False)


class DeadlineExceededError(RetryClientError):
    """Raised when the request deadline passed. Not retryable."""

    def __init__(self, message: str = "request deadline exceeded"):
        super().__init__(message, retryable=False)


class RetryExhaustedError(RetryClientError):
    """Raised when every allowed attempt failed with a retryable outcome."""

    def __init__(
        self,
        method: str,
        url: str,
        attempts: int,
        last_error: BaseException | None = None,
    ):
        message = f"{method} {url} giving up after {attempts} attempt(s)".strip()
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(
            message,
            retryable=False,
            status_code=getattr(last_error, "status_code", None),
        )
        self.method = method
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
