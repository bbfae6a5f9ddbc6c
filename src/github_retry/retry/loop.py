"""
Bounded retry loops composing classification and backoff, and decorators
built on them.
"""

import asyncio
import functools
import logging
import time
from typing import Awaitable, Callable, ParamSpec

import httpx

from ..exceptions import (
    DeadlineExceededError,
    RequestCancelledError,
    RetryExhaustedError,
    UnexpectedStatusError,
)
from .backoff import calculate_backoff
from .classify import AttemptOutcome, Decision, classify
from .config import RetryConfig
from .context import RequestContext

logger = logging.getLogger(__name__)

P = ParamSpec("P")

OnRetry = Callable[[int, AttemptOutcome, float], None]


def _describe(outcome: AttemptOutcome, description: str) -> str:
    if description or outcome.response is None:
        return description
    try:
        request = outcome.response.request
    except RuntimeError:
        # response built without a request
        return description
    return f"{request.method} {request.url}"


def _is_cancellation(error: Exception | None) -> bool:
    return isinstance(error, (RequestCancelledError, DeadlineExceededError))


def _raise_terminal(description: str, outcome: AttemptOutcome, decision: Decision) -> None:
    """Raise the error of a transport failure that will not be retried."""
    logger.debug(f"{description} not retrying: {outcome.describe()}")
    if decision.error is outcome.error:
        raise decision.error
    raise decision.error from outcome.error


def _give_up(
    config: RetryConfig,
    description: str,
    outcome: AttemptOutcome,
    decision: Decision,
) -> RetryExhaustedError:
    method, _, url = description.partition(" ")
    logger.error(
        f"{description} giving up after {config.max_attempts} attempt(s): "
        f"{outcome.describe()}"
    )
    last_error = decision.error or outcome.error
    if last_error is None:
        # throttled statuses retry without an attached error
        last_error = UnexpectedStatusError(
            outcome.response.status_code, outcome.response.reason_phrase
        )
    return RetryExhaustedError(method, url, config.max_attempts, last_error)


def _announce_retry(
    attempt: int,
    config: RetryConfig,
    description: str,
    outcome: AttemptOutcome,
    delay: float,
    on_retry: OnRetry | None,
) -> None:
    if on_retry:
        on_retry(attempt, outcome, delay)
    else:
        logger.warning(
            f"{description} failed ({outcome.describe()}), retrying in "
            f"{delay:.1f}s ({attempt + 1}/{config.max_attempts - 1})"
        )


def send_with_retry(
    send: Callable[[], httpx.Response],
    config: RetryConfig,
    *,
    context: RequestContext | None = None,
    description: str = "",
    on_retry: OnRetry | None = None,
) -> httpx.Response:
    """
    Run `send` until it produces a final response or a terminal error.

    Args:
        send: Performs one attempt
        config: Retry configuration
        context: Optional cancellation signal, also observed while sleeping
        description: "METHOD URL" used in logs and the give-up error
        on_retry: Optional callback(attempt, outcome, delay) called before
            each sleep instead of logging

    Returns:
        The final response. Statuses the caller has to interpret (404,
        501, ...) are returned, not raised.

    Raises:
        RetryExhaustedError: every attempt had a retryable outcome
        RequestCancelledError, DeadlineExceededError: the context is done
        httpx.RequestError: fatal transport error
    """
    for attempt in range(config.max_attempts):
        if context is not None and (cancelled := context.error()) is not None:
            raise cancelled

        try:
            outcome = AttemptOutcome.from_response(send())
        except httpx.RequestError as e:
            outcome = AttemptOutcome.from_error(e)

        description = _describe(outcome, description)
        decision = classify(context, outcome)

        if not decision.retry:
            if outcome.error is not None:
                _raise_terminal(description, outcome, decision)
            if _is_cancellation(decision.error):
                outcome.response.close()
                raise decision.error
            return outcome.response

        if outcome.response is not None:
            outcome.response.close()

        if attempt + 1 >= config.max_attempts:
            exhausted = _give_up(config, description, outcome, decision)
            raise exhausted from exhausted.last_error

        delay = calculate_backoff(config, attempt, outcome)
        _announce_retry(attempt, config, description, outcome, delay, on_retry)

        if context is None:
            time.sleep(delay)
        elif (cancelled := context.wait(delay)) is not None:
            raise cancelled

    raise RuntimeError("Retry loop exited unexpectedly")


async def async_send_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig,
    *,
    context: RequestContext | None = None,
    description: str = "",
    on_retry: OnRetry | None = None,
) -> httpx.Response:
    """
    Async variant of `send_with_retry`.

    Task cancellation interrupts the sleep between attempts like a cancelled
    context does, raising asyncio.CancelledError.
    """
    for attempt in range(config.max_attempts):
        if context is not None and (cancelled := context.error()) is not None:
            raise cancelled

        try:
            outcome = AttemptOutcome.from_response(await send())
        except httpx.RequestError as e:
            outcome = AttemptOutcome.from_error(e)

        description = _describe(outcome, description)
        decision = classify(context, outcome)

        if not decision.retry:
            if outcome.error is not None:
                _raise_terminal(description, outcome, decision)
            if _is_cancellation(decision.error):
                await outcome.response.aclose()
                raise decision.error
            return outcome.response

        if outcome.response is not None:
            await outcome.response.aclose()

        if attempt + 1 >= config.max_attempts:
            exhausted = _give_up(config, description, outcome, decision)
            raise exhausted from exhausted.last_error

        delay = calculate_backoff(config, attempt, outcome)
        _announce_retry(attempt, config, description, outcome, delay, on_retry)

        if context is None:
            await asyncio.sleep(delay)
        elif (cancelled := await context.async_wait(delay)) is not None:
            raise cancelled

    raise RuntimeError("Retry loop exited unexpectedly")


def with_retry(
    config: RetryConfig | None = None,
    on_retry: OnRetry | None = None,
) -> Callable[[Callable[P, httpx.Response]], Callable[P, httpx.Response]]:
    """
    Decorator retrying a function that performs one request.

    Args:
        config: Retry configuration (default: RetryConfig())
        on_retry: Optional callback(attempt, outcome, delay) called before each retry

    Returns:
        Decorated function with retry behavior
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[P, httpx.Response]) -> Callable[P, httpx.Response]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> httpx.Response:
            return send_with_retry(
                functools.partial(func, *args, **kwargs),
                config,
                on_retry=on_retry,
            )

        return wrapper

    return decorator


def async_with_retry(
    config: RetryConfig | None = None,
    on_retry: OnRetry | None = None,
) -> Callable[
    [Callable[P, Awaitable[httpx.Response]]], Callable[P, Awaitable[httpx.Response]]
]:
    """
    Decorator retrying an async function that performs one request.

    Args:
        config: Retry configuration (default: RetryConfig())
        on_retry: Optional callback(attempt, outcome, delay) called before each retry

    Returns:
        Decorated async function with retry behavior
    """
    if config is None:
        config = RetryConfig()

    def decorator(
        func: Callable[P, Awaitable[httpx.Response]],
    ) -> Callable[P, Awaitable[httpx.Response]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> httpx.Response:
            return await async_send_with_retry(
                functools.partial(func, *args, **kwargs),
                config,
                on_retry=on_retry,
            )

        return wrapper

    return decorator
