"""
Backoff calculation from rate-limit headers and exponential growth.
"""

import logging
import math
import re
import time

import httpx

from .classify import AttemptOutcome
from .config import RetryConfig

logger = logging.getLogger(__name__)

RETRY_AFTER_HEADER = "Retry-After"
RATELIMIT_REMAINING_HEADER = "X-Ratelimit-Remaining"
RATELIMIT_RESET_HEADER = "X-Ratelimit-Reset"

# ceiling for server directed waits, which are not bound by max_backoff
MAX_HEADER_BACKOFF = 24 * 60 * 60.0

_INTEGER_RE = re.compile(r"-?[0-9]+")


def _header_int(headers: httpx.Headers, name: str) -> int | None:
    value = headers.get(name)
    if value is None or not _INTEGER_RE.fullmatch(value.strip()):
        return None
    try:
        return int(value.strip())
    except ValueError:
        # longer than the int parsing limit
        return None


def _honours_rate_limit_headers(status_code: int) -> bool:
    return status_code in (429, 403) or status_code >= 500


def exponential_backoff(attempt: int, config: RetryConfig) -> float:
    """
    Calculate `min_backoff * 2 ** attempt`, capped at `max_backoff`.

    Growth that overflows or stops being finite is treated as exceeding the
    cap.
    """
    try:
        delay = config.min_backoff * (2.0**attempt)
    except OverflowError:
        return config.max_backoff
    if not math.isfinite(delay) or delay > config.max_backoff:
        return config.max_backoff
    return delay


def calculate_backoff(
    config: RetryConfig,
    attempt: int,
    outcome: AttemptOutcome | None = None,
    now: float | None = None,
) -> float:
    """
    Calculate the delay before the next attempt.

    On 429, 403 and 5xx responses the server's directions win: an integer
    `Retry-After` is used as is, otherwise an exhausted quota
    (`X-Ratelimit-Remaining: 0`) waits until `X-Ratelimit-Reset`. Header
    driven delays may exceed `max_backoff` but are capped at
    `MAX_HEADER_BACKOFF`. Everything else backs off exponentially.

    Args:
        config: Retry configuration
        attempt: Zero-based retry number (0 before the first retry)
        outcome: Outcome of the attempt that just failed
        now: Current Unix time, defaults to time.time()

    Returns:
        Delay in seconds, never negative
    """
    response = None if outcome is None else outcome.response
    if response is not None and _honours_rate_limit_headers(response.status_code):
        retry_after = _header_int(response.headers, RETRY_AFTER_HEADER)
        if retry_after is not None:
            delay = float(min(max(0, retry_after), MAX_HEADER_BACKOFF))
            logger.debug(f"Using Retry-After of {delay:.0f}s")
            return delay

        # an absent remaining header is no signal, unlike an explicit 0
        remaining = _header_int(response.headers, RATELIMIT_REMAINING_HEADER)
        reset_at = _header_int(response.headers, RATELIMIT_RESET_HEADER)
        if remaining == 0 and reset_at is not None:
            if now is None:
                now = time.time()
            delay = float(min(max(reset_at, now), now + MAX_HEADER_BACKOFF) - now)
            logger.debug(f"Rate limit quota exhausted, waiting {delay:.1f}s for reset")
            return delay

    return exponential_backoff(attempt, config)
