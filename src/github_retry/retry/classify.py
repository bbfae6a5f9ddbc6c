"""
Retry classification for a single HTTP attempt.

The transport does not expose structured error categories for redirect
exhaustion, bad URL schemes or untrusted certificates, so those are detected
by matching known error message shapes. The patterns are best effort and need
updating if the transport changes its error texts.
"""

import re
import ssl
from dataclasses import dataclass

import httpx

from ..exceptions import UnexpectedStatusError
from .context import RequestContext

# httpx.TooManyRedirects, plus the net/http style text some proxies relay.
REDIRECTS_ERROR_RE = re.compile(
    r"exceeded maximum allowed redirects|stopped after \d+ redirects",
    re.IGNORECASE,
)

# httpcore/httpx errors for URLs whose scheme no transport can serve.
SCHEME_ERROR_RE = re.compile(
    r"unsupported protocol|scheme '[^']*' not supported"
    r"|missing an 'http://' or 'https://' protocol",
    re.IGNORECASE,
)

# OpenSSL and Go texts for certificates from an unknown authority.
NOT_TRUSTED_ERROR_RE = re.compile(
    r"certificate is not trusted|certificate signed by unknown authority"
    r"|unable to get local issuer certificate|self[- ]signed certificate",
    re.IGNORECASE,
)

# X509_V_ERR_UNABLE_TO_GET_ISSUER_CERT, ..._DEPTH_ZERO_SELF_SIGNED_CERT,
# ..._SELF_SIGNED_CERT_IN_CHAIN, ..._UNABLE_TO_GET_ISSUER_CERT_LOCALLY
UNKNOWN_AUTHORITY_VERIFY_CODES = frozenset({2, 18, 19, 20})

_FATAL_PATTERNS = (REDIRECTS_ERROR_RE, SCHEME_ERROR_RE, NOT_TRUSTED_ERROR_RE)


@dataclass(frozen=True)
class AttemptOutcome:
    """Terminal state of one attempt: a transport error or a response."""

    response: httpx.Response | None = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("AttemptOutcome needs exactly one of response or error")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "AttemptOutcome":
        return cls(response=response)

    @classmethod
    def from_error(cls, error: BaseException) -> "AttemptOutcome":
        return cls(error=error)

    @property
    def status_code(self) -> int | None:
        return None if self.response is None else self.response.status_code

    def describe(self) -> str:
        """Short human readable summary, for log lines."""
        if self.error is not None:
            return f"{type(self.error).__name__}: {self.error}"
        return f"status {self.response.status_code}"


@dataclass(frozen=True)
class Decision:
    """Result of classifying one attempt."""

    retry: bool
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return not self.retry and self.error is None


def _error_chain(error: BaseException):
    seen = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        yield error
        error = error.__cause__ or error.__context__


def is_fatal_transport_error(error: BaseException) -> bool:
    """
    Check whether a transport error must not be retried.

    True for redirect exhaustion, unsupported URL schemes and TLS trust
    failures. The error and its cause chain are inspected.
    """
    for exc in _error_chain(error):
        if isinstance(exc, ssl.SSLCertVerificationError):
            if getattr(exc, "verify_code", None) in UNKNOWN_AUTHORITY_VERIFY_CODES:
                return True
        text = str(exc)
        if any(pattern.search(text) for pattern in _FATAL_PATTERNS):
            return True
    return False


def classify(context: RequestContext | None, outcome: AttemptOutcome) -> Decision:
    """
    Decide whether an attempt should be retried.

    Args:
        context: Cancellation signal of the request, or None
        outcome: What the attempt produced

    Returns:
        Decision; `error` carries the terminal error when giving up, or the
        reason for the retry on unexpected statuses
    """
    # never retry past cancellation or the deadline
    if context is not None:
        cancelled = context.error()
        if cancelled is not None:
            return Decision(retry=False, error=cancelled)

    if outcome.error is not None:
        if is_fatal_transport_error(outcome.error):
            return Decision(retry=False, error=outcome.error)
        # likely recoverable
        return Decision(retry=True)

    status = outcome.response.status_code

    # 403 is how GitHub throttles concurrent requests
    if status in (429, 403):
        return Decision(retry=True)

    # 0 and out-of-range codes count as server errors; 501 is permanent
    if status == 0 or (status >= 500 and status != 501):
        return Decision(
            retry=True,
            error=UnexpectedStatusError(status, outcome.response.reason_phrase),
        )

    if status >= 400:
        return Decision(
            retry=False,
            error=UnexpectedStatusError(
                status, outcome.response.reason_phrase, retryable=False
            ),
        )

    return Decision(retry=False)
