"""
Retry configuration and defaults.
"""

from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_BACKOFF = 60.0  # 1 minute
DEFAULT_MAX_BACKOFF = 480.0  # 8 minutes


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of attempts per request, including the
            first one (default: 3)
        min_backoff: Exponential backoff base in seconds (default: 60.0)
        max_backoff: Exponential backoff cap in seconds (default: 480.0)
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_backoff: float = DEFAULT_MIN_BACKOFF
    max_backoff: float = DEFAULT_MAX_BACKOFF

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.min_backoff < 0:
            raise ValueError(f"min_backoff must not be negative, got {self.min_backoff}")
        if self.max_backoff < self.min_backoff:
            raise ValueError(
                f"max_backoff ({self.max_backoff}) must not be below "
                f"min_backoff ({self.min_backoff})"
            )

    @classmethod
    def fast(cls) -> "RetryConfig":
        """Preset with sub-second delays, for scripts and tests."""
        return cls(
            max_attempts=DEFAULT_MAX_ATTEMPTS,
            min_backoff=0.25,
            max_backoff=1.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only)."""
        return cls(max_attempts=1)


DEFAULT_RETRY_CONFIG = RetryConfig()
