"""Custom exception types and error handling utilities for nolisticle."""

from __future__ import annotations

import functools
import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

if TYPE_CHECKING:
    from .models import KindResult

logger = logging.getLogger("nolisticle.errors")

P = ParamSpec("P")
T = TypeVar("T")


class ErrorCode(Enum):
    """Error codes for classification and categorization."""

    # Dataset errors
    DATA_INTEGRITY = "data_integrity"
    DATASET_MISSING = "dataset_missing"
    DATASET_INVALID = "dataset_invalid"

    # Evaluation errors
    THRESHOLD_VIOLATION = "threshold_violation"
    DEGENERATE_INPUT = "degenerate_input"

    # HTTP errors
    HTTP_CONNECTION_ERROR = "http_connection_error"
    HTTP_TIMEOUT = "http_timeout"
    HTTP_ERROR_RESPONSE = "http_error_response"

    # Configuration errors
    CONFIG_INVALID = "config_invalid"

    # General errors
    UNKNOWN_ERROR = "unknown_error"


@dataclass
class NolisticleError(Exception):
    """Base exception for nolisticle with structured error information."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        parts = [f"[{self.code.value}] {self.message}"]
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f" ({details_str})")
        if self.cause:
            parts.append(f" caused by: {self.cause}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class DatasetError(NolisticleError):
    """Labeled dataset or reference file could not be read."""

    pass


class DataIntegrityError(NolisticleError):
    """Labeled titles disagree with the reference article list."""

    pass


class ConfigError(NolisticleError):
    """Configuration errors."""

    pass


class HTTPError(NolisticleError):
    """HTTP request errors."""

    pass


class ThresholdViolationError(NolisticleError):
    """A classifier exceeded its false-positive or false-negative limit.

    Carries the computed KindResult so the harness can still record it.
    """

    def __init__(
        self,
        classifier: str,
        kind: str,
        error_rate: float,
        limit: float,
        result: KindResult,
    ) -> None:
        rate_name = "false negative" if kind == "listicles" else "false positive"
        super().__init__(
            code=ErrorCode.THRESHOLD_VIOLATION,
            message=(
                f"{classifier}: {rate_name} rate {error_rate:.2%} "
                f"exceeds limit {limit:.2%} for {kind}"
            ),
            details={
                "classifier": classifier,
                "kind": kind,
                "error_rate": error_rate,
                "limit": limit,
            },
        )
        self.classifier = classifier
        self.kind = kind
        self.error_rate = error_rate
        self.limit = limit
        self.result = result


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    jitter: float = 0.1
    retryable_exceptions: tuple[type[Exception], ...] = (
        ConnectionError,
        TimeoutError,
        OSError,
    )


def retry_with_backoff(
    config: RetryConfig | None = None,
    on_retry: Callable[[Exception, int, float], None] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        config: Retry configuration. Uses defaults if not provided.
        on_retry: Optional callback called on each retry with (exception, attempt, delay).

    Returns:
        Decorated function that will retry on failure.
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            last_exception: Exception | None = None

            for attempt in range(1, config.max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except config.retryable_exceptions as e:
                    last_exception = e

                    if attempt == config.max_attempts:
                        logger.error(
                            "All %d retry attempts failed for %s: %s",
                            config.max_attempts,
                            func.__name__,
                            e,
                            extra={
                                "function": func.__name__,
                                "attempts": config.max_attempts,
                                "error_type": type(e).__name__,
                            },
                        )
                        raise

                    delay = min(
                        config.base_delay * (config.exponential_base ** (attempt - 1)),
                        config.max_delay,
                    )
                    delay += delay * config.jitter * random.random()

                    logger.warning(
                        "Attempt %d/%d failed for %s: %s. Retrying in %.2fs",
                        attempt,
                        config.max_attempts,
                        func.__name__,
                        e,
                        delay,
                        extra={
                            "function": func.__name__,
                            "attempt": attempt,
                            "max_attempts": config.max_attempts,
                            "delay": delay,
                            "error_type": type(e).__name__,
                        },
                    )

                    if on_retry:
                        on_retry(e, attempt, delay)

                    time.sleep(delay)

            # Should not reach here, but satisfy type checker
            assert last_exception is not None
            raise last_exception

        return wrapper

    return decorator


def validate_rate(value: float, name: str) -> float:
    """
    Validate that a rate limit lies in [0.0, 1.0].

    Unlike scores, rate limits are never clamped: a limit outside the range
    is a configuration mistake.

    Raises:
        ConfigError: If the value is not a number in [0.0, 1.0].
    """
    try:
        rate = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"{name} must be a number",
            details={"name": name, "value": value},
            cause=e,
        ) from e
    if not 0.0 <= rate <= 1.0:
        raise ConfigError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"{name} must be between 0 and 1",
            details={"name": name, "value": rate},
        )
    return rate
