"""Retry utilities for catalog API calls.

Implements exponential backoff with jitter for transient failures.
Only the HTTP transport retries; the navigation engine never does.
"""

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from podnav.utils.errors import (
    AuthenticationError,
    CatalogAPIError,
    NetworkConnectionError,
    NetworkTimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)


# Error classification: Which errors should trigger retries?

class RetryableError(CatalogAPIError):
    """Base class for API errors that should trigger retries."""

    pass


class RateLimitError(RetryableError):
    """API rate limit exceeded."""

    pass


class ServerError(RetryableError):
    """Server-side error (5xx)."""

    pass


class InvalidRequestError(CatalogAPIError):
    """Invalid request parameters (4xx)."""

    pass


class UnauthorizedError(InvalidRequestError, AuthenticationError):
    """Catalog rejected the access token (401/403)."""

    pass


RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    RetryableError,
    NetworkTimeoutError,
    NetworkConnectionError,
)


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        max_wait_seconds: float = 30,
        min_wait_seconds: float = 1,
        jitter: bool = True,
    ):
        """Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts (including initial)
            max_wait_seconds: Maximum wait time between retries
            min_wait_seconds: Minimum wait time between retries
            jitter: Whether to add jitter to wait times
        """
        self.max_attempts = max_attempts
        self.max_wait_seconds = max_wait_seconds
        self.min_wait_seconds = min_wait_seconds
        self.jitter = jitter


DEFAULT_RETRY_CONFIG = RetryConfig()

# Fast configuration for testing (minimal delays)
TEST_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    max_wait_seconds=0.1,
    min_wait_seconds=0.01,
    jitter=False,
)


def log_retry_attempt(retry_state: RetryCallState) -> None:
    """Log retry attempts for debugging.

    Args:
        retry_state: Tenacity retry state
    """
    if retry_state.outcome and retry_state.outcome.failed:
        exception = retry_state.outcome.exception()
        logger.warning(
            "Retry attempt %d failed: %s: %s",
            retry_state.attempt_number,
            type(exception).__name__,
            exception,
        )


def with_retry(
    config: RetryConfig | None = None,
    retry_on: tuple[type[Exception], ...] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Decorator adding retry with exponential backoff to a coroutine function.

    Usage:
        @with_retry()
        async def api_call():
            ...

        fetch = with_retry(RetryConfig(max_attempts=5))(client.fetch)

    Args:
        config: Retry configuration (uses DEFAULT_RETRY_CONFIG if None)
        retry_on: Exception types to retry on (defaults to RETRYABLE_ERRORS)

    Returns:
        Decorated coroutine function with retry logic
    """
    config = config or DEFAULT_RETRY_CONFIG
    retry_on = retry_on or RETRYABLE_ERRORS

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        retrying = retry(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_exponential_jitter(
                initial=config.min_wait_seconds,
                max=config.max_wait_seconds,
                jitter=config.max_wait_seconds if config.jitter else 0,
            ),
            retry=retry_if_exception_type(retry_on),
            before_sleep=log_retry_attempt,
            reraise=True,
        )(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await retrying(*args, **kwargs)
            except TransportError as e:
                logger.error(
                    "%s failed after up to %d attempts: %s: %s",
                    func.__name__,
                    config.max_attempts,
                    type(e).__name__,
                    e,
                )
                raise

        return wrapper

    return decorator


def classify_http_error(status_code: int, error_message: str = "") -> CatalogAPIError:
    """Classify an HTTP error status into a retryable or non-retryable error.

    Args:
        status_code: HTTP status code
        error_message: Error message from API

    Returns:
        Appropriate exception instance

    Example:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise classify_http_error(e.response.status_code, str(e)) from e
    """
    # 429 - Rate limit
    if status_code == 429:
        return RateLimitError(f"Rate limit exceeded: {error_message}", status_code)

    # 5xx - Server errors (retryable)
    if 500 <= status_code < 600:
        return ServerError(f"Server error (HTTP {status_code}): {error_message}", status_code)

    # 408 - Request timeout
    if status_code == 408:
        return RetryableError(f"Request timeout: {error_message}", status_code)

    # 401, 403 - Authentication errors (non-retryable)
    if status_code in (401, 403):
        return UnauthorizedError(
            f"Authentication failed (HTTP {status_code}): {error_message}", status_code
        )

    # 400, 404, 422 - Client errors (non-retryable)
    if 400 <= status_code < 500:
        return InvalidRequestError(
            f"Invalid request (HTTP {status_code}): {error_message}", status_code
        )

    return CatalogAPIError(f"HTTP error {status_code}: {error_message}", status_code)
