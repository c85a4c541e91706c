"""Error classification and handling utilities.

Errors coming out of the document store SDK and the catalog HTTP client are
mapped onto a single ErrorCategory so callers can decide between retrying,
surfacing a message, or ignoring the failure.

Example:
    from src.core.errors import classify_error, is_retryable

    try:
        await store.add("favorites", payload)
    except Exception as ex:
        category = classify_error(ex)
        if is_retryable(category):
            ...
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum, auto
from typing import TypeVar

import aiohttp
from google.api_core import exceptions as gexc

from src.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ErrorCategory(Enum):
    """Classification of error types for handling decisions."""

    # Transient errors - safe to retry
    RATE_LIMIT = auto()
    TIMEOUT = auto()
    NETWORK = auto()
    SERVICE_UNAVAILABLE = auto()

    # Permanent errors - should not retry
    CONFLICT = auto()  # Concurrent modification / already exists
    INVALID_INPUT = auto()
    PERMISSION_DENIED = auto()
    NOT_FOUND = auto()
    CONFIGURATION = auto()
    UNKNOWN = auto()


RETRYABLE_CATEGORIES = {
    ErrorCategory.RATE_LIMIT,
    ErrorCategory.TIMEOUT,
    ErrorCategory.NETWORK,
    ErrorCategory.SERVICE_UNAVAILABLE,
}

# Checked in order; subclasses must come before their bases.
_GOOGLE_CATEGORIES: tuple[tuple[type[Exception], ErrorCategory], ...] = (
    (gexc.NotFound, ErrorCategory.NOT_FOUND),
    (gexc.PermissionDenied, ErrorCategory.PERMISSION_DENIED),
    (gexc.Unauthenticated, ErrorCategory.PERMISSION_DENIED),
    (gexc.Unauthorized, ErrorCategory.PERMISSION_DENIED),
    (gexc.Forbidden, ErrorCategory.PERMISSION_DENIED),
    (gexc.AlreadyExists, ErrorCategory.CONFLICT),
    (gexc.Aborted, ErrorCategory.CONFLICT),
    (gexc.Conflict, ErrorCategory.CONFLICT),
    (gexc.InvalidArgument, ErrorCategory.INVALID_INPUT),
    (gexc.FailedPrecondition, ErrorCategory.INVALID_INPUT),
    (gexc.OutOfRange, ErrorCategory.INVALID_INPUT),
    (gexc.BadRequest, ErrorCategory.INVALID_INPUT),
    (gexc.ResourceExhausted, ErrorCategory.RATE_LIMIT),
    (gexc.TooManyRequests, ErrorCategory.RATE_LIMIT),
    (gexc.DeadlineExceeded, ErrorCategory.TIMEOUT),
    (gexc.GatewayTimeout, ErrorCategory.TIMEOUT),
    (gexc.ServiceUnavailable, ErrorCategory.SERVICE_UNAVAILABLE),
    (gexc.InternalServerError, ErrorCategory.SERVICE_UNAVAILABLE),
    (gexc.RetryError, ErrorCategory.SERVICE_UNAVAILABLE),
)


class TransientError(Exception):
    """Error that is temporary and can be retried.

    Attributes:
        category: The specific type of transient error.
        retry_after: Suggested wait time before retry (seconds), if known.
        original_error: The underlying exception that was classified.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        retry_after: float | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.retry_after = retry_after
        self.original_error = original_error

    @classmethod
    def from_exception(
        cls,
        ex: Exception,
        category: ErrorCategory | None = None,
        retry_after: float | None = None,
    ) -> "TransientError":
        """Create a TransientError from an existing exception."""
        return cls(
            message=str(ex),
            category=category or classify_error(ex),
            retry_after=retry_after,
            original_error=ex,
        )


class PermanentError(Exception):
    """Error that is permanent and should not be retried.

    Attributes:
        category: The specific type of permanent error.
        original_error: The underlying exception that was classified.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    @classmethod
    def from_exception(
        cls,
        ex: Exception,
        category: ErrorCategory | None = None,
    ) -> "PermanentError":
        """Create a PermanentError from an existing exception."""
        return cls(
            message=str(ex),
            category=category or classify_error(ex),
            original_error=ex,
        )


class StoreError(Exception):
    """A failed document store operation.

    Returned (not raised) by the store gateway inside a StoreResult; callers
    may raise it themselves via ``StoreResult.unwrap()``.

    Attributes:
        kind: Category of the failure.
        operation: Gateway operation name (create, delete, list_all, ...).
        collection: Collection the operation targeted.
        original_error: The underlying SDK exception, if any.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorCategory,
        operation: str,
        collection: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.operation = operation
        self.collection = collection
        self.original_error = original_error

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)

    @classmethod
    def from_exception(
        cls,
        ex: Exception,
        operation: str,
        collection: str,
    ) -> "StoreError":
        """Classify an SDK exception into a StoreError."""
        return cls(
            message=str(ex) or type(ex).__name__,
            kind=classify_error(ex),
            operation=operation,
            collection=collection,
            original_error=ex,
        )

    def __repr__(self) -> str:
        return (
            f"StoreError(kind={self.kind.name}, operation={self.operation!r}, "
            f"collection={self.collection!r}, message={self.message!r})"
        )


def _classify_status(status: int) -> ErrorCategory | None:
    if status == 429:
        return ErrorCategory.RATE_LIMIT
    if status in (401, 403):
        return ErrorCategory.PERMISSION_DENIED
    if status == 404:
        return ErrorCategory.NOT_FOUND
    if status == 409:
        return ErrorCategory.CONFLICT
    if status in (400, 422):
        return ErrorCategory.INVALID_INPUT
    if status in (408, 504):
        return ErrorCategory.TIMEOUT
    if 500 <= status < 600:
        return ErrorCategory.SERVICE_UNAVAILABLE
    return None


def classify_error(error: Exception) -> ErrorCategory:
    """Classify an exception into an error category.

    Typed exceptions from google-api-core and aiohttp are mapped directly;
    anything else falls back to inspecting the message text.

    Args:
        error: The exception to classify.

    Returns:
        The ErrorCategory that best matches the error.
    """
    if isinstance(error, (TransientError, PermanentError)):
        return error.category
    if isinstance(error, StoreError):
        return error.kind

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.INVALID_INPUT

    for exc_type, category in _GOOGLE_CATEGORIES:
        if isinstance(error, exc_type):
            return category
    if isinstance(error, gexc.GoogleAPICallError) and error.code is not None:
        by_status = _classify_status(int(error.code))
        if by_status is not None:
            return by_status

    if isinstance(error, aiohttp.ClientResponseError):
        by_status = _classify_status(error.status)
        if by_status is not None:
            return by_status
    if isinstance(error, aiohttp.ClientConnectionError):
        return ErrorCategory.NETWORK

    status = getattr(error, "status", None)
    if isinstance(status, int):
        by_status = _classify_status(status)
        if by_status is not None:
            return by_status

    error_str = str(error).lower()

    if "connection" in error_str or "network" in error_str:
        return ErrorCategory.NETWORK
    if "rate" in error_str and "limit" in error_str:
        return ErrorCategory.RATE_LIMIT
    if "429" in error_str or "too many requests" in error_str:
        return ErrorCategory.RATE_LIMIT
    if "503" in error_str or "service unavailable" in error_str:
        return ErrorCategory.SERVICE_UNAVAILABLE
    if "502" in error_str or "bad gateway" in error_str:
        return ErrorCategory.SERVICE_UNAVAILABLE
    if "401" in error_str or "unauthorized" in error_str:
        return ErrorCategory.PERMISSION_DENIED
    if "403" in error_str or "permission" in error_str:
        return ErrorCategory.PERMISSION_DENIED
    if "404" in error_str or "not found" in error_str:
        return ErrorCategory.NOT_FOUND
    if "400" in error_str or "invalid" in error_str:
        return ErrorCategory.INVALID_INPUT
    if "not configured" in error_str or "credentials" in error_str:
        return ErrorCategory.CONFIGURATION
    if "missing" in error_str and ("token" in error_str or "env" in error_str):
        return ErrorCategory.CONFIGURATION

    return ErrorCategory.UNKNOWN


def is_retryable(category: ErrorCategory) -> bool:
    """Check if an error category is safe to retry."""
    return category in RETRYABLE_CATEGORIES


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: object,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    **kwargs: object,
) -> T:
    """Retry an async call with exponential backoff for transient errors.

    Args:
        func: Async function to call.
        *args: Positional arguments to pass to func.
        max_retries: Maximum number of retry attempts.
        base_delay: Initial delay between retries (seconds).
        max_delay: Maximum delay between retries (seconds).
        exponential_base: Base for exponential backoff calculation.
        **kwargs: Keyword arguments to pass to func.

    Returns:
        The result of the function call.

    Raises:
        TransientError: If all retries are exhausted.
        PermanentError: If a non-retryable error occurs.
    """
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as ex:
            category = classify_error(ex)

            if not is_retryable(category):
                logger.warning(
                    "permanent_error",
                    category=category.name,
                    error=str(ex),
                )
                raise PermanentError.from_exception(ex, category) from ex

            if attempt >= max_retries:
                logger.error(
                    "max_retries_exceeded",
                    category=category.name,
                    attempts=attempt + 1,
                    error=str(ex),
                )
                raise TransientError.from_exception(ex, category) from ex

            delay = min(base_delay * (exponential_base**attempt), max_delay)
            logger.warning(
                "retrying_after_error",
                category=category.name,
                attempt=attempt + 1,
                max_retries=max_retries,
                delay_seconds=delay,
                error=str(ex),
            )
            await asyncio.sleep(delay)
            attempt += 1
