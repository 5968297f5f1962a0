"""
Retry utilities for optimistic-concurrency conflicts.

A conditional write that loses its compare-and-swap is not an error for the
caller: the operation re-reads current state, re-validates and tries again.
These helpers bound that loop and log every retry.
"""

import asyncio
import logging
from functools import wraps
from typing import Awaitable, Callable, TypeVar

from app.domain.errors import OptimisticLockError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VersionConflict(Exception):
    """Raised by an attempt that lost a compare-and-swap and must start over."""

    def __init__(self, message: str, resource_id: str | None = None) -> None:
        super().__init__(message)
        self.resource_id = resource_id


RETRYABLE_ERRORS: tuple[type[Exception], ...] = (OptimisticLockError, VersionConflict)


async def retry_on_conflict(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.0,
    retry_on: tuple[type[Exception], ...] = RETRYABLE_ERRORS,
) -> T:
    """
    Retry an async callable while it fails with a concurrency conflict.

    Uses exponential backoff: base_delay * (2 ** attempt)

    Args:
        func: Zero-argument coroutine function; each call must re-read state
        max_attempts: Maximum number of attempts (default: 3)
        base_delay: Base delay in seconds for exponential backoff (default: 0)
        retry_on: Exception types that trigger a retry

    Returns:
        The result of the function call

    Raises:
        The last conflict if max attempts are exceeded, or any other error immediately
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except retry_on as e:
            if attempt == max_attempts - 1:
                logger.error(
                    "Concurrency conflict persists after max retries",
                    extra={"attempts": max_attempts, "error": str(e)},
                )
                raise

            delay = base_delay * (2**attempt)
            logger.warning(
                "Concurrency conflict detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            if delay:
                await asyncio.sleep(delay)

    raise RuntimeError("Unexpected state in retry_on_conflict")


def with_conflict_retry(max_attempts: int = 3, base_delay: float = 0.0):
    """
    Decorator form of retry_on_conflict.

    Example:
        @with_conflict_retry(max_attempts=3)
        async def apply_status(booking_id: str) -> None:
            booking = await repo.get(booking_id)
            ...
            await repo.save(booking, expected_lock_version=booking.lock_version)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            async def execute() -> T:
                return await func(*args, **kwargs)

            return await retry_on_conflict(execute, max_attempts, base_delay)

        return wrapper

    return decorator
