# Hey future me - SQLite allows ONE writer at a time. Two playlist edits hitting the
# database at once means one of them gets "database is locked". Locks are temporary, so
# we wait and try again.
#
# The one rule that matters here: retry the WHOLE unit of work. For playlist writes that
# means new session, re-read memberships, recompute positions, write, commit. Re-running
# only the failed UPDATE against positions computed from a stale read would corrupt the
# 1..N ordering. execute_with_retry takes a zero-arg callable for exactly this reason -
# the callable opens its own transaction every time it runs.
"""Database retry utilities for handling SQLite lock errors."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_MAX_DELAY = 5.0


class DatabaseLockMetrics:
    """Counters for database lock events, exposed on the health endpoint.

    Process-wide singleton. Tests call reset() between cases.
    """

    _instance: DatabaseLockMetrics | None = None

    def __init__(self) -> None:
        """Initialize metrics counters."""
        self.lock_attempts: int = 0
        self.lock_successes: int = 0
        self.lock_failures: int = 0
        self.lock_retries: int = 0
        self.total_wait_time_ms: float = 0.0
        self.max_wait_time_ms: float = 0.0
        self.last_lock_event: float | None = None

    @classmethod
    def get_instance(cls) -> DatabaseLockMetrics:
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def record_attempt(self) -> None:
        self.lock_attempts += 1

    def record_success(self, wait_time_ms: float = 0.0) -> None:
        """Record a successful operation.

        Args:
            wait_time_ms: Time spent backing off before the success (0 if none)
        """
        self.lock_successes += 1
        self.total_wait_time_ms += wait_time_ms
        self.max_wait_time_ms = max(self.max_wait_time_ms, wait_time_ms)
        if wait_time_ms > 0:
            self.last_lock_event = time.time()

    def record_failure(self) -> None:
        """Record an operation that gave up after all attempts."""
        self.lock_failures += 1
        self.last_lock_event = time.time()
        logger.warning(
            "Database lock failure recorded (total failures: %d)", self.lock_failures
        )

    def record_retry(self) -> None:
        self.lock_retries += 1

    def get_stats(self) -> dict[str, Any]:
        """Get all metrics as a dictionary."""
        attempts = self.lock_attempts
        return {
            "lock_attempts": attempts,
            "lock_successes": self.lock_successes,
            "lock_failures": self.lock_failures,
            "lock_retries": self.lock_retries,
            "total_wait_time_ms": round(self.total_wait_time_ms, 2),
            "max_wait_time_ms": round(self.max_wait_time_ms, 2),
            "failure_rate": round(self.lock_failures / attempts if attempts else 0, 4),
            "retry_rate": round(self.lock_retries / attempts if attempts else 0, 4),
            "last_lock_event_timestamp": self.last_lock_event,
        }

    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        self.__init__()  # type: ignore[misc]


def is_lock_error(exception: BaseException) -> bool:
    """Check if an exception is a retryable database lock error.

    Only "locked"/"busy" OperationalErrors count. Connection failures and every
    other OperationalError fail fast.
    """
    if not isinstance(exception, OperationalError):
        return False
    error_msg = str(exception).lower()
    return "locked" in error_msg or "busy" in error_msg


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    initial_delay: float = 0.5,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_factor: float = 2.0,
    operation_name: str = "operation",
    track_metrics: bool = True,
) -> T:
    """Run an async operation, re-running it from scratch on lock errors.

    Args:
        operation: Zero-arg async callable. Called once per attempt.
        max_attempts: Maximum attempts including the first
        initial_delay: Delay before the first retry in seconds
        max_delay: Cap for the exponential backoff
        backoff_factor: Multiplier applied to the delay after each retry
        operation_name: Used in log messages
        track_metrics: Record attempts in DatabaseLockMetrics

    Returns:
        Result of the operation

    Raises:
        OperationalError: When the lock persists after max_attempts, or immediately
            for non-lock errors. Every other exception propagates untouched.
    """
    metrics = DatabaseLockMetrics.get_instance() if track_metrics else None
    delay = initial_delay
    total_wait_ms = 0.0
    start_time = time.monotonic()

    if metrics:
        metrics.record_attempt()

    for attempt in range(1, max_attempts + 1):
        try:
            result = await operation()
        except OperationalError as e:
            if not is_lock_error(e) or attempt == max_attempts:
                if is_lock_error(e):
                    logger.error(
                        "Database locked after %d attempts (%.0fms total), giving up: %s",
                        max_attempts,
                        (time.monotonic() - start_time) * 1000,
                        operation_name,
                    )
                if metrics:
                    metrics.record_failure()
                raise

            if metrics:
                metrics.record_retry()
            logger.warning(
                "Database locked (attempt %d/%d), retrying in %.2fs: %s",
                attempt,
                max_attempts,
                delay,
                operation_name,
            )
            await asyncio.sleep(delay)
            total_wait_ms += delay * 1000
            delay = min(delay * backoff_factor, max_delay)
        else:
            if metrics:
                metrics.record_success(total_wait_ms)
            return result

    raise RuntimeError("Unexpected state in execute_with_retry")


def with_db_retry(
    max_attempts: int = 3,
    initial_delay: float = 0.5,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_factor: float = 2.0,
    track_metrics: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator form of execute_with_retry.

    Only decorate functions that own their transaction (open and commit a session
    themselves). Decorating a repository method that runs inside someone else's
    session would retry a sub-step, which is exactly what must not happen.

    Example:
        @with_db_retry(max_attempts=3)
        async def create_playlist(self, user_id: str, name: str) -> Playlist:
            async with self._db.session_scope() as session:
                ...
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await execute_with_retry(
                lambda: func(*args, **kwargs),
                max_attempts=max_attempts,
                initial_delay=initial_delay,
                max_delay=max_delay,
                backoff_factor=backoff_factor,
                operation_name=f"{func.__module__}.{func.__qualname__}",
                track_metrics=track_metrics,
            )

        return wrapper

    return decorator
