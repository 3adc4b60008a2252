"""Shared logger helpers for consistent, dotted operation events.

USAGE:
    from focustracks.infrastructure.observability.logger_template import (
        log_operation,
        start_operation,
        end_operation,
    )

    async with log_operation(logger, "track.verify", track_id="abc"):
        await client.check_video(url)

    start_time, op_id = start_operation(logger, "playlist.move_track", playlist_id=pid)
    ...
    end_operation(logger, "playlist.move_track", start_time, op_id, playlist_id=pid)
"""

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any


# Yo, wrap any awaited unit of work in this and you get .started / .completed / .failed
# events with duration_ms for free. It re-raises, so callers still see the exception.
@asynccontextmanager
async def log_operation(
    logger: logging.Logger,
    operation: str,
    **context: Any,
) -> AsyncIterator[None]:
    """Log operation start/end with automatic timing.

    Args:
        logger: Logger instance
        operation: Dotted operation name (e.g. "track.verify")
        **context: Extra fields added to every event
    """
    start = time.monotonic()
    logger.info(f"{operation}.started", extra=context)
    try:
        yield
    except Exception as e:
        logger.error(
            f"{operation}.failed",
            extra={
                **context,
                "duration_ms": int((time.monotonic() - start) * 1000),
                "error": str(e),
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        raise
    logger.info(
        f"{operation}.completed",
        extra={**context, "duration_ms": int((time.monotonic() - start) * 1000)},
    )


def start_operation(
    logger: logging.Logger,
    operation: str,
    operation_id: str | None = None,
    log_level: int = logging.INFO,
    **context: Any,
) -> tuple[float, str]:
    """Log operation start and return (start_time, operation_id) for end_operation()."""
    if operation_id is None:
        operation_id = str(uuid.uuid4())

    start_time = time.monotonic()
    logger.log(
        log_level,
        f"{operation}.started",
        extra={**context, "operation_id": operation_id},
    )
    return start_time, operation_id


def end_operation(
    logger: logging.Logger,
    operation: str,
    start_time: float,
    operation_id: str,
    success: bool = True,
    error: Exception | None = None,
    log_level: int = logging.INFO,
    **context: Any,
) -> None:
    """Log operation end with duration.

    Args:
        logger: Logger instance
        operation: Operation name (must match start_operation)
        start_time: Start time from start_operation()
        operation_id: Operation ID from start_operation()
        success: Whether operation succeeded
        error: The exception when it failed
        log_level: Level for the success event. Failures of domain rule checks
            (duplicate, not found) are expected outcomes, so callers pass
            logging.WARNING with success=False for those.
        **context: Additional fields (should match start_operation)
    """
    duration_ms = int((time.monotonic() - start_time) * 1000)
    fields = {**context, "operation_id": operation_id, "duration_ms": duration_ms}

    if success:
        logger.log(log_level, f"{operation}.completed", extra=fields)
        return

    fields["error"] = str(error) if error else "Unknown error"
    fields["error_type"] = type(error).__name__ if error else "Unknown"
    level = max(log_level, logging.WARNING)
    logger.log(
        level,
        f"{operation}.failed",
        extra=fields,
        exc_info=error is not None and level >= logging.ERROR,
    )


def log_slow_operation(
    logger: logging.Logger,
    operation: str,
    duration_ms: int,
    threshold_ms: int = 100,
    **context: Any,
) -> None:
    """Log a warning if an operation took longer than threshold_ms."""
    if duration_ms > threshold_ms:
        logger.warning(
            "operation.slow",
            extra={
                **context,
                "operation": operation,
                "duration_ms": duration_ms,
                "threshold_ms": threshold_ms,
            },
        )
