"""Global exception handlers mapping domain errors to HTTP responses.

Every error body is JSON with a `detail` string. Validation failures also carry
`errors` (one message per problem) so clients can show all of them at once; media
URL failures add `url_errors` with the offending field and an error code.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from focustracks.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateEntityException,
    EntityNotFoundException,
    NoValidMediaUrlException,
    ValidationException,
)
from focustracks.infrastructure.persistence.retry import is_lock_error

logger = logging.getLogger(__name__)


# Hey future me - pydantic's exc.errors() can contain raw bytes (the request body in
# 'input') and exception objects in 'ctx'. Neither is JSON-serializable, and a crash
# while rendering the error response is the worst kind of crash.
def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Make pydantic validation errors JSON-safe."""

    def _sanitize_value(value: Any) -> Any:
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, dict):
            return {k: _sanitize_value(v) for k, v in value.items()}
        if isinstance(value, list | tuple):
            return [_sanitize_value(item) for item in value]
        if isinstance(value, BaseException):
            return str(value)
        return value

    return [_sanitize_value(error) for error in errors]


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain, request-validation and database errors.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(NoValidMediaUrlException)
    async def no_valid_media_url_handler(
        request: Request, exc: NoValidMediaUrlException
    ) -> JSONResponse:
        logger.warning(
            "No valid media URL at %s",
            request.url.path,
            extra={"path": request.url.path, "errors": exc.errors},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": exc.message,
                "errors": exc.errors,
                "url_errors": [
                    {"field": e.field, "code": e.code.value, "message": e.message}
                    for e in exc.url_errors
                ],
            },
        )

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "errors": exc.errors},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(EntityNotFoundException)
    async def entity_not_found_exception_handler(
        request: Request, exc: EntityNotFoundException
    ) -> JSONResponse:
        logger.info(
            "Entity not found at %s: %s %s",
            request.url.path,
            exc.entity_type,
            exc.entity_id,
            extra={"path": request.url.path, "entity_type": exc.entity_type},
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message},
        )

    @app.exception_handler(DuplicateEntityException)
    async def duplicate_entity_exception_handler(
        request: Request, exc: DuplicateEntityException
    ) -> JSONResponse:
        logger.warning(
            "Duplicate entity at %s: %s %s",
            request.url.path,
            exc.entity_type,
            exc.entity_id,
            extra={"path": request.url.path, "entity_type": exc.entity_type},
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message},
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": exc.message},
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(
        request: Request, exc: AuthorizationError
    ) -> JSONResponse:
        logger.warning(
            "Forbidden at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        sanitized_errors = _sanitize_validation_errors(list(exc.errors()))
        logger.warning(
            "Request validation error at %s",
            request.url.path,
            extra={"path": request.url.path, "errors": sanitized_errors},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": sanitized_errors},
        )

    # Listen, a lock error reaching this point means the whole-unit retries were used up.
    # 503 + Retry-After tells the client it is safe to try again; nothing was committed.
    @app.exception_handler(OperationalError)
    async def operational_error_handler(
        request: Request, exc: OperationalError
    ) -> JSONResponse:
        if is_lock_error(exc):
            logger.warning(
                "Database busy at %s",
                request.url.path,
                extra={"path": request.url.path},
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"detail": "Database is busy, please retry"},
                headers={"Retry-After": "1"},
            )
        logger.error(
            "Database error at %s",
            request.url.path,
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"},
        )
