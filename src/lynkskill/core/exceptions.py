"""Domain errors and the exception handlers that turn them into responses.

Services raise these; route handlers let them propagate. All of them are
``ValueError`` subclasses so callers that only care about "rejected" can keep
catching ``ValueError``.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.lynkskill.core.logging import get_logger

logger = get_logger(__name__)


class DomainError(ValueError):
    """Base class for rejections raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PermissionDeniedError(DomainError):
    """The acting user lacks a permission (or role authority) for the action."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, permission: str | None = None, message: str | None = None):
        self.permission = permission
        if message is None:
            message = f"Permission denied: {permission}" if permission else "Permission denied"
        super().__init__(message)


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailedError(DomainError):
    """Malformed input: bad code format, unknown role, foreign custom role..."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(DomainError):
    """The current state does not allow the transition (already accepted, expired, full...)."""

    status_code = status.HTTP_409_CONFLICT


class RateLimitedError(DomainError):
    """Action attempted before its cooldown elapsed."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after_seconds: int, message: str | None = None):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            message or f"Please wait {retry_after_seconds} seconds before trying again"
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        headers = None
        if isinstance(exc, RateLimitedError):
            headers = {"Retry-After": str(exc.retry_after_seconds)}
        content: dict[str, object] = {
            "detail": exc.message,
            "request_id": correlation_id.get(),
        }
        if isinstance(exc, PermissionDeniedError) and exc.permission:
            content["permission"] = exc.permission
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
