from collections.abc import Awaitable, Callable
from logging import Logger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from blog_api.configs import DEFAULT_ERROR_MESSAGE
from blog_api.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


class BadRequestError(BaseAppError):
    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class UnauthorizedError(BaseAppError):
    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED)


class ForbiddenError(BaseAppError):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


class NotFoundError(BaseAppError):
    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class ConflictError(BaseAppError):
    def __init__(self, detail: str = "Conflict") -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class InternalServerError(BaseAppError):
    def __init__(self, detail: str = DEFAULT_ERROR_MESSAGE) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(
    message: str,
    status_code: int,
    headers: dict[str, str] | None = None,
) -> ORJSONResponse:
    """
    Build the error body shared by every handler.

    Client errors are reported as ``fail``, server errors as ``error``.
    """
    status = "error" if status_code >= HTTP_500_INTERNAL_SERVER_ERROR else "fail"
    return ORJSONResponse(
        content={"status": status, "message": message},
        status_code=status_code,
        headers=headers,
    )


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", DEFAULT_ERROR_MESSAGE)

        if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                f"{detail} for ip: {host(request)} for endpoint {request.url.path}",
                exc_info=exc,
            )
            # Internal details stay in the logs.
            detail = DEFAULT_ERROR_MESSAGE
        else:
            logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        return error_response(detail, status_code, getattr(exc, "headers", None))

    return handler


async def http_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render framework HTTP errors (unknown routes, wrong methods) in the shared format."""
    http_exc = cast(StarletteHTTPException, exc)
    return error_response(str(http_exc.detail), http_exc.status_code, http_exc.headers)
