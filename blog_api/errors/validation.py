"""Request validation error handling for FastAPI."""

from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from blog_api.configs import file_logger
from blog_api.errors.base import error_response
from blog_api.utils.helpers import host

logger = file_logger(getLogger(__name__))

VALUE_ERROR_PREFIX = "Value error, "
INVALID_ID_MESSAGE = "Invalid ID format."


def format_validation_error(error: dict[str, Any]) -> str:
    """
    Turn a single pydantic error entry into a readable message.

    Errors raised from our own validators carry their message verbatim; field
    constraint errors are prefixed with the offending field name.
    """
    if str(error.get("type", "")).startswith("uuid"):
        return INVALID_ID_MESSAGE

    message = str(error.get("msg", "Invalid value"))
    if message.startswith(VALUE_ERROR_PREFIX):
        return message.removeprefix(VALUE_ERROR_PREFIX)

    # Skip the 'body' / 'query' / 'path' location marker
    location = [str(loc) for loc in error.get("loc", ())[1:]]
    field = ".".join(location)
    return f"{field}: {message}" if field else message


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle pydantic validation errors as a 400 with the first error as message.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse in the shared error format.
    """
    validation_error = cast(RequestValidationError, exc)
    errors = validation_error.errors()
    message = format_validation_error(errors[0]) if errors else "Invalid request"

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {message}",
    )
    return error_response(message, HTTP_400_BAD_REQUEST)
