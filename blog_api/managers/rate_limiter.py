"""Per-client request limits with slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from blog_api.configs import LimiterConfig, file_logger
from blog_api.errors import error_response

logger = file_logger(getLogger(__name__))


def client_key(request: Request) -> str:
    """Bucket requests by client address; sessions are not trusted before login."""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=client_key)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Answer 429 in the shared error format with a ``Retry-After`` hint.

    Args:
        request: FastAPI request object.
        exc: RateLimitExceeded exception.

    Returns:
        JSON response with error details.
    """
    exceeded = cast(RateLimitExceeded, exc)
    logger.warning(
        f"Rate limit {exceeded.detail} hit by {client_key(request)} on {request.url.path}",
    )
    response = error_response(
        f"Too many requests, limit is {exceeded.detail}. Please try again later.",
        HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(exceeded.limit.limit.get_expiry())},
    )
    return request.app.state.limiter._inject_headers(  # noqa: SLF001
        response,
        request.state.view_rate_limit,
    )
