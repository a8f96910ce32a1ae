"""Authentication errors."""

from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED

from blog_api.errors.base import (
    BadRequestError,
    ForbiddenError,
    UnauthorizedError,
    error_response,
)
from blog_api.utils.helpers import host


class UserAuthenticationError(UnauthorizedError):
    """Base class for authentication errors."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(UserAuthenticationError):
    """Raised when the username/password pair does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class MissingTokenError(UserAuthenticationError):
    """Raised when a protected route is called without a token."""

    def __init__(self) -> None:
        super().__init__("Access denied. No token provided.")


class InvalidTokenError(UserAuthenticationError):
    """Raised when a token fails signature, claim or expiry checks."""

    def __init__(self, detail: str = "Invalid or expired token. Please login again.") -> None:
        super().__init__(detail)
        self.status_code = HTTP_401_UNAUTHORIZED


class TokenRevokedError(BadRequestError):
    """Raised when a token found in the revocation registry is presented again."""

    def __init__(self) -> None:
        super().__init__("Token has been revoked. Please login again.")
        self.status_code = HTTP_400_BAD_REQUEST


class PasswordResetError(BadRequestError):
    """Raised when a reset token does not match or has expired."""

    def __init__(self, detail: str = "Token is invalid or has expired") -> None:
        super().__init__(detail)


class OwnershipError(ForbiddenError):
    """Raised when the requester does not own the resource."""

    def __init__(self, resource: str = "resource") -> None:
        super().__init__(f"Access denied. You are not the author of this {resource}.")


def create_jwt_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Map ``JWTError`` escaping token handling to 401 in the shared format."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.warning(f"JWT error for ip: {host(request)} for endpoint {request.url.path}: {exc}")
        mssg = InvalidTokenError().detail
        return error_response(mssg, HTTP_401_UNAUTHORIZED, {"WWW-Authenticate": "Bearer"})

    return handler
