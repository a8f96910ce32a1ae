from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blog_api.errors.base import BaseAppError


class PasswordHashingError(BaseAppError):
    """Raised when the password backend fails to produce a hash."""

    def __init__(self, detail: str = "Failed to hash password") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)
