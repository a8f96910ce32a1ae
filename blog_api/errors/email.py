from starlette.status import (
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from blog_api.errors.base import BaseAppError


class EmailServiceError(BaseAppError):
    """Base class for all email service related errors."""

    def __init__(
        self,
        detail: str = "Email service error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ConfigurationError(EmailServiceError):
    """Raised when the stored OAuth token is missing."""

    def __init__(self, detail: str = "Email service configuration error") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class EmailAuthenticationError(EmailServiceError):
    """Raised when the OAuth2 token is corrupt or cannot be refreshed."""

    def __init__(self, detail: str = "Email service authentication error") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class SendingError(EmailServiceError):
    """Raised when the Google API fails to send the message."""

    def __init__(self, detail: str = "Email service sending error") -> None:
        super().__init__(detail, HTTP_502_BAD_GATEWAY)
