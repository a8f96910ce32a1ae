from blog_api.errors.auth import (
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    OwnershipError,
    PasswordResetError,
    TokenRevokedError,
    UserAuthenticationError,
    create_jwt_exception_handler,
)
from blog_api.errors.base import (
    BadRequestError,
    BaseAppError,
    ConflictError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
    create_exception_handler,
    error_response,
    http_exception_handler,
)
from blog_api.errors.database import (
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    RecordNotFoundError,
)
from blog_api.errors.email import (
    ConfigurationError,
    EmailAuthenticationError,
    EmailServiceError,
    SendingError,
)
from blog_api.errors.password_hasher import PasswordHashingError
from blog_api.errors.validation import validation_exception_handler

__all__ = [
    "BadRequestError",
    "BaseAppError",
    "ConfigurationError",
    "ConflictError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "EmailAuthenticationError",
    "EmailServiceError",
    "ForbiddenError",
    "InternalServerError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
    "NotFoundError",
    "OwnershipError",
    "PasswordHashingError",
    "PasswordResetError",
    "RecordNotFoundError",
    "SendingError",
    "TokenRevokedError",
    "UnauthorizedError",
    "UserAuthenticationError",
    "create_exception_handler",
    "create_jwt_exception_handler",
    "error_response",
    "http_exception_handler",
    "validation_exception_handler",
]
