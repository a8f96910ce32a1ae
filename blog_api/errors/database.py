"""Persistence failures, mapped onto the HTTP taxonomy."""

from blog_api.errors.base import ConflictError, InternalServerError, NotFoundError


class DatabaseError(InternalServerError):
    """The database rejected an operation for a reason the client cannot fix."""

    def __init__(self, detail: str = "Database error") -> None:
        super().__init__(detail)


class DatabaseInitializationError(DatabaseError):
    def __init__(self, detail: str = "Failed to initialize database") -> None:
        super().__init__(detail)


class DuplicateEntryError(ConflictError):
    """A write collided with a unique column such as a username or email."""

    def __init__(self, detail: str = "Record already exists") -> None:
        super().__init__(detail)


class RecordNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Record not found") -> None:
        super().__init__(detail)
