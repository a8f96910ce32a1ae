"""User database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class UserDB(SQLModel, table=True):
    """
    User database model.

    Owns the credential fields. Only the SHA-256 digest of a password reset
    token is stored, never the token itself.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )

    # Required fields
    username: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True),
        description="Username (unique)",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Argon2 password hash",
    )

    # Optional profile fields
    profile_pic: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Profile picture URL",
    )

    # Password reset
    password_reset_token: str | None = Field(
        default=None,
        sa_column=Column(String(64), index=True),
        description="SHA-256 hex digest of the pending reset token",
    )
    password_reset_expires_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Reset token expiry",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "johndoe",
                "email": "johndoe@gmail.com",
                "profile_pic": "https://example.com/johndoe.png",
            },
        },
    )
