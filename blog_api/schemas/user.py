"""
User schemas.

Request bodies for registration and profile updates, and the public user
representation returned by the API. Password fields never leave the server.
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    SecretStr,
    field_validator,
)

from blog_api.configs.settings import (
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
)


def check_username(value: str) -> str:
    """Strip and length-check a username."""
    username = value.strip()
    if len(username) < MIN_USERNAME_LENGTH:
        mssg = f"Username must be at least {MIN_USERNAME_LENGTH} characters long"
        raise ValueError(mssg)
    if len(username) > MAX_USERNAME_LENGTH:
        mssg = f"Username must be at most {MAX_USERNAME_LENGTH} characters long"
        raise ValueError(mssg)
    return username


def check_password(value: str | SecretStr) -> str | SecretStr:
    """Length-check a password without unwrapping it for good."""
    pwd = value.get_secret_value() if isinstance(value, SecretStr) else value
    if not isinstance(pwd, str) or len(pwd) < MIN_PASSWORD_LENGTH:
        mssg = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        raise ValueError(mssg)
    return value


class UserCreate(BaseModel):
    """User creation model (for request body - excludes auto-generated fields)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    username: str = Field(..., description="Username", examples=["johndoe"])
    email: EmailStr = Field(..., description="Email address", examples=["johndoe@gmail.com"])
    password: SecretStr = Field(..., description="Password", examples=["secret123"])

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username length."""
        return check_username(v) if isinstance(v, str) else v

    @field_validator("password", mode="before")
    @classmethod
    def validate_password_length(cls, v: str | SecretStr) -> str | SecretStr:
        """Validate password length."""
        return check_password(v)


class UserUpdate(BaseModel):
    """Profile update model. Every field is optional; omitted fields stay unchanged."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    username: str | None = Field(default=None, description="New username")
    email: EmailStr | None = Field(default=None, description="New email address")
    profile_pic: HttpUrl | None = Field(
        default=None,
        alias="profilePic",
        description="Profile picture URL",
    )

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        """Validate username length when provided."""
        if v is None or not isinstance(v, str):
            return v
        return check_username(v)


class UserResponse(BaseModel):
    """User response model (without sensitive information)."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    username: str
    email: str
    profile_pic: str | None = Field(default=None, serialization_alias="profilePic")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")


class AuthorResponse(BaseModel):
    """Public author information embedded in blogs and comments."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    username: str
    profile_pic: str | None = Field(default=None, serialization_alias="profilePic")
