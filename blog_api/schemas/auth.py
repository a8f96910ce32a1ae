from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator

from blog_api.schemas.user import check_password


class Identity(BaseModel):
    """Identity attached to an authenticated request."""

    model_config = ConfigDict(frozen=True)

    id: UUID


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    user_id: UUID
    jti: str
    token_type: str = "access"


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    username: str = Field(..., min_length=1, examples=["johndoe"])
    password: SecretStr = Field(..., examples=["secret123"])


class DeleteAccountRequest(BaseModel):
    """Body of the delete-account call; the username must be retyped as a confirmation."""

    username: str = Field(..., description="Current username, case-sensitive")


class PasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., examples=["johndoe@gmail.com"])


class ResetPasswordRequest(BaseModel):
    """Reset token received by email plus the new password."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., min_length=1, description="Token received by email")
    new_password: SecretStr = Field(..., alias="newPassword", description="New password")

    @field_validator("new_password", mode="before")
    @classmethod
    def validate_password_length(cls, v: str | SecretStr) -> str | SecretStr:
        """Validate new password length."""
        return check_password(v)
