from blog_api.schemas.auth import (
    DeleteAccountRequest,
    Identity,
    LoginRequest,
    PasswordResetRequest,
    ResetPasswordRequest,
    TokenData,
)
from blog_api.schemas.blog import (
    BlogCreate,
    BlogDetailResponse,
    BlogPage,
    BlogResponse,
    BlogUpdate,
)
from blog_api.schemas.comment import CommentCreate, CommentNode
from blog_api.schemas.common import HealthCheckResponse
from blog_api.schemas.user import AuthorResponse, UserCreate, UserResponse, UserUpdate

__all__ = [
    "AuthorResponse",
    "BlogCreate",
    "BlogDetailResponse",
    "BlogPage",
    "BlogResponse",
    "BlogUpdate",
    "CommentCreate",
    "CommentNode",
    "DeleteAccountRequest",
    "HealthCheckResponse",
    "Identity",
    "LoginRequest",
    "PasswordResetRequest",
    "ResetPasswordRequest",
    "TokenData",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
