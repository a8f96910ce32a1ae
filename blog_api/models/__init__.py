"""Database models for the application."""

from blog_api.models.blog import BlogDB, BlogLikeDB
from blog_api.models.comment import CommentDB, CommentLikeDB
from blog_api.models.revoked_token import RevokedTokenDB
from blog_api.models.user import UserDB

__all__ = ["BlogDB", "BlogLikeDB", "CommentDB", "CommentLikeDB", "RevokedTokenDB", "UserDB"]
