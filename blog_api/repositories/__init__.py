"""Repository layer for database operations."""

from blog_api.repositories.base import BaseRepository
from blog_api.repositories.blog import BlogRepository
from blog_api.repositories.comment import CommentRepository
from blog_api.repositories.likes import LikeableRepository
from blog_api.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "BlogRepository",
    "CommentRepository",
    "LikeableRepository",
    "UserRepository",
]
