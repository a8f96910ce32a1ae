from blog_api.services.auth import AuthService
from blog_api.services.blog import BlogService
from blog_api.services.comment import CommentService

__all__ = ["AuthService", "BlogService", "CommentService"]
