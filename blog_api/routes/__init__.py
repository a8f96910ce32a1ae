from blog_api.routes.blog import router as blog_router
from blog_api.routes.comment import router as comment_router
from blog_api.routes.user import router as user_router

__all__ = [
    "blog_router",
    "comment_router",
    "user_router",
]
