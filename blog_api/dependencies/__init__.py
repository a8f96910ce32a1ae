# blog_api/dependencies/__init__.py

from blog_api.dependencies.dependencies import (
    AuthServiceDep,
    BlogServiceDep,
    CommentServiceDep,
    CurrentTokenDep,
    EmailDep,
    IdentityDep,
    PageQuery,
    PageQueryDep,
    RegistryDep,
    extract_token,
    get_email_sender,
    get_identity,
)

__all__ = [
    "AuthServiceDep",
    "BlogServiceDep",
    "CommentServiceDep",
    "CurrentTokenDep",
    "EmailDep",
    "IdentityDep",
    "PageQuery",
    "PageQueryDep",
    "RegistryDep",
    "extract_token",
    "get_email_sender",
    "get_identity",
]
