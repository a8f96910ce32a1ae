# blog_api/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and the auth guard."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.clients import EmailClient, EmailSender, LogOnlyEmailSender
from blog_api.configs import TOKEN_COOKIE_NAME, settings
from blog_api.configs.settings import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from blog_api.db import get_session
from blog_api.errors import MissingTokenError, TokenRevokedError
from blog_api.managers.revocation_registry import RevocationRegistry
from blog_api.managers.token_manager import decode_access_token
from blog_api.repositories import BlogRepository, CommentRepository, UserRepository
from blog_api.schemas.auth import Identity
from blog_api.services import AuthService, BlogService, CommentService
from blog_api.utils.helpers import parse_positive_int

bearer_scheme = HTTPBearer(auto_error=False, description="Session token")

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """
    Pick the session token from the request.

    The ``token`` cookie takes precedence over an ``Authorization: Bearer`` header.
    """
    cookie_token = request.cookies.get(TOKEN_COOKIE_NAME)
    if cookie_token:
        return cookie_token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def get_revocation_registry(session: SessionDep) -> RevocationRegistry:
    return RevocationRegistry(session)


RegistryDep = Annotated[RevocationRegistry, Depends(get_revocation_registry)]


async def get_identity(
    request: Request,
    registry: RegistryDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity:
    """
    Authorization guard for protected routes.

    Parameters
    ----------
    request : Request
        Current request; the resolved identity and token are stored on its state.
    registry : RevocationRegistry
        Registry of logged-out tokens.
    credentials : HTTPAuthorizationCredentials | None
        Bearer header credentials, if any.

    Returns
    -------
    Identity
        Identity of the token holder.

    Raises
    ------
    MissingTokenError
        No token in the cookie or header (401).
    TokenRevokedError
        The token was logged out (400).
    InvalidTokenError
        Bad signature, bad claims or expired (401).
    """
    token = extract_token(request, credentials)
    if not token:
        raise MissingTokenError

    if await registry.is_revoked(token):
        raise TokenRevokedError

    token_data = decode_access_token(token)
    identity = Identity(id=token_data.user_id)
    request.state.identity = identity
    request.state.token = token
    return identity


IdentityDep = Annotated[Identity, Depends(get_identity)]


def get_current_token(request: Request, identity: IdentityDep) -> str:
    """The raw token that authenticated the request."""
    return request.state.token


CurrentTokenDep = Annotated[str, Depends(get_current_token)]


def get_user_repository(session: SessionDep) -> UserRepository:
    return UserRepository(session)


def get_blog_repository(session: SessionDep) -> BlogRepository:
    return BlogRepository(session)


def get_comment_repository(session: SessionDep) -> CommentRepository:
    return CommentRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]
CommentRepoDep = Annotated[CommentRepository, Depends(get_comment_repository)]


@lru_cache
def get_email_sender() -> EmailSender:
    """
    Resolve the outbound email collaborator.

    Returns
    -------
    EmailSender
        Gmail API client, or a log-only sender when mail is disabled.
    """
    if settings.MAIL_ENABLED:
        return EmailClient()
    return LogOnlyEmailSender()


EmailDep = Annotated[EmailSender, Depends(get_email_sender)]


def get_auth_service(
    user_repo: UserRepoDep,
    blog_repo: BlogRepoDep,
    comment_repo: CommentRepoDep,
    registry: RegistryDep,
    email_sender: EmailDep,
) -> AuthService:
    return AuthService(user_repo, blog_repo, comment_repo, registry, email_sender)


def get_comment_service(
    comment_repo: CommentRepoDep,
    blog_repo: BlogRepoDep,
    user_repo: UserRepoDep,
) -> CommentService:
    return CommentService(comment_repo, blog_repo, user_repo)


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


def get_blog_service(
    blog_repo: BlogRepoDep,
    user_repo: UserRepoDep,
    comment_service: CommentServiceDep,
) -> BlogService:
    return BlogService(blog_repo, user_repo, comment_service)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]


@dataclass(frozen=True)
class PageQuery:
    """
    Paging parameters for the blog listing.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Page size.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE


def get_page_query(
    page: Annotated[str | None, Query(description="Page number, defaults to 1")] = None,
    limit: Annotated[str | None, Query(description="Page size, defaults to 10")] = None,
) -> PageQuery:
    """
    Build `PageQuery` leniently: missing or non-numeric values fall back to defaults.

    Returns
    -------
    PageQuery
        Parsed paging parameters.
    """
    return PageQuery(
        page=parse_positive_int(page, DEFAULT_PAGE),
        limit=parse_positive_int(limit, DEFAULT_PAGE_SIZE, maximum=MAX_PAGE_SIZE),
    )


PageQueryDep = Annotated[PageQuery, Depends(get_page_query)]
