"""Blog service: publishing, ownership-checked edits, listing and likes."""

from logging import getLogger
from math import ceil
from uuid import UUID

from blog_api.configs import file_logger
from blog_api.errors import BadRequestError, OwnershipError
from blog_api.models import BlogDB
from blog_api.repositories import BlogRepository, UserRepository
from blog_api.schemas.auth import Identity
from blog_api.schemas.blog import (
    BlogCreate,
    BlogDetailResponse,
    BlogPage,
    BlogResponse,
    BlogUpdate,
    normalize_tags,
)
from blog_api.schemas.user import AuthorResponse
from blog_api.services.comment import CommentService

logger = file_logger(getLogger(__name__))


def parse_id(raw: str) -> UUID:
    """
    Parse an identifier coming from a query string.

    Raises:
        BadRequestError: If ``raw`` is not a well-formed ID
    """
    try:
        return UUID(raw.strip())
    except ValueError as e:
        mssg = "Invalid ID format."
        raise BadRequestError(mssg) from e


class BlogService:
    """Service for blog posts. Only a blog's author may change or delete it."""

    def __init__(
        self,
        blog_repo: BlogRepository,
        user_repo: UserRepository,
        comment_service: CommentService,
    ) -> None:
        self.blog_repo = blog_repo
        self.user_repo = user_repo
        self.comment_service = comment_service

    async def _responses(self, blogs: list[BlogDB]) -> list[BlogResponse]:
        likers = await self.blog_repo.liked_by([blog.id for blog in blogs])
        return [
            BlogResponse.model_validate({**blog.model_dump(), "liked_by": likers.get(blog.id, [])})
            for blog in blogs
        ]

    async def _response(self, blog: BlogDB) -> BlogResponse:
        (response,) = await self._responses([blog])
        return response

    async def _get_owned(self, blog_id: UUID, identity: Identity) -> BlogDB:
        blog = await self.blog_repo.get_or_raise(blog_id)
        if blog.author_id != identity.id:
            raise OwnershipError("blog")
        return blog

    async def publish(self, identity: Identity, blog: BlogCreate) -> BlogResponse:
        """
        Create a blog owned by the requester.

        Args:
            identity: Author
            blog: Blog content; status defaults to draft

        Returns:
            BlogResponse: The new blog
        """
        db_blog = await self.blog_repo.create_for_author(blog, identity.id)
        logger.info(f"Blog {db_blog.id} published by {identity.id}")
        return await self._response(db_blog)

    async def update(
        self,
        blog_id: UUID,
        identity: Identity,
        blog_update: BlogUpdate,
    ) -> BlogResponse:
        """
        Edit a blog.

        Raises:
            RecordNotFoundError: If the blog does not exist
            OwnershipError: If the requester is not the author
        """
        db_blog = await self._get_owned(blog_id, identity)
        db_blog = await self.blog_repo.apply_update(db_blog, blog_update)
        return await self._response(db_blog)

    async def delete(self, blog_id: UUID, identity: Identity) -> None:
        """
        Delete a blog with its comments and likes.

        Raises:
            RecordNotFoundError: If the blog does not exist
            OwnershipError: If the requester is not the author
        """
        db_blog = await self._get_owned(blog_id, identity)
        await self.blog_repo.delete(db_blog)
        logger.info(f"Blog {blog_id} deleted by {identity.id}")

    async def like(self, blog_id: UUID, identity: Identity) -> BlogResponse:
        db_blog = await self.blog_repo.get_or_raise(blog_id)
        await self.blog_repo.like(db_blog.id, identity.id)
        await self.blog_repo.session.refresh(db_blog)
        return await self._response(db_blog)

    async def unlike(self, blog_id: UUID, identity: Identity) -> BlogResponse:
        db_blog = await self.blog_repo.get_or_raise(blog_id)
        await self.blog_repo.unlike(db_blog.id, identity.id)
        await self.blog_repo.session.refresh(db_blog)
        return await self._response(db_blog)

    async def list_page(self, page: int, limit: int) -> BlogPage:
        """
        One page of blogs, newest first.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            BlogPage: Blogs with paging totals
        """
        blogs, total = await self.blog_repo.get_page(skip=(page - 1) * limit, limit=limit)
        return BlogPage(
            blogs=await self._responses(blogs),
            page=page,
            limit=limit,
            total_blogs=total,
            total_pages=ceil(total / limit),
        )

    async def get_detail(self, blog_id: UUID) -> BlogDetailResponse:
        """A blog populated with its author and comment tree."""
        db_blog = await self.blog_repo.get_or_raise(blog_id)
        response = await self._response(db_blog)
        author = await self.user_repo.get(db_blog.author_id)
        return BlogDetailResponse(
            **response.model_dump(),
            author=AuthorResponse.model_validate(author) if author else None,
            comments=await self.comment_service.blog_tree(db_blog.id),
        )

    async def search(self, query: str | None) -> list[BlogResponse]:
        """
        Case-insensitive substring search.

        Raises:
            BadRequestError: If the query is missing or blank
        """
        if not query or not query.strip():
            mssg = "Search query is required"
            raise BadRequestError(mssg)
        return await self._responses(await self.blog_repo.search(query.strip()))

    async def filter_by_tags(self, tags: list[str]) -> list[BlogResponse]:
        """
        Blogs carrying any of the given tags.

        Raises:
            BadRequestError: If no tag is given or a tag is malformed
        """
        if not tags:
            mssg = "At least one tag is required"
            raise BadRequestError(mssg)
        try:
            wanted = normalize_tags(tags)
        except ValueError as e:
            raise BadRequestError(str(e)) from e
        return await self._responses(await self.blog_repo.filter(tags=wanted))

    async def filter_by_author(self, author: str | None) -> list[BlogResponse]:
        """
        Blogs written by one user.

        Raises:
            BadRequestError: If the author ID is missing or malformed
        """
        if not author:
            mssg = "Author ID is required"
            raise BadRequestError(mssg)
        return await self._responses(await self.blog_repo.filter(author_id=parse_id(author)))
