"""Blog repository for database operations."""

from datetime import UTC, datetime
from re import fullmatch
from uuid import UUID

from sqlalchemy import String, cast, delete, desc, or_, select
from sqlalchemy.sql.expression import ColumnElement

from blog_api.models.blog import BlogDB, BlogLikeDB
from blog_api.repositories.likes import LikeableRepository
from blog_api.schemas.blog import TAG_PATTERN, BlogCreate, BlogUpdate


def _tag_match(tag: str) -> ColumnElement[bool]:
    """Match blogs whose JSON tag array holds ``tag`` (tags are ``[a-z0-9-]+``)."""
    return cast(BlogDB.tags, String).contains(f'"{tag}"', autoescape=True)


class BlogRepository(LikeableRepository[BlogDB]):
    """
    Repository for Blog database operations.

    Listing queries return newest first.
    """

    model = BlogDB
    like_model = BlogLikeDB
    like_key = "blog_id"
    not_found_message = "Blog not found"

    async def create_for_author(self, blog: BlogCreate, author_id: UUID) -> BlogDB:
        """
        Create a blog owned by ``author_id``.

        Args:
            blog: Blog creation schema
            author_id: Owner of the new blog

        Returns:
            BlogDB: Created blog
        """
        db_blog = BlogDB(
            author_id=author_id,
            title=blog.title,
            content=blog.content,
            tags=blog.tags,
            status=blog.status,
        )
        return await self.save(db_blog)

    async def apply_update(self, db_blog: BlogDB, blog_update: BlogUpdate) -> BlogDB:
        """
        Apply a partial update to a loaded blog.

        Args:
            db_blog: Blog to update
            blog_update: Fields to change; unset fields stay untouched

        Returns:
            BlogDB: Updated blog
        """
        update_data = blog_update.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(db_blog, key, value)
        db_blog.updated_at = datetime.now(tz=UTC)
        return await self.save(db_blog)

    async def get_page(self, skip: int, limit: int) -> tuple[list[BlogDB], int]:
        """
        Get one page of blogs plus the total count.

        Args:
            skip: Number of blogs to skip
            limit: Page size

        Returns:
            tuple[list[BlogDB], int]: The page and the total number of blogs
        """
        total = await self.count()
        statement = (
            select(BlogDB)
            .order_by(desc(BlogDB.created_at), BlogDB.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def search(self, query: str) -> list[BlogDB]:
        """
        Case-insensitive substring search over title, content and tags.

        Tags are stored as a JSON array, so the tag column is only searched when
        the query could be part of a single tag; otherwise JSON punctuation in
        the query would match every tagged blog.

        Args:
            query: Text to look for; LIKE wildcards in it are matched literally

        Returns:
            list[BlogDB]: Matching blogs
        """
        conditions = [
            BlogDB.title.icontains(query, autoescape=True),  # type: ignore[attr-defined]
            BlogDB.content.icontains(query, autoescape=True),  # type: ignore[attr-defined]
        ]
        if fullmatch(TAG_PATTERN, query.lower()):
            conditions.append(cast(BlogDB.tags, String).icontains(query, autoescape=True))
        statement = select(BlogDB).where(or_(*conditions)).order_by(desc(BlogDB.created_at))
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def filter(
        self,
        tags: list[str] | None = None,
        author_id: UUID | None = None,
    ) -> list[BlogDB]:
        """
        Filter blogs by any of ``tags`` and/or by author.

        Args:
            tags: Blogs carrying at least one of these tags match
            author_id: Blogs written by this user match

        Returns:
            list[BlogDB]: Matching blogs
        """
        statement = select(BlogDB)
        if tags:
            statement = statement.where(or_(*(_tag_match(tag) for tag in tags)))
        if author_id is not None:
            statement = statement.where(BlogDB.author_id == author_id)
        statement = statement.order_by(desc(BlogDB.created_at))
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete_by_author(self, author_id: UUID) -> int:
        """
        Delete every blog written by a user.

        Args:
            author_id: Author whose blogs are removed

        Returns:
            int: Number of deleted blogs
        """
        result = await self.session.execute(
            delete(BlogDB)
            .where(BlogDB.author_id == author_id)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount
