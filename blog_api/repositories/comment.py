"""Comment repository for database operations."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select

from blog_api.models.comment import CommentDB, CommentLikeDB
from blog_api.repositories.likes import LikeableRepository


class CommentRepository(LikeableRepository[CommentDB]):
    """Repository for comments and replies, always scoped to one blog."""

    model = CommentDB
    like_model = CommentLikeDB
    like_key = "comment_id"
    not_found_message = "Comment not found"

    async def add(
        self,
        blog_id: UUID,
        commenter_id: UUID,
        content: str,
        parent_id: UUID | None = None,
    ) -> CommentDB:
        """
        Add a comment, or a reply when ``parent_id`` is given.

        Args:
            blog_id: Blog being commented on
            commenter_id: Author of the comment
            content: Comment text
            parent_id: Comment being replied to

        Returns:
            CommentDB: Created comment
        """
        comment = CommentDB(
            blog_id=blog_id,
            commenter_id=commenter_id,
            content=content,
            parent_id=parent_id,
        )
        return await self.save(comment)

    async def get_in_blog(self, blog_id: UUID, comment_id: UUID) -> CommentDB | None:
        """
        Resolve a comment (at any depth of the reply tree) within a blog.

        Args:
            blog_id: Blog the comment must belong to
            comment_id: Comment ID

        Returns:
            CommentDB | None: Comment if it belongs to the blog, None otherwise
        """
        result = await self.session.execute(
            select(CommentDB).where(
                CommentDB.id == comment_id,
                CommentDB.blog_id == blog_id,
            ),
        )
        return result.scalar_one_or_none()

    async def list_for_blog(self, blog_id: UUID) -> list[CommentDB]:
        """Every comment and reply of a blog, oldest first."""
        result = await self.session.execute(
            select(CommentDB)
            .where(CommentDB.blog_id == blog_id)
            .order_by(CommentDB.created_at, CommentDB.id),
        )
        return list(result.scalars().all())

    async def edit(self, comment: CommentDB, content: str) -> CommentDB:
        comment.content = content
        comment.updated_at = datetime.now(tz=UTC)
        return await self.save(comment)
