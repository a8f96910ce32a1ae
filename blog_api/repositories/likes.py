"""
Like/unlike engine shared by blogs and comments.

Each liked document has a ``likes`` counter and a membership table keyed by
(document, user). A like inserts the membership row and bumps the counter in
the same transaction; the counter only moves when the membership row actually
changed, so repeated calls are no-ops and the two never diverge. Counter
updates are issued as ``likes = likes + 1`` so concurrent likes from
different users are all counted.
"""

from collections import defaultdict
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlmodel import SQLModel

from blog_api.repositories.base import BaseRepository


class LikeableRepository[ModelT: SQLModel](BaseRepository[ModelT]):
    """
    Repository mixin adding idempotent like toggles.

    Attributes:
        like_model: Membership table model.
        like_key: Column of ``like_model`` referencing the liked document.
    """

    like_model: ClassVar[type[SQLModel]]
    like_key: ClassVar[str]

    def _membership(self, record_id: UUID, user_id: UUID) -> list[Any]:
        return [
            getattr(self.like_model, self.like_key) == record_id,
            self.like_model.user_id == user_id,  # type: ignore[attr-defined]
        ]

    async def _shift_likes(self, record_id: UUID, delta: int) -> None:
        id_column = self.model.id  # type: ignore[attr-defined]
        likes_column = self.model.likes  # type: ignore[attr-defined]
        statement = (
            update(self.model)
            .where(id_column == record_id)
            .values(likes=likes_column + delta)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(statement)

    async def like(self, record_id: UUID, user_id: UUID) -> bool:
        """
        Mark a document as liked by a user.

        Args:
            record_id: Liked document ID
            user_id: Liking user ID

        Returns:
            bool: True if the state changed, False if it was already liked
        """
        inserted = await self._insert_ignore(
            self.like_model,
            {self.like_key: record_id, "user_id": user_id},
        )
        if inserted:
            await self._shift_likes(record_id, 1)
        return inserted

    async def unlike(self, record_id: UUID, user_id: UUID) -> bool:
        """
        Remove a user's like from a document.

        Args:
            record_id: Liked document ID
            user_id: Liking user ID

        Returns:
            bool: True if the state changed, False if it was not liked
        """
        statement = delete(self.like_model).where(*self._membership(record_id, user_id))
        result = await self.session.execute(statement)
        removed = result.rowcount == 1
        if removed:
            await self._shift_likes(record_id, -1)
        return removed

    async def drop_user_likes(self, user_id: UUID) -> int:
        """
        Withdraw every like a user gave, decrementing each affected counter.

        Args:
            user_id: User whose likes are removed

        Returns:
            int: Number of documents whose counter went down
        """
        key_column = getattr(self.like_model, self.like_key)
        user_column = self.like_model.user_id  # type: ignore[attr-defined]
        liked_ids = select(key_column).where(user_column == user_id)
        statement = (
            update(self.model)
            .where(self.model.id.in_(liked_ids))  # type: ignore[attr-defined]
            .values(likes=self.model.likes - 1)  # type: ignore[attr-defined]
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        await self.session.execute(delete(self.like_model).where(user_column == user_id))
        return result.rowcount

    async def liked_by(self, record_ids: list[UUID]) -> dict[UUID, list[UUID]]:
        """
        Map each document ID to the users liking it, oldest like first.

        Args:
            record_ids: Document IDs to look up

        Returns:
            dict[UUID, list[UUID]]: Liking user IDs per document
        """
        likers: dict[UUID, list[UUID]] = defaultdict(list)
        if not record_ids:
            return likers

        key_column = getattr(self.like_model, self.like_key)
        statement = (
            select(key_column, self.like_model.user_id)  # type: ignore[attr-defined]
            .where(key_column.in_(record_ids))
            .order_by(self.like_model.created_at)  # type: ignore[attr-defined]
        )
        result = await self.session.execute(statement)
        for record_id, user_id in result.all():
            likers[record_id].append(user_id)
        return likers
