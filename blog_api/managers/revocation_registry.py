"""
Revocation registry for logged-out session tokens.

The registry is a small, recency-bounded denylist stored in the database: it
keeps at most ``REVOKED_TOKEN_LIMIT`` tokens and evicts the oldest once the
bound is exceeded. A token evicted this way is accepted again until it
expires on its own.
"""

from logging import getLogger

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.configs import file_logger, settings
from blog_api.models.revoked_token import RevokedTokenDB
from blog_api.repositories.base import BaseRepository

logger = file_logger(getLogger(__name__))


class RevocationRegistry(BaseRepository[RevokedTokenDB]):
    """
    Database-backed denylist of logged-out tokens.

    Attributes:
        limit: Maximum number of tokens kept after eviction.
    """

    model = RevokedTokenDB

    def __init__(self, session: AsyncSession, limit: int | None = None) -> None:
        """
        Initialize the registry.

        Args:
            session: Async database session
            limit: Bound on the registry size, defaults to ``REVOKED_TOKEN_LIMIT``
        """
        super().__init__(session)
        self.limit = limit if limit is not None else settings.REVOKED_TOKEN_LIMIT

    async def record(self, token: str) -> None:
        """
        Add a token to the registry and evict the overflow.

        Recording the same token twice is a no-op. Eviction is best-effort:
        a failure is logged and the token stays recorded.

        Args:
            token: Raw token presented at logout
        """
        inserted = await self._insert_ignore(RevokedTokenDB, {"token": token})
        if not inserted:
            logger.debug("Token already present in revocation registry")
            return

        try:
            async with self.session.begin_nested():
                evicted = await self._evict_overflow()
        except SQLAlchemyError:
            logger.exception("Failed to evict old revoked tokens")
            return

        if evicted:
            logger.info(f"Evicted {evicted} revoked token(s) beyond limit {self.limit}")

    async def is_revoked(self, token: str) -> bool:
        """
        Check whether a token has been logged out.

        Args:
            token: Raw token to look up

        Returns:
            bool: True if the token is in the registry
        """
        result = await self.session.execute(
            select(1).where(RevokedTokenDB.token == token).limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def size(self) -> int:
        """Number of tokens currently held."""
        return await self.count()

    async def _evict_overflow(self) -> int:
        """Delete the oldest entries beyond ``limit``; returns how many went."""
        total = await self.count()
        overflow = total - self.limit
        if overflow <= 0:
            return 0

        oldest = (
            select(RevokedTokenDB.id)
            .order_by(RevokedTokenDB.created_at, RevokedTokenDB.id)
            .limit(overflow)
        )
        result = await self.session.execute(
            delete(RevokedTokenDB)
            .where(RevokedTokenDB.id.in_(oldest))  # type: ignore[union-attr]
            .execution_options(synchronize_session=False),
        )
        return result.rowcount
