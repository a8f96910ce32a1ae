"""User repository for database operations."""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.sql.expression import ColumnElement

from blog_api.models.user import UserDB
from blog_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Password hashing happens before data reaches this class; it only ever
    stores hashes.
    """

    model = UserDB
    not_found_message = "User not found"
    duplicate_message = "Username or email already exists"

    async def create_user(self, username: str, email: str, password_hash: str) -> UserDB:
        """
        Create a new user.

        Args:
            username: Unique username
            email: Unique email address
            password_hash: Argon2 hash of the password

        Returns:
            UserDB: Created user

        Raises:
            DuplicateEntryError: If username or email already exists
        """
        db_user = UserDB(username=username, email=email, password_hash=password_hash)
        return await self.save(db_user)

    async def get_by_username(self, username: str) -> UserDB | None:
        """
        Get user by username.

        Args:
            username: Username to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.find_by("username", username)

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email.

        Args:
            email: Email to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.find_by("email", email)

    async def get_many(self, user_ids: set[UUID]) -> dict[UUID, UserDB]:
        """
        Load several users at once, keyed by ID.

        Args:
            user_ids: IDs to load

        Returns:
            dict[UUID, UserDB]: Users found
        """
        if not user_ids:
            return {}
        result = await self.session.execute(
            select(UserDB).where(cast(ColumnElement[bool], UserDB.id.in_(user_ids))),  # type: ignore[attr-defined]
        )
        return {user.id: user for user in result.scalars().all()}

    async def username_taken(self, username: str, exclude_id: UUID | None = None) -> bool:
        return await self.exists("username", username, exclude_id)

    async def email_taken(self, email: str, exclude_id: UUID | None = None) -> bool:
        return await self.exists("email", email, exclude_id)

    async def update_profile(self, db_user: UserDB, update_data: dict[str, Any]) -> UserDB:
        """
        Apply profile changes to a loaded user.

        Args:
            db_user: User to update
            update_data: Column values to set

        Returns:
            UserDB: Updated user

        Raises:
            DuplicateEntryError: If the new username or email is taken
        """
        for key, value in update_data.items():
            setattr(db_user, key, value)
        db_user.updated_at = datetime.now(tz=UTC)
        return await self.save(db_user)

    async def set_reset_token(
        self,
        db_user: UserDB,
        token_digest: str,
        expires_at: datetime,
    ) -> UserDB:
        """
        Store the digest and expiry of a pending password reset.

        Args:
            db_user: User requesting the reset
            token_digest: SHA-256 hex digest of the emailed token
            expires_at: When the token stops being accepted

        Returns:
            UserDB: Updated user
        """
        db_user.password_reset_token = token_digest
        db_user.password_reset_expires_at = expires_at
        return await self.save(db_user)

    async def get_by_reset_token(self, token_digest: str, now: datetime) -> UserDB | None:
        """
        Find the user holding an unexpired reset token.

        Args:
            token_digest: SHA-256 hex digest of the presented token
            now: Reference time for the expiry check

        Returns:
            UserDB | None: Matching user, None if no unexpired token matches
        """
        result = await self.session.execute(
            select(UserDB).where(
                UserDB.password_reset_token == token_digest,
                UserDB.password_reset_expires_at > now,  # type: ignore[operator]
            ),
        )
        return result.scalar_one_or_none()

    async def complete_password_reset(self, db_user: UserDB, password_hash: str) -> UserDB:
        """
        Set a new password hash and clear the reset fields.

        Args:
            db_user: User resetting the password
            password_hash: Hash of the new password

        Returns:
            UserDB: Updated user
        """
        db_user.password_hash = password_hash
        db_user.password_reset_token = None
        db_user.password_reset_expires_at = None
        db_user.updated_at = datetime.now(tz=UTC)
        return await self.save(db_user)
