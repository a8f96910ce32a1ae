"""Account service: registration, login/logout, profile and password reset."""

from datetime import UTC, datetime, timedelta
from hashlib import sha256
from logging import getLogger
from secrets import token_hex

from blog_api.clients.protocols import EmailSender
from blog_api.configs import file_logger, settings
from blog_api.errors import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    PasswordResetError,
)
from blog_api.managers.password_manager import hash_password, verify_password
from blog_api.managers.revocation_registry import RevocationRegistry
from blog_api.managers.token_manager import create_access_token
from blog_api.models import UserDB
from blog_api.repositories import BlogRepository, CommentRepository, UserRepository
from blog_api.schemas.auth import Identity
from blog_api.schemas.user import UserCreate, UserUpdate
from blog_api.services.email_templates import (
    EmailContent,
    reset_confirmation_email,
    reset_token_email,
    welcome_email,
)

logger = file_logger(getLogger(__name__))


def digest_reset_token(token: str) -> str:
    """SHA-256 hex digest under which a reset token is stored."""
    return sha256(token.encode()).hexdigest()


class AuthService:
    """Service for user accounts and their session tokens."""

    def __init__(
        self,
        user_repo: UserRepository,
        blog_repo: BlogRepository,
        comment_repo: CommentRepository,
        registry: RevocationRegistry,
        email_sender: EmailSender,
    ) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
            blog_repo: Blog repository, used to remove a deleted user's posts
            comment_repo: Comment repository, used to withdraw a deleted user's likes
            registry: Revocation registry for logged-out tokens
            email_sender: Outbound email collaborator
        """
        self.user_repo = user_repo
        self.blog_repo = blog_repo
        self.comment_repo = comment_repo
        self.registry = registry
        self.email_sender = email_sender

    async def _notify(self, to: str, content: EmailContent) -> None:
        """Send a courtesy email; delivery failures are logged, never raised."""
        subject, body = content
        try:
            await self.email_sender.send_email(to, subject, body)
        except Exception:
            logger.exception(f"Failed to send '{subject}' email")

    async def register(self, user: UserCreate) -> UserDB:
        """
        Register a new user and send the welcome email.

        Args:
            user: Registration data

        Returns:
            UserDB: Created user

        Raises:
            ConflictError: If the username or email is already registered
        """
        if await self.user_repo.username_taken(user.username):
            mssg = "Username already exists"
            raise ConflictError(mssg)
        if await self.user_repo.email_taken(str(user.email)):
            mssg = "Email already exists"
            raise ConflictError(mssg)

        password_hash = await hash_password(user.password.get_secret_value())
        db_user = await self.user_repo.create_user(
            username=user.username,
            email=str(user.email),
            password_hash=password_hash,
        )
        logger.info(f"User {db_user.id} registered")

        await self._notify(db_user.email, welcome_email(db_user.username))
        return db_user

    async def login(self, username: str, password: str) -> tuple[UserDB, str]:
        """
        Check credentials and issue a session token.

        Args:
            username: Username
            password: Plain text password

        Returns:
            tuple[UserDB, str]: The user and a freshly signed token

        Raises:
            InvalidCredentialsError: If the username or password is wrong
        """
        user = await self.user_repo.get_by_username(username)
        is_valid = await verify_password(password, user.password_hash if user else None)
        if user is None or not is_valid:
            raise InvalidCredentialsError

        return user, create_access_token(user.id)

    async def logout(self, token: str) -> None:
        """Revoke the presented token."""
        await self.registry.record(token)

    async def current_user(self, identity: Identity) -> UserDB:
        """Resolve the identity attached by the guard to its user record."""
        return await self.user_repo.get_or_raise(identity.id)

    async def update_profile(self, identity: Identity, user_update: UserUpdate) -> UserDB:
        """
        Change username, email and/or profile picture.

        Args:
            identity: Requesting user
            user_update: Fields to change

        Returns:
            UserDB: Updated user

        Raises:
            ConflictError: If the new username or email belongs to someone else
        """
        db_user = await self.user_repo.get_or_raise(identity.id)
        update_data: dict[str, str] = {}

        if user_update.username is not None and user_update.username != db_user.username:
            if await self.user_repo.username_taken(user_update.username, exclude_id=db_user.id):
                mssg = "Username already exists"
                raise ConflictError(mssg)
            update_data["username"] = user_update.username

        new_email = str(user_update.email) if user_update.email is not None else None
        if new_email is not None and new_email != db_user.email:
            if await self.user_repo.email_taken(new_email, exclude_id=db_user.id):
                mssg = "Email already exists"
                raise ConflictError(mssg)
            update_data["email"] = new_email

        if user_update.profile_pic is not None:
            update_data["profile_pic"] = str(user_update.profile_pic)

        if not update_data:
            return db_user
        return await self.user_repo.update_profile(db_user, update_data)

    async def initiate_password_reset(self, email: str) -> None:
        """
        Store a reset token digest and email the plaintext token.

        The token itself is never persisted. If the email cannot be sent the
        whole operation fails and nothing is stored.

        Args:
            email: Address of the account

        Raises:
            NotFoundError: If no account uses this email
        """
        db_user = await self.user_repo.get_by_email(email)
        if db_user is None:
            mssg = "User not found"
            raise NotFoundError(mssg)

        token = token_hex(settings.PASSWORD_RESET_TOKEN_BYTES)
        expires_at = datetime.now(tz=UTC) + timedelta(
            minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES,
        )
        await self.user_repo.set_reset_token(db_user, digest_reset_token(token), expires_at)

        subject, body = reset_token_email(token)
        await self.email_sender.send_email(db_user.email, subject, body)
        logger.info(f"Password reset initiated for user {db_user.id}")

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Consume a reset token and set a new password.

        Args:
            token: Token received by email
            new_password: New plain text password

        Raises:
            PasswordResetError: If no unexpired token matches
        """
        db_user = await self.user_repo.get_by_reset_token(
            digest_reset_token(token),
            datetime.now(tz=UTC),
        )
        if db_user is None:
            raise PasswordResetError

        password_hash = await hash_password(new_password)
        await self.user_repo.complete_password_reset(db_user, password_hash)
        logger.info(f"Password reset completed for user {db_user.id}")

        await self._notify(db_user.email, reset_confirmation_email(db_user.username))

    async def delete_account(self, identity: Identity, confirm_username: str, token: str) -> int:
        """
        Delete the requesting user together with their blogs.

        The user's likes on other people's blogs and comments are withdrawn
        first, so like counters stay equal to the remaining likers.

        Args:
            identity: Requesting user
            confirm_username: Username typed as confirmation (case-sensitive)
            token: Token used for the request, revoked on success

        Returns:
            int: Number of blogs removed with the account

        Raises:
            ForbiddenError: If the confirmation does not match the current username
        """
        db_user = await self.user_repo.get_or_raise(identity.id)
        if confirm_username != db_user.username:
            mssg = "You are not authorized to delete this user"
            raise ForbiddenError(mssg)

        await self.blog_repo.drop_user_likes(db_user.id)
        await self.comment_repo.drop_user_likes(db_user.id)
        deleted_blogs = await self.blog_repo.delete_by_author(db_user.id)
        await self.user_repo.delete(db_user)
        await self.registry.record(token)
        logger.info(f"User {identity.id} deleted with {deleted_blogs} blog(s)")
        return deleted_blogs
