"""
Argon2id password hashing through passlib's CryptContext.

Hashing is CPU bound, so services go through the module-level coroutines,
which run the shared hasher in a small thread pool.
"""

from asyncio import get_event_loop
from concurrent.futures import ThreadPoolExecutor
from functools import cache
from logging import getLogger

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from blog_api.configs import CONFIG_MAP, file_logger, settings
from blog_api.decorators.with_retry import with_retry
from blog_api.errors import PasswordHashingError

executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="argon2")
logger = file_logger(getLogger(__name__))


class PasswordHasher:
    """
    Hash and verify account passwords.

    The Argon2 cost profile comes from ``PASSWORD_SECURITY_LEVEL``. Hashes made
    under another profile still verify; a hash is only ever replaced when the
    password itself is set again.
    """

    def __init__(self, level: str | None = None) -> None:
        self.level = level or settings.PASSWORD_SECURITY_LEVEL
        cost = CONFIG_MAP[self.level]
        self.pwd_context = CryptContext(
            schemes=["argon2"],
            argon2__memory_cost=cost.memory_cost,
            argon2__time_cost=cost.time_cost,
            argon2__parallelism=cost.parallelism,
        )
        logger.info(f"Password hashing uses Argon2id at level {self.level}")

    def hash(self, password: str) -> str:
        """
        Hash a plain text password.

        Raises:
            ValueError: If the password is empty
            PasswordHashingError: If the argon2 backend fails
        """
        if not password:
            mssg = "Password cannot be empty"
            raise ValueError(mssg)
        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Argon2 backend could not hash the password")
            mssg = "Failed to hash password"
            raise PasswordHashingError(mssg) from e

    def verify(self, password: str, password_hash: str) -> bool:
        if not password_hash or not password_hash.strip():
            logger.warning("Refusing to verify against an empty password hash")
            return False
        try:
            return self.pwd_context.verify(password, password_hash)
        except ValueError:
            logger.exception("Stored password hash is malformed")
            return False

    def dummy_verify(self) -> bool:
        """Burn one verification's worth of time for a username that does not exist."""
        self.pwd_context.dummy_verify()
        return False


@cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@with_retry(retry_on=PasswordHashingError, base_delay=0.5, max_delay=5)
async def hash_password(password: str) -> str:
    """
    Hash a password off the event loop.

    Args:
        password: Plain text password

    Returns:
        str: Argon2id hash
    """
    return await get_event_loop().run_in_executor(executor, get_password_hasher().hash, password)


async def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Check a password off the event loop.

    An unknown user (``password_hash`` is None) still pays for one dummy
    verification, so response time does not reveal which usernames exist.

    Args:
        password: Plain text password
        password_hash: Stored hash, or None when the user does not exist

    Returns:
        bool: True if the password matches
    """
    hasher = get_password_hasher()
    loop = get_event_loop()
    if password_hash is None:
        return await loop.run_in_executor(executor, hasher.dummy_verify)
    return await loop.run_in_executor(executor, hasher.verify, password, password_hash)

