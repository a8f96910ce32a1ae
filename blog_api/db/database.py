"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine.interfaces import DBAPIConnection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import ConnectionPoolEntry, StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from blog_api.configs import file_logger, settings
from blog_api.errors import BaseAppError, DatabaseInitializationError

logger = file_logger(getLogger(__name__))

STATEMENT_TIMEOUT_MS = 30000


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _engine_options(url: str) -> dict[str, Any]:
    """Pool and driver options for the configured backend."""
    if _is_sqlite(url):
        # One shared connection so in-memory databases survive across sessions.
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_timeout": settings.POOL_TIMEOUT,
        "pool_recycle": settings.POOL_RECYCLE,
        "pool_pre_ping": True,
        "connect_args": {
            "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
            "server_settings": {
                "statement_timeout": str(STATEMENT_TIMEOUT_MS),
                "lock_timeout": str(STATEMENT_TIMEOUT_MS),
            },
        },
    }


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: DBAPIConnection,
        connection_record: ConnectionPoolEntry,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(
        dbapi_connection: DBAPIConnection,
        connection_record: ConnectionPoolEntry,
    ) -> None:
        logger.debug("Connection returned to pool")


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(
        dbapi_connection: DBAPIConnection,
        connection_record: ConnectionPoolEntry,
    ) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_options(settings.DATABASE_URL),
)

if _is_sqlite(settings.DATABASE_URL):
    _enable_sqlite_foreign_keys(engine)

if settings.DEBUG:
    _configure_engine_events(engine)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    The session is scoped to the request: it commits when the handler
    returns and rolls back when it raises.

    Yields:
        AsyncSession: Database session
    """
    async with transaction() as session:
        yield session


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """
    Context manager for explicit transaction management.

    Yields:
        AsyncSession: Database session within a transaction

    Example:
        ```python
        async with transaction() as session:
            session.add(UserDB(username="test", ...))
            # Commits on successful exit, rolls back on exception
        ```
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseAppError:
            # Domain errors are expected outcomes, the boundary logs them.
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            logger.exception("Transaction error")
            raise


async def init_db() -> None:
    """
    Create all tables defined in SQLModel models.

    Note:
        This is a convenience for development and tests.
        Production schemas are managed with Alembic.
    """
    try:
        async with engine.begin() as conn:
            # Import all models to ensure they are registered
            from blog_api.models import (  # noqa: F401, PLC0415
                BlogDB,
                BlogLikeDB,
                CommentDB,
                CommentLikeDB,
                RevokedTokenDB,
                UserDB,
            )

            await conn.run_sync(SQLModel.metadata.create_all)
    except SQLAlchemyError as e:
        logger.exception("Database initialization failed")
        raise DatabaseInitializationError from e
    logger.info("Database initialized successfully!")


async def check_db() -> bool:
    """Return True when the database answers a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database health check failed")
        return False
    return True


async def close_db() -> None:
    """
    Close database connections.

    This function should be called on application shutdown
    to properly close all database connections.
    """
    await engine.dispose()
    logger.info("Database connections closed")
