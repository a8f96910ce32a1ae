from blog_api.db.database import (
    async_session_maker,
    check_db,
    close_db,
    engine,
    get_session,
    init_db,
    transaction,
)

__all__ = [
    "async_session_maker",
    "check_db",
    "close_db",
    "engine",
    "get_session",
    "init_db",
    "transaction",
]
