"""Revoked (logged-out) token model."""

from datetime import UTC, datetime
from typing import cast

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class RevokedTokenDB(SQLModel, table=True):
    """
    A token presented at logout.

    The table is a small recency-bounded denylist; the oldest rows are
    evicted once it grows past ``REVOKED_TOKEN_LIMIT``.
    """

    __tablename__ = cast("declared_attr[str]", "revoked_tokens")

    id: int | None = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )
    token: str = Field(
        sa_column=Column(String(1024), unique=True, nullable=False, index=True),
        description="Raw bearer token",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="When the token was revoked",
    )
