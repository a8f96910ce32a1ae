"""Blog and blog like database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime, Index, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
TagsType = JSON().with_variant(JSONB(), "postgresql")


class BlogDB(SQLModel, table=True):
    """
    Blog database model.

    ``likes`` is a denormalized counter over ``blog_likes``; it is only ever
    changed together with a membership row, inside one transaction.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_status_created", "status", "created_at"),
        Index("ix_blogs_author_status", "author_id", "status"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    # Foreign key to User
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Blog title",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog content",
    )
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, server_default="draft", index=True),
        description="Blog status (draft, published, archived)",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(TagsType, nullable=False),
        description="Blog tags for categorization",
    )
    likes: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Number of users liking the blog",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Getting started with FastAPI",
                "content": "FastAPI is a modern web framework...",
                "status": "draft",
                "tags": ["python", "fastapi"],
                "likes": 0,
            },
        },
    )


class BlogLikeDB(SQLModel, table=True):
    """Membership row: one per (blog, user) pair that likes the blog."""

    __tablename__ = cast("declared_attr[str]", "blog_likes")

    blog_id: UUID = Field(
        sa_column=Column(
            "blog_id",
            ForeignKey("blogs.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    user_id: UUID = Field(
        sa_column=Column(
            "user_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        ),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
