"""Comment and comment like database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel


class CommentDB(SQLModel, table=True):
    """
    Comment database model.

    Comments reference their blog by id. Replies are comments whose
    ``parent_id`` points at another comment of the same blog, so a whole
    thread is a flat list that can be assembled into a tree.
    """

    __tablename__ = cast("declared_attr[str]", "comments")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Comment ID",
    )
    blog_id: UUID = Field(
        sa_column=Column(
            "blog_id",
            ForeignKey("blogs.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Blog the comment belongs to",
    )
    commenter_id: UUID = Field(
        sa_column=Column(
            "commenter_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author of the comment",
    )
    parent_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            "parent_id",
            ForeignKey("comments.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
        description="Parent comment for replies",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Comment text",
    )
    likes: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Number of users liking the comment",
    )
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


class CommentLikeDB(SQLModel, table=True):
    """Membership row: one per (comment, user) pair that likes the comment."""

    __tablename__ = cast("declared_attr[str]", "comment_likes")

    comment_id: UUID = Field(
        sa_column=Column(
            "comment_id",
            ForeignKey("comments.id", ondelete="CASCADE"),
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
