"""
Initial schema: users, blogs, comments, likes and revoked tokens.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

- users: accounts with credentials and the pending password reset digest
- blogs / blog_likes: posts and their like membership rows
- comments / comment_likes: threaded comments (parent_id) and their likes
- revoked_tokens: bounded denylist of logged-out tokens
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# Revision identifiers, used by Alembic
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Apply schema changes for this revision."""
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("profile_pic", sa.String(length=500), nullable=True),
        sa.Column("password_reset_token", sa.String(length=64), nullable=True),
        sa.Column("password_reset_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index(
        "ix_users_password_reset_token",
        "users",
        ["password_reset_token"],
        unique=False,
    )

    op.create_table(
        "blogs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("tags", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blogs_author_id", "blogs", ["author_id"], unique=False)
    op.create_index("ix_blogs_status", "blogs", ["status"], unique=False)
    op.create_index("ix_blogs_created_at", "blogs", ["created_at"], unique=False)
    op.create_index("ix_blogs_status_created", "blogs", ["status", "created_at"], unique=False)
    op.create_index("ix_blogs_author_status", "blogs", ["author_id", "status"], unique=False)
    op.create_index(
        "ix_blogs_tags_gin",
        "blogs",
        ["tags"],
        unique=False,
        postgresql_using="gin",
    )

    op.create_table(
        "blog_likes",
        sa.Column("blog_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["blog_id"], ["blogs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("blog_id", "user_id"),
    )
    op.create_index("ix_blog_likes_user_id", "blog_likes", ["user_id"], unique=False)

    op.create_table(
        "comments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("blog_id", sa.UUID(), nullable=False),
        sa.Column("commenter_id", sa.UUID(), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["blog_id"], ["blogs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["commenter_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_blog_id", "comments", ["blog_id"], unique=False)
    op.create_index("ix_comments_commenter_id", "comments", ["commenter_id"], unique=False)
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"], unique=False)
    op.create_index("ix_comments_created_at", "comments", ["created_at"], unique=False)

    op.create_table(
        "comment_likes",
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("comment_id", "user_id"),
    )
    op.create_index("ix_comment_likes_user_id", "comment_likes", ["user_id"], unique=False)

    op.create_table(
        "revoked_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("token", sa.String(length=1024), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_revoked_tokens_token", "revoked_tokens", ["token"], unique=True)
    op.create_index(
        "ix_revoked_tokens_created_at",
        "revoked_tokens",
        ["created_at"],
        unique=False,
    )


def downgrade() -> None:
    """Revert schema changes for this revision."""
    op.drop_index("ix_revoked_tokens_created_at", table_name="revoked_tokens")
    op.drop_index("ix_revoked_tokens_token", table_name="revoked_tokens")
    op.drop_table("revoked_tokens")

    op.drop_index("ix_comment_likes_user_id", table_name="comment_likes")
    op.drop_table("comment_likes")

    op.drop_index("ix_comments_created_at", table_name="comments")
    op.drop_index("ix_comments_parent_id", table_name="comments")
    op.drop_index("ix_comments_commenter_id", table_name="comments")
    op.drop_index("ix_comments_blog_id", table_name="comments")
    op.drop_table("comments")

    op.drop_index("ix_blog_likes_user_id", table_name="blog_likes")
    op.drop_table("blog_likes")

    op.drop_index("ix_blogs_tags_gin", table_name="blogs")
    op.drop_index("ix_blogs_author_status", table_name="blogs")
    op.drop_index("ix_blogs_status_created", table_name="blogs")
    op.drop_index("ix_blogs_created_at", table_name="blogs")
    op.drop_index("ix_blogs_status", table_name="blogs")
    op.drop_index("ix_blogs_author_id", table_name="blogs")
    op.drop_table("blogs")

    op.drop_index("ix_users_password_reset_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
