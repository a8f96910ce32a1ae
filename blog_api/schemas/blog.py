"""
Blog schemas.

Request bodies for publishing and editing posts, and the response shapes for
lists, single posts and paginated pages.
"""

from datetime import datetime
from re import fullmatch
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blog_api.configs.settings import MAX_TAGS
from blog_api.schemas.comment import CommentNode
from blog_api.schemas.user import AuthorResponse

type BlogStatus = Literal["draft", "published", "archived"]

TAG_PATTERN = r"[a-z0-9-]+"

# Fields only the like engine or the server may change.
PROTECTED_FIELDS = ("likes", "likedBy", "liked_by", "author", "authorId", "author_id")


def normalize_tags(tags: list[str]) -> list[str]:
    """
    Lowercase, strip and de-duplicate tags, keeping first-seen order.

    Raises:
        ValueError: If a tag is empty or not made of ``a-z``, ``0-9`` and ``-``.
    """
    seen: dict[str, None] = {}
    for raw in tags:
        tag = raw.strip().lower()
        if not fullmatch(TAG_PATTERN, tag):
            mssg = f"Invalid tag '{raw}': tags may only contain letters, digits and hyphens"
            raise ValueError(mssg)
        seen.setdefault(tag, None)
    return list(seen)


class BlogCreate(BaseModel):
    """Blog creation model (for request body - excludes auto-generated fields)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Blog title",
        examples=["Getting started with FastAPI"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Blog content",
        examples=["FastAPI is a modern web framework for building APIs with Python."],
    )
    tags: list[str] = Field(
        default_factory=list,
        max_length=MAX_TAGS,
        description="Blog tags for categorization",
        examples=[["python", "fastapi"]],
    )
    status: BlogStatus = Field(default="draft", description="Blog status")

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class BlogUpdate(BaseModel):
    """
    Partial blog update.

    Like counters and authorship are not editable through this model; they
    only change through the like endpoints or not at all.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    tags: list[str] | None = Field(default=None, max_length=MAX_TAGS)
    status: BlogStatus | None = None

    @model_validator(mode="before")
    @classmethod
    def reject_protected_fields(cls, data: Any) -> Any:
        """Reject attempts to set likes or the author directly."""
        if isinstance(data, dict):
            protected = [key for key in PROTECTED_FIELDS if key in data]
            if protected:
                mssg = f"Field(s) {', '.join(protected)} cannot be updated directly"
                raise ValueError(mssg)
        return data

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return normalize_tags(v) if v is not None else v


class BlogResponse(BaseModel):
    """Blog as returned in lists and after writes."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    content: str
    author_id: UUID = Field(serialization_alias="authorId")
    status: str
    tags: list[str]
    likes: int
    liked_by: list[UUID] = Field(default_factory=list, serialization_alias="likedBy")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")


class BlogDetailResponse(BlogResponse):
    """Single blog populated with its author and comment tree."""

    author: AuthorResponse | None = None
    comments: list[CommentNode] = Field(default_factory=list)


class BlogPage(BaseModel):
    """One page of the blog listing."""

    blogs: list[BlogResponse]
    page: int
    limit: int
    total_blogs: int = Field(serialization_alias="totalBlogs")
    total_pages: int = Field(serialization_alias="totalPages")
