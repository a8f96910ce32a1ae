from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_api.configs.settings import MAX_COMMENT_LENGTH
from blog_api.schemas.user import AuthorResponse


class CommentCreate(BaseModel):
    """Body used to add, reply to or edit a comment."""

    model_config = ConfigDict(extra="ignore")

    comment: str = Field(
        ...,
        min_length=1,
        max_length=MAX_COMMENT_LENGTH,
        description="Comment text",
        examples=["Great post!"],
    )

    @field_validator("comment", mode="before")
    @classmethod
    def strip_comment(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class CommentNode(BaseModel):
    """A comment with its commenter and nested replies."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    blog_id: UUID = Field(serialization_alias="blogId")
    parent_id: UUID | None = Field(default=None, serialization_alias="parentId")
    commenter_id: UUID = Field(serialization_alias="commenterId")
    commenter: AuthorResponse | None = None
    content: str
    likes: int
    liked_by: list[UUID] = Field(default_factory=list, serialization_alias="likedBy")
    replies: list["CommentNode"] = Field(default_factory=list)
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")
