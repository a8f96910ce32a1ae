# tests/schemas/test_schemas.py
"""Tests for request schemas and their validators."""

import pytest
from pydantic import ValidationError

from blog_api.schemas import BlogCreate, BlogUpdate, CommentCreate, ResetPasswordRequest, UserCreate
from blog_api.schemas.blog import normalize_tags


class TestUserCreate:
    """Registration body validation."""

    def test_valid_user(self) -> None:
        user = UserCreate(username="  johndoe ", email="johndoe@gmail.com", password="secret123")

        assert user.username == "johndoe"
        assert user.password.get_secret_value() == "secret123"
        assert "secret123" not in repr(user)

    def test_short_username(self) -> None:
        with pytest.raises(ValidationError, match="Username must be at least 3 characters long"):
            UserCreate(username="ab", email="johndoe@gmail.com", password="secret123")

    def test_short_password(self) -> None:
        with pytest.raises(ValidationError, match="Password must be at least 6 characters long"):
            UserCreate(username="johndoe", email="johndoe@gmail.com", password="123")

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            UserCreate(username="johndoe", email="not-an-email", password="secret123")


class TestResetPasswordRequest:
    def test_accepts_camel_case_password(self) -> None:
        body = ResetPasswordRequest.model_validate({"token": "abc123", "newPassword": "newsecret"})
        assert body.new_password.get_secret_value() == "newsecret"

    def test_new_password_length_is_checked(self) -> None:
        with pytest.raises(ValidationError):
            ResetPasswordRequest.model_validate({"token": "abc123", "newPassword": "x"})


class TestTags:
    """Tag normalization shared by create and update."""

    def test_normalize_lowercases_and_deduplicates(self) -> None:
        assert normalize_tags(["Python", " python ", "Fast-API", "python"]) == ["python", "fast-api"]

    @pytest.mark.parametrize("tag", ["", "   ", "c++", "two words", "under_score"])
    def test_malformed_tags_are_rejected(self, tag: str) -> None:
        with pytest.raises(ValueError, match="Invalid tag"):
            normalize_tags([tag])

    def test_blog_create_defaults(self) -> None:
        blog = BlogCreate(title=" Hello ", content="World", tags=["News"])

        assert blog.title == "Hello"
        assert blog.status == "draft"
        assert blog.tags == ["news"]

    def test_unknown_status_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BlogCreate(title="Hello", content="World", status="deleted")


class TestBlogUpdate:
    """Protected fields never reach the update."""

    @pytest.mark.parametrize("field", ["likes", "likedBy", "author", "authorId"])
    def test_protected_fields_are_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError, match="cannot be updated directly"):
            BlogUpdate.model_validate({"title": "New title", field: 100})

    def test_unknown_fields_are_ignored(self) -> None:
        update = BlogUpdate.model_validate({"title": "New title", "views": 1})
        assert update.model_dump(exclude_unset=True) == {"title": "New title"}

    def test_partial_update(self) -> None:
        update = BlogUpdate.model_validate({"status": "published"})
        assert update.model_dump(exclude_unset=True) == {"status": "published"}


class TestCommentCreate:
    def test_comment_is_stripped(self) -> None:
        assert CommentCreate(comment="  Nice post  ").comment == "Nice post"

    def test_blank_comment_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CommentCreate(comment="   ")
