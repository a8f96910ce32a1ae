# tests/managers/test_token_manager.py
"""Tests for blog_api/managers/token_manager.py."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from blog_api.configs import settings
from blog_api.errors import InvalidTokenError
from blog_api.managers.token_manager import create_access_token, decode_access_token


def _encode(claims: dict) -> str:
    return jwt.encode(claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def _claims(**overrides: object) -> dict:
    now = datetime.now(UTC)
    claims = {
        "sub": str(uuid4()),
        "jti": str(uuid4()),
        "iat": now,
        "exp": now + timedelta(minutes=5),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "access",
    }
    claims.update(overrides)
    return claims


class TestCreateAccessToken:
    """Test cases for create_access_token."""

    def test_round_trip_carries_user_id(self) -> None:
        user_id = uuid4()

        token_data = decode_access_token(create_access_token(user_id))

        assert token_data.user_id == user_id
        assert token_data.token_type == "access"
        assert token_data.jti

    def test_tokens_are_unique_per_issue(self) -> None:
        """Two logins in the same second still get distinct tokens."""
        user_id = uuid4()
        assert create_access_token(user_id) != create_access_token(user_id)

    def test_default_lifetime_matches_settings(self) -> None:
        token = create_access_token(uuid4())
        claims = jwt.get_unverified_claims(token)

        assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


class TestDecodeAccessToken:
    """Test cases for decode_access_token failures."""

    def test_expired_token(self) -> None:
        token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError) as exc_info:
            decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired. Please login again."

    def test_wrong_signature(self) -> None:
        token = jwt.encode(_claims(), "another-secret", algorithm=settings.ALGORITHM)

        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_garbage_token(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token("not-a-jwt")

    def test_wrong_audience(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(_claims(aud="someone-else")))

    def test_wrong_token_type(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(_claims(type="refresh")))

    def test_subject_must_be_a_uuid(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(_claims(sub="johndoe")))
