# tests/routes/test_user_routes.py
"""Tests for the /user endpoints: accounts, sessions and password reset."""

import re
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.db import async_session_maker
from blog_api.errors import SendingError
from blog_api.managers.token_manager import create_access_token
from blog_api.models import UserDB
from blog_api.repositories import UserRepository
from tests.conftest import AuthedUser

MakeUser = Callable[..., Awaitable[AuthedUser]]


def _reset_token_from(email_sender: MagicMock) -> str:
    """Pull the plaintext reset token out of the last email sent."""
    _, subject, body = email_sender.send_email.await_args.args
    assert subject == "Your password reset token"
    match = re.search(r"Reset token: (\w+)", body)
    assert match is not None
    return match.group(1)


class TestRegister:
    """POST /user/register."""

    async def test_register_returns_user_without_password(
        self,
        client: AsyncClient,
        email_sender: MagicMock,
    ) -> None:
        response = await client.post(
            "/user/register",
            json={"username": "johndoe", "email": "johndoe@gmail.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully!"
        user = body["user"]
        assert user["username"] == "johndoe"
        assert user["email"] == "johndoe@gmail.com"
        assert "createdAt" in user
        assert not any("password" in key.lower() for key in user)

        email_sender.send_email.assert_awaited_once()
        assert email_sender.send_email.await_args.args[0] == "johndoe@gmail.com"

    async def test_short_username_is_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/user/register",
            json={"username": "ab", "email": "ab@gmail.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "status": "fail",
            "message": "Username must be at least 3 characters long",
        }

    async def test_missing_field_is_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/user/register",
            json={"username": "johndoe", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "email: Field required"

    async def test_duplicate_username_conflicts(
        self,
        client: AsyncClient,
        make_user: MakeUser,
        session: AsyncSession,
    ) -> None:
        await make_user("johndoe")

        response = await client.post(
            "/user/register",
            json={"username": "johndoe", "email": "other@gmail.com", "password": "secret123"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Username already exists"
        assert await UserRepository(session).count() == 1

    async def test_duplicate_email_conflicts(self, client: AsyncClient, make_user: MakeUser) -> None:
        await make_user("johndoe", email="shared@gmail.com")

        response = await client.post(
            "/user/register",
            json={"username": "janedoe", "email": "shared@gmail.com", "password": "secret123"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists"

    async def test_welcome_email_failure_does_not_fail_registration(
        self,
        client: AsyncClient,
        email_sender: MagicMock,
    ) -> None:
        email_sender.send_email.side_effect = SendingError()

        response = await client.post(
            "/user/register",
            json={"username": "johndoe", "email": "johndoe@gmail.com", "password": "secret123"},
        )

        assert response.status_code == 201


class TestLogin:
    """POST /user/login and the session cookie."""

    async def test_login_returns_token_and_sets_cookie(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        user = await make_user("johndoe")

        response = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": user.password},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["id"] == user.id
        assert body["token"]

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"token={body['token']}")
        assert "HttpOnly" in set_cookie

    async def test_wrong_password(self, client: AsyncClient, make_user: MakeUser) -> None:
        await make_user("johndoe")

        response = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json() == {"status": "fail", "message": "Invalid credentials"}
        assert "token" not in response.cookies

    async def test_unknown_user_gets_same_error(self, client: AsyncClient) -> None:
        response = await client.post(
            "/user/login",
            json={"username": "nobody", "password": "secret123"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    async def test_login_leaves_password_hash_untouched(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        user = await make_user("johndoe")
        async with async_session_maker() as session:
            before = await UserRepository(session).get_by_username("johndoe")

        response = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": user.password},
        )

        assert response.status_code == 200
        async with async_session_maker() as session:
            after = await UserRepository(session).get_by_username("johndoe")
        assert before is not None
        assert after is not None
        assert after.password_hash == before.password_hash


class TestGuard:
    """Token resolution on protected routes."""

    async def test_bearer_header(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")

        response = await client.get("/user/currentUser", headers=user.headers)

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "johndoe"

    async def test_cookie(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")
        client.cookies.set("token", user.token)

        response = await client.get("/user/currentUser")

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    async def test_cookie_takes_precedence_over_header(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        cookie_user = await make_user("cookieuser")
        header_user = await make_user("headeruser")
        client.cookies.set("token", cookie_user.token)

        response = await client.get("/user/currentUser", headers=header_user.headers)

        assert response.json()["user"]["id"] == cookie_user.id

    async def test_missing_token(self, client: AsyncClient) -> None:
        response = await client.get("/user/currentUser")

        assert response.status_code == 401
        assert response.json() == {
            "status": "fail",
            "message": "Access denied. No token provided.",
        }

    async def test_tampered_token(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")

        response = await client.get(
            "/user/currentUser",
            headers={"Authorization": f"Bearer {user.token}x"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token. Please login again."

    async def test_expired_token(self, client: AsyncClient) -> None:
        expired = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))

        response = await client.get(
            "/user/currentUser",
            headers={"Authorization": f"Bearer {expired}"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired. Please login again."

    async def test_token_of_deleted_user(self, client: AsyncClient) -> None:
        token = create_access_token(uuid4())

        response = await client.get(
            "/user/currentUser",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404


class TestSessionToken:
    """GET /user/token."""

    async def test_token_from_cookie(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")
        client.cookies.set("token", user.token)

        response = await client.get("/user/token")

        assert response.status_code == 200
        assert response.json() == {"message": "Token retrieved successfully", "token": user.token}

    async def test_token_from_header(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")

        response = await client.get("/user/token", headers=user.headers)

        assert response.json()["token"] == user.token

    async def test_missing_token(self, client: AsyncClient) -> None:
        response = await client.get("/user/token")

        assert response.status_code == 401
        assert response.json()["message"] == "Access denied. No token provided."

    async def test_revoked_token_is_not_echoed(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        user = await make_user("johndoe")
        await client.post("/user/logout", headers=user.headers)

        response = await client.get("/user/token", headers=user.headers)

        assert response.status_code == 400
        assert "token" not in response.json()


class TestLogout:
    """POST /user/logout and the revocation registry."""

    async def test_logout_revokes_token(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")

        response = await client.post("/user/logout", headers=user.headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Logout successful"}
        assert "Max-Age=0" in response.headers["set-cookie"]

        reuse = await client.get("/user/currentUser", headers=user.headers)
        assert reuse.status_code == 400
        assert reuse.json() == {
            "status": "fail",
            "message": "Token has been revoked. Please login again.",
        }

    async def test_other_sessions_stay_valid(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")
        second = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": user.password},
        )
        client.cookies.clear()
        second_token = second.json()["token"]

        await client.post("/user/logout", headers=user.headers)

        response = await client.get(
            "/user/currentUser",
            headers={"Authorization": f"Bearer {second_token}"},
        )
        assert response.status_code == 200

    async def test_logout_requires_token(self, client: AsyncClient) -> None:
        response = await client.post("/user/logout")
        assert response.status_code == 401


class TestUpdateProfile:
    """PUT /user/updateProfile."""

    async def test_update_fields(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")

        response = await client.put(
            "/user/updateProfile",
            headers=user.headers,
            json={
                "username": "johnny",
                "email": "johnny@gmail.com",
                "profilePic": "https://images.gmail.com/johnny.png",
            },
        )

        assert response.status_code == 200
        updated = response.json()["user"]
        assert updated["username"] == "johnny"
        assert updated["email"] == "johnny@gmail.com"
        assert updated["profilePic"] == "https://images.gmail.com/johnny.png"
        assert updated["updatedAt"] is not None

    async def test_taken_email_conflicts(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")
        await make_user("janedoe", email="jane@gmail.com")

        response = await client.put(
            "/user/updateProfile",
            headers=user.headers,
            json={"email": "jane@gmail.com"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists"

    async def test_invalid_values_are_rejected(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")

        short = await client.put("/user/updateProfile", headers=user.headers, json={"username": "x"})
        bad_url = await client.put(
            "/user/updateProfile",
            headers=user.headers,
            json={"profilePic": "not a url"},
        )

        assert short.status_code == 400
        assert bad_url.status_code == 400


class TestDeleteUser:
    """DELETE /user/delete."""

    async def test_wrong_confirmation_is_forbidden(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        user = await make_user("johndoe")

        response = await client.request(
            "DELETE",
            "/user/delete",
            headers=user.headers,
            json={"username": "JohnDoe"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You are not authorized to delete this user"

    async def test_delete_removes_user_and_blogs(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        user = await make_user("johndoe")
        published = await client.post(
            "/blog/publish",
            headers=user.headers,
            json={"title": "Bye", "content": "Last post"},
        )
        blog_id = published.json()["blog"]["id"]

        response = await client.request(
            "DELETE",
            "/user/delete",
            headers=user.headers,
            json={"username": "johndoe"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User and their blogs deleted successfully"}
        assert "Max-Age=0" in response.headers["set-cookie"]

        assert (await client.get(f"/blog/{blog_id}")).status_code == 404
        assert (await client.get("/user/currentUser", headers=user.headers)).status_code == 400
        login = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": user.password},
        )
        assert login.status_code == 401

    async def test_delete_withdraws_likes_on_other_content(
        self,
        client: AsyncClient,
        make_user: MakeUser,
    ) -> None:
        author = await make_user("author")
        reader = await make_user("reader")
        published = await client.post(
            "/blog/publish",
            headers=author.headers,
            json={"title": "Stays", "content": "Still here"},
        )
        blog_id = published.json()["blog"]["id"]
        commented = await client.post(
            f"/blog/{blog_id}/comment/add",
            headers=author.headers,
            json={"comment": "First!"},
        )
        comment_id = commented.json()["comment"]["id"]
        await client.put(f"/blog/like/{blog_id}", headers=reader.headers)
        await client.put(f"/blog/like/{blog_id}", headers=author.headers)
        await client.put(f"/blog/{blog_id}/comment/like/{comment_id}", headers=reader.headers)

        response = await client.request(
            "DELETE",
            "/user/delete",
            headers=reader.headers,
            json={"username": "reader"},
        )

        assert response.status_code == 200
        blog = (await client.get(f"/blog/{blog_id}")).json()["blog"]
        assert blog["likes"] == 1
        assert blog["likedBy"] == [author.id]
        (comment,) = blog["comments"]
        assert comment["likes"] == 0
        assert comment["likedBy"] == []


class TestPasswordReset:
    """POST /user/initiatePasswordReset and /user/resetPassword."""

    async def test_reset_round_trip(
        self,
        client: AsyncClient,
        make_user: MakeUser,
        email_sender: MagicMock,
    ) -> None:
        user = await make_user("johndoe")

        response = await client.post("/user/initiatePasswordReset", json={"email": user.email})
        assert response.status_code == 200
        assert response.json() == {"message": "Password reset token sent to email"}
        token = _reset_token_from(email_sender)

        response = await client.post(
            "/user/resetPassword",
            json={"token": token, "newPassword": "brand-new-secret"},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password reset successful"}
        assert email_sender.send_email.await_args.args[1] == "Your password has been changed"

        old = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": user.password},
        )
        new = await client.post(
            "/user/login",
            json={"username": "johndoe", "password": "brand-new-secret"},
        )
        assert old.status_code == 401
        assert new.status_code == 200

        reuse = await client.post(
            "/user/resetPassword",
            json={"token": token, "newPassword": "another-secret"},
        )
        assert reuse.status_code == 400

    async def test_unknown_email(self, client: AsyncClient) -> None:
        response = await client.post(
            "/user/initiatePasswordReset",
            json={"email": "nobody@gmail.com"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    async def test_wrong_token(self, client: AsyncClient, make_user: MakeUser) -> None:
        user = await make_user("johndoe")
        await client.post("/user/initiatePasswordReset", json={"email": user.email})

        response = await client.post(
            "/user/resetPassword",
            json={"token": "000000", "newPassword": "brand-new-secret"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Token is invalid or has expired"

    async def test_expired_token(
        self,
        client: AsyncClient,
        make_user: MakeUser,
        email_sender: MagicMock,
    ) -> None:
        user = await make_user("johndoe")
        await client.post("/user/initiatePasswordReset", json={"email": user.email})
        token = _reset_token_from(email_sender)

        async with async_session_maker() as session:
            await session.execute(
                update(UserDB).values(
                    password_reset_expires_at=datetime.now(tz=UTC) - timedelta(minutes=1),
                ),
            )
            await session.commit()

        response = await client.post(
            "/user/resetPassword",
            json={"token": token, "newPassword": "brand-new-secret"},
        )

        assert response.status_code == 400

    async def test_email_failure_stores_nothing(
        self,
        client: AsyncClient,
        make_user: MakeUser,
        email_sender: MagicMock,
        session: AsyncSession,
    ) -> None:
        user = await make_user("johndoe")
        email_sender.send_email.side_effect = SendingError()

        response = await client.post("/user/initiatePasswordReset", json={"email": user.email})

        assert response.status_code == 502
        assert response.json()["status"] == "error"
        db_user = await UserRepository(session).get_by_username("johndoe")
        assert db_user is not None
        assert db_user.password_reset_token is None
