# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Settings are read at import time, so the test environment must be in place
# before anything from blog_api is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-do-not-use-in-production"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["MAIL_ENABLED"] = "false"
os.environ["COOKIE_SECURE"] = "false"
os.environ["LIMITER_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["ENVIRONMENT"] = "testing"

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

from httpx import ASGITransport, AsyncClient  # noqa: E402
from pytest import fixture  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from blog_api.db import async_session_maker, engine  # noqa: E402
from blog_api.dependencies import get_email_sender  # noqa: E402
from blog_api.main import app  # noqa: E402

DEFAULT_PASSWORD = "secret123"


@dataclass
class AuthedUser:
    """A registered user with a live session token."""

    id: str
    username: str
    email: str
    password: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@fixture(autouse=True)
async def database() -> AsyncGenerator[None]:
    """Create every table before a test and drop the in-memory database after it."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@fixture
async def session() -> AsyncGenerator[AsyncSession]:
    """Standalone session for repository-level tests."""
    async with async_session_maker() as db_session:
        yield db_session


@fixture
def email_sender() -> Generator[MagicMock]:
    """Replace the outbound email collaborator with a recording mock."""
    sender = MagicMock()
    sender.send_email = AsyncMock(return_value=None)
    app.dependency_overrides[get_email_sender] = lambda: sender
    yield sender
    app.dependency_overrides.pop(get_email_sender, None)


@fixture
async def client(email_sender: MagicMock) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac


@fixture
def make_user(client: AsyncClient) -> Callable[..., Awaitable[AuthedUser]]:
    """
    Register and log in a user.

    The session cookie set by login is dropped so tests pick the token
    transport explicitly.
    """

    async def _make_user(
        username: str = "johndoe",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> AuthedUser:
        email = email or f"{username}@gmail.com"
        response = await client.post(
            "/user/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text

        response = await client.post(
            "/user/login",
            json={"username": username, "password": password},
        )
        assert response.status_code == 200, response.text
        client.cookies.clear()

        body = response.json()
        return AuthedUser(
            id=body["user"]["id"],
            username=username,
            email=email,
            password=password,
            token=body["token"],
        )

    return _make_user


@fixture
async def author(make_user: Callable[..., Awaitable[AuthedUser]]) -> AuthedUser:
    return await make_user("author")


@fixture
async def reader(make_user: Callable[..., Awaitable[AuthedUser]]) -> AuthedUser:
    return await make_user("reader")
