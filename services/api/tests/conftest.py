"""Shared fixtures: an ASGI test client and in-memory posts."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from sharenow.auth import CurrentUser, get_current_user
from sharenow.main import app
from sharenow.models import Post

TEST_USER = CurrentUser(aad_object_id="user-1", name="Ada Lovelace")


def make_post(
    post_id: str = "post-1",
    *,
    user_id: str = "user-1",
    created_by_name: str = "Ada Lovelace",
    title: str = "Intro to asyncio",
    tags: str | None = "python;async",
    post_type: int = 1,
    total_votes: int = 0,
    updated_date: datetime | None = None,
) -> Post:
    """Transient Post; never attached to a session."""
    when = updated_date or datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)
    return Post(
        post_id=post_id,
        user_id=user_id,
        type=post_type,
        title=title,
        description="d" * 160,
        content_url=f"https://example.com/{post_id}",
        tags=tags,
        created_by_name=created_by_name,
        created_date=when,
        updated_date=when,
        total_votes=total_votes,
        is_removed=False,
    )


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def signed_in():
    """Skip token validation and act as TEST_USER."""
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    yield TEST_USER
    app.dependency_overrides.pop(get_current_user, None)


class FakeResult:
    def __init__(self, rows: list | None = None):
        self._rows = rows or []

    def first(self):
        return self._rows[0] if self._rows else None


class FakeSession:
    """Stands in for an AsyncSession; replays scripted results in call order."""

    def __init__(self, results: list):
        self._results = list(results)
        self.statements: list = []

    async def execute(self, stmt):
        self.statements.append(stmt)
        return self._results.pop(0)

    async def scalar(self, stmt):
        self.statements.append(stmt)
        return self._results.pop(0)


def fake_get_session(session: FakeSession):
    @asynccontextmanager
    async def _get_session():
        yield session

    return _get_session
