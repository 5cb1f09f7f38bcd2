"""Vote and saved-post writes against a scripted session."""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql.dml import Delete, Insert, Update

from conftest import FakeResult, FakeSession, fake_get_session
from sharenow.services import private_posts, votes


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.mark.asyncio
async def test_duplicate_vote_returns_false_without_counting(monkeypatch: pytest.MonkeyPatch):
    session = FakeSession([FakeResult([])])
    monkeypatch.setattr(votes, "get_session", fake_get_session(session))

    assert await votes.add_vote(user_id="u1", post_created_by_user_id="u2", post_id="p1") is False
    assert len(session.statements) == 1
    assert isinstance(session.statements[0], Insert)


@pytest.mark.asyncio
async def test_vote_counts_post(monkeypatch: pytest.MonkeyPatch):
    session = FakeSession([FakeResult([(1,)]), FakeResult([(4,)])])
    monkeypatch.setattr(votes, "get_session", fake_get_session(session))

    assert await votes.add_vote(user_id="u1", post_created_by_user_id="u2", post_id="p1") is True
    counter = session.statements[1]
    assert isinstance(counter, Update)
    assert "posts.is_removed IS false" in _sql(counter)


@pytest.mark.asyncio
async def test_vote_on_missing_or_removed_post_is_revoked(monkeypatch: pytest.MonkeyPatch):
    session = FakeSession([FakeResult([(1,)]), FakeResult([]), FakeResult()])
    monkeypatch.setattr(votes, "get_session", fake_get_session(session))

    assert await votes.add_vote(user_id="u1", post_created_by_user_id="u2", post_id="gone") is False
    vote, counter, revoke = session.statements
    assert isinstance(vote, Insert)
    assert isinstance(counter, Update)
    assert isinstance(revoke, Delete)
    assert "user_votes" in _sql(revoke)


@pytest.mark.asyncio
async def test_unvote_never_takes_count_below_zero(monkeypatch: pytest.MonkeyPatch):
    # Vote row deleted, but the counter is already 0 so the guarded update matches nothing.
    session = FakeSession([FakeResult([(1,)]), FakeResult([]), FakeResult()])
    monkeypatch.setattr(votes, "get_session", fake_get_session(session))

    assert await votes.remove_vote(user_id="u1", post_created_by_user_id="u2", post_id="p1") is False
    delete_vote, counter, restore = session.statements
    assert isinstance(delete_vote, Delete)
    assert "posts.total_votes > " in _sql(counter)
    assert isinstance(restore, Insert)


@pytest.mark.asyncio
async def test_unvote_without_vote_is_false(monkeypatch: pytest.MonkeyPatch):
    session = FakeSession([FakeResult([])])
    monkeypatch.setattr(votes, "get_session", fake_get_session(session))

    assert await votes.remove_vote(user_id="u1", post_created_by_user_id="u2", post_id="p1") is False
    assert len(session.statements) == 1


@pytest.mark.asyncio
async def test_private_posts_capped_at_fifty(monkeypatch: pytest.MonkeyPatch):
    session = FakeSession([FakeResult(), 50])
    monkeypatch.setattr(private_posts, "get_session", fake_get_session(session))

    assert await private_posts.add_private_post("u1", "p51", "Ada") is False
    assert len(session.statements) == 2
    assert "pg_advisory_xact_lock(hashtext(" in _sql(session.statements[0])


@pytest.mark.asyncio
async def test_private_post_saved_below_cap(monkeypatch: pytest.MonkeyPatch):
    session = FakeSession([FakeResult(), 49, FakeResult()])
    monkeypatch.setattr(private_posts, "get_session", fake_get_session(session))

    assert await private_posts.add_private_post("u1", "p50", "Ada") is True
    lock, count, insert = session.statements
    assert "pg_advisory_xact_lock" in _sql(lock)
    assert isinstance(insert, Insert)
    assert "ON CONFLICT" in _sql(insert)
