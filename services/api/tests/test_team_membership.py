"""Team roster lookups and channel notifications, against fake adapters."""

from types import SimpleNamespace

import pytest
from botbuilder.core.teams import TeamsInfo
from botbuilder.schema import Activity, Attachment

from sharenow.models import TeamTag
from sharenow.services import team_membership
from sharenow.services.notifier import TeamsNotifier


class FakeAdapter:
    """Runs the callback against a bare turn, optionally failing first."""

    def __init__(self, failures: int = 0):
        self.failures = failures
        self.calls = 0
        self.references: list = []

    async def continue_conversation(self, reference, callback, bot_id=None):
        self.calls += 1
        self.references.append(reference)
        if self.failures:
            self.failures -= 1
            raise ConnectionError("connector unavailable")
        await callback(SimpleNamespace(activity=Activity(), send_activity=_ignore))


async def _ignore(activity):
    return None


@pytest.mark.asyncio
async def test_lookup_asks_roster_of_requested_team(monkeypatch: pytest.MonkeyPatch):
    asked: dict = {}

    async def fake_connector_client(turn_context):
        return "connector"

    async def fake_get_member(connector_client, conversation_id, member_id):
        asked.update(conversation_id=conversation_id, member_id=member_id)
        return SimpleNamespace(id="29:abc")

    adapter = FakeAdapter()
    monkeypatch.setattr(team_membership, "get_adapter", lambda: adapter)
    monkeypatch.setattr(TeamsInfo, "_get_connector_client", staticmethod(fake_connector_client))
    monkeypatch.setattr(TeamsInfo, "_get_member", staticmethod(fake_get_member))

    assert await team_membership.lookup_team_member("https://smba.example", "team-1", "user-aad-1") is True
    assert asked == {"conversation_id": "team-1", "member_id": "user-aad-1"}
    assert adapter.references[0].conversation.id == "team-1"


@pytest.fixture
def membership(monkeypatch: pytest.MonkeyPatch):
    state = SimpleNamespace(cached=None, team_tag=None, member=False, lookups=0, cache_writes=[])

    async def fake_get_cache(team_id, user_aad_id):
        return state.cached

    async def fake_set_cache(team_id, user_aad_id, value):
        state.cache_writes.append((team_id, user_aad_id, value))

    async def fake_get_team_tag(team_id):
        return state.team_tag

    async def fake_lookup(service_url, team_id, user_aad_id):
        state.lookups += 1
        return state.member

    monkeypatch.setattr(team_membership, "get_team_member_cache", fake_get_cache)
    monkeypatch.setattr(team_membership, "set_team_member_cache", fake_set_cache)
    monkeypatch.setattr(team_membership, "get_team_tag", fake_get_team_tag)
    monkeypatch.setattr(team_membership, "lookup_team_member", fake_lookup)
    return state


@pytest.mark.asyncio
async def test_cached_membership_skips_roster(membership):
    membership.cached = True
    assert await team_membership.is_team_member("team-1", "user-1") is True
    assert membership.lookups == 0


@pytest.mark.asyncio
async def test_team_without_install_is_not_member(membership):
    assert await team_membership.is_team_member("team-1", "user-1") is False
    assert membership.lookups == 0


@pytest.mark.asyncio
async def test_only_positive_membership_is_cached(membership):
    membership.team_tag = TeamTag(team_id="team-1", service_url="https://smba.example", tags="")

    assert await team_membership.is_team_member("team-1", "outsider") is False
    assert membership.cache_writes == []

    membership.member = True
    assert await team_membership.is_team_member("team-1", "user-1") is True
    assert membership.cache_writes == [("team-1", "user-1", True)]


@pytest.mark.asyncio
async def test_membership_without_redis(membership, monkeypatch: pytest.MonkeyPatch):
    async def no_redis(*args):
        raise RuntimeError("Redis not initialized")

    monkeypatch.setattr(team_membership, "get_team_member_cache", no_redis)
    monkeypatch.setattr(team_membership, "set_team_member_cache", no_redis)
    membership.team_tag = TeamTag(team_id="team-1", service_url="https://smba.example", tags="")
    membership.member = True

    assert await team_membership.is_team_member("team-1", "user-1") is True
    assert membership.lookups == 1


@pytest.mark.asyncio
async def test_notifier_retries_until_sent():
    adapter = FakeAdapter(failures=2)
    notifier = TeamsNotifier(adapter, "app-1", "tenant-1", retry_count=2, median_first_retry_delay_ms=0)

    await notifier.send_card_to_team("team-1", "https://smba.example", Attachment(content_type="x"))
    assert adapter.calls == 3
    assert adapter.references[0].conversation.id == "team-1"


@pytest.mark.asyncio
async def test_notifier_gives_up_after_retry_count():
    adapter = FakeAdapter(failures=10)
    notifier = TeamsNotifier(adapter, "app-1", "tenant-1", retry_count=2, median_first_retry_delay_ms=0)

    with pytest.raises(ConnectionError):
        await notifier.send_card_to_team("team-1", "https://smba.example", Attachment(content_type="x"))
    assert adapter.calls == 3
