from datetime import datetime, timezone

import pytest

from conftest import make_post
from sharenow.models import TeamPreference, TeamTag
from sharenow.services import digest
from sharenow.services.digest import DigestStats, digest_windows, match_posts_to_tags, run_due_digests, send_digest


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class RecordingNotifier:
    def __init__(self, fail_for: set[str] | None = None):
        self.sent: list[tuple[str, str, object]] = []
        self.fail_for = fail_for or set()

    async def send_card_to_team(self, team_id, service_url, attachment) -> None:
        if team_id in self.fail_for:
            raise ConnectionError("channel unreachable")
        self.sent.append((team_id, service_url, attachment))


def test_match_posts_to_tags_newest_first_with_limit():
    posts = [make_post(f"p{i}", tags="python", updated_date=_utc(2026, 1, i + 1)) for i in range(20)]
    matched = match_posts_to_tags("python", posts)
    assert len(matched) == 15
    assert matched[0].post_id == "p19"


def test_match_posts_to_tags_is_case_sensitive_after_trim():
    posts = [make_post("a", tags=" python ;api"), make_post("b", tags="Python")]
    assert [p.post_id for p in match_posts_to_tags("python", posts)] == ["a"]
    assert match_posts_to_tags("", posts) == []


def test_weekly_window_evaluated_for_tomorrow():
    # Sunday 2026-01-04: tomorrow is Monday
    windows = digest_windows(_utc(2026, 1, 4, 9, 30))
    assert [(w.frequency, w.start, w.end) for w in windows] == [
        ("Weekly", _utc(2025, 12, 29), _utc(2026, 1, 5)),
    ]


def test_monthly_window_covers_previous_month():
    windows = digest_windows(_utc(2026, 1, 31, 23, 0))
    assert [(w.frequency, w.start, w.end) for w in windows] == [
        ("Monthly", _utc(2026, 1, 1), _utc(2026, 2, 1)),
    ]


def test_weekly_and_monthly_on_same_day():
    # 2026-06-01 is a Monday and the first of the month
    windows = digest_windows(_utc(2026, 5, 31, 12, 0))
    assert [w.frequency for w in windows] == ["Weekly", "Monthly"]


def test_no_window_on_ordinary_day():
    assert digest_windows(_utc(2026, 1, 6, 12, 0)) == []


@pytest.fixture
def digest_data(monkeypatch: pytest.MonkeyPatch):
    posts = [
        make_post("py", tags="python", updated_date=_utc(2026, 1, 3)),
        make_post("old", tags="python", updated_date=_utc(2025, 11, 1)),
        make_post("go", tags="go", updated_date=_utc(2026, 1, 2)),
    ]
    preferences = [
        TeamPreference(team_id="team-py", digest_frequency="Weekly", tags="python"),
        TeamPreference(team_id="team-rust", digest_frequency="Weekly", tags="rust"),
        TeamPreference(team_id="team-go", digest_frequency="Weekly", tags="go"),
        TeamPreference(team_id="team-gone", digest_frequency="Weekly", tags="python"),
    ]
    team_tags = {
        "team-py": TeamTag(team_id="team-py", service_url="https://smba.example/py", tags=""),
        "team-go": TeamTag(team_id="team-go", service_url="https://smba.example/go", tags=""),
    }

    async def fake_search_posts(scope, search_query=None, **kwargs):
        return posts

    async def fake_preferences(frequency: str):
        return [p for p in preferences if p.digest_frequency == frequency]

    async def fake_team_tags(team_ids: list[str]):
        return {team_id: team_tags[team_id] for team_id in team_ids if team_id in team_tags}

    monkeypatch.setattr(digest, "search_posts", fake_search_posts)
    monkeypatch.setattr(digest, "get_team_preferences_by_frequency", fake_preferences)
    monkeypatch.setattr(digest, "get_team_tags_by_team_ids", fake_team_tags)


@pytest.mark.asyncio
async def test_send_digest_continues_after_team_failure(digest_data):
    notifier = RecordingNotifier(fail_for={"team-go"})
    stats = await send_digest(_utc(2025, 12, 29), _utc(2026, 1, 5), "Weekly", notifier)

    assert stats.posts_in_range == 2
    assert stats.teams_considered == 4
    assert stats.teams_matched == 3
    assert stats.skipped_no_team_tag == 1
    assert stats.cards_sent == 1
    assert stats.failed_team_ids == ["team-go"]

    team_id, service_url, card = notifier.sent[0]
    assert (team_id, service_url) == ("team-py", "https://smba.example/py")
    assert card.content_type == "application/vnd.microsoft.teams.card.list"
    assert [item["id"] for item in card.content["items"]] == ["py"]


@pytest.mark.asyncio
async def test_send_digest_without_posts_in_range_sends_nothing(digest_data):
    notifier = RecordingNotifier()
    stats = await send_digest(_utc(2024, 1, 1), _utc(2024, 1, 8), "Weekly", notifier)
    assert stats.posts_in_range == 0
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_run_due_digests_skips_locked_window(monkeypatch: pytest.MonkeyPatch):
    sent: list[str] = []

    async def fake_send_digest(start, end, frequency, notifier):
        sent.append(frequency)
        return DigestStats(frequency=frequency)

    async def already_locked(key: str, ttl: int | None = None) -> bool:
        return False

    monkeypatch.setattr(digest, "send_digest", fake_send_digest)
    monkeypatch.setattr(digest, "acquire_lock", already_locked)

    assert await run_due_digests(RecordingNotifier(), now=_utc(2026, 1, 4)) == []
    assert sent == []


@pytest.mark.asyncio
async def test_run_due_digests_without_redis_runs_unguarded(monkeypatch: pytest.MonkeyPatch):
    async def fake_send_digest(start, end, frequency, notifier):
        return DigestStats(frequency=frequency, cards_sent=2)

    async def no_redis(key: str, ttl: int | None = None) -> bool:
        raise RuntimeError("Redis not initialized")

    monkeypatch.setattr(digest, "send_digest", fake_send_digest)
    monkeypatch.setattr(digest, "acquire_lock", no_redis)

    results = await run_due_digests(RecordingNotifier(), now=_utc(2026, 5, 31))
    assert [(r.frequency, r.cards_sent) for r in results] == [("Weekly", 2), ("Monthly", 2)]


@pytest.mark.asyncio
async def test_run_due_digests_releases_lock_on_failure(monkeypatch: pytest.MonkeyPatch):
    released: list[str] = []

    async def failing_send_digest(start, end, frequency, notifier):
        raise ConnectionError("database down")

    async def acquired(key: str, ttl: int | None = None) -> bool:
        return True

    async def fake_release(key: str) -> None:
        released.append(key)

    monkeypatch.setattr(digest, "send_digest", failing_send_digest)
    monkeypatch.setattr(digest, "acquire_lock", acquired)
    monkeypatch.setattr(digest, "release_lock", fake_release)

    assert await run_due_digests(RecordingNotifier(), now=_utc(2026, 1, 4)) == []
    assert released == ["digest:Weekly:2026-01-05"]


@pytest.mark.asyncio
async def test_failed_weekly_window_does_not_block_monthly(monkeypatch: pytest.MonkeyPatch):
    released: list[str] = []

    async def weekly_fails(start, end, frequency, notifier):
        if frequency == "Weekly":
            raise ConnectionError("database down")
        return DigestStats(frequency=frequency, cards_sent=1)

    async def acquired(key: str, ttl: int | None = None) -> bool:
        return True

    async def fake_release(key: str) -> None:
        released.append(key)

    monkeypatch.setattr(digest, "send_digest", weekly_fails)
    monkeypatch.setattr(digest, "acquire_lock", acquired)
    monkeypatch.setattr(digest, "release_lock", fake_release)

    results = await run_due_digests(RecordingNotifier(), now=_utc(2026, 5, 31))
    assert [(r.frequency, r.cards_sent) for r in results] == [("Monthly", 1)]
    assert released == ["digest:Weekly:2026-06-01"]
