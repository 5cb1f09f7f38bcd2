"""Weekly and monthly digest notifications.

Flow for one digest run:
1. Load the latest posts and keep those updated within [start, end]
2. Load team preferences with the run's frequency
3. For each team, pick up to 15 posts sharing a tag with the preference
4. Post a list card in the team's channel (needs the team's TeamTag row)

Schedule (evaluated for "tomorrow", so the digest lands before the day starts):
- Monday: weekly digest covering the previous 7 days
- 1st of the month: monthly digest covering the previous month
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol

from botbuilder.schema import Attachment
from dateutil.relativedelta import relativedelta

from sharenow.bot.cards import MONTHLY_DIGEST_TITLE, WEEKLY_DIGEST_TITLE, digest_list_card
from sharenow.models import Post
from sharenow.services.post_helpers import posts_in_date_range, split_tags
from sharenow.services.post_search import PostSearchScope, search_posts
from sharenow.services.teams import (
    DIGEST_FREQUENCY_MONTHLY,
    DIGEST_FREQUENCY_WEEKLY,
    get_team_preferences_by_frequency,
    get_team_tags_by_team_ids,
)
from sharenow.settings import get_settings
from sharenow.stores.redis import acquire_lock, release_lock

logger = logging.getLogger("uvicorn.error")

DIGEST_LIST_CARD_POST_COUNT = 15


class CardNotifier(Protocol):
    async def send_card_to_team(self, team_id: str, service_url: str, attachment: Attachment) -> None: ...


@dataclass(frozen=True)
class DigestWindow:
    frequency: str
    start: datetime
    end: datetime


@dataclass
class DigestStats:
    frequency: str
    posts_in_range: int = 0
    teams_considered: int = 0
    teams_matched: int = 0
    cards_sent: int = 0
    skipped_no_team_tag: int = 0
    errors: int = 0
    failed_team_ids: list[str] = field(default_factory=list)


def match_posts_to_tags(
    preference_tags: str | None,
    posts: Iterable[Post],
    limit: int = DIGEST_LIST_CARD_POST_COUNT,
) -> list[Post]:
    """Newest posts sharing at least one tag with the preference.

    Tags are compared after trimming, case-sensitively.
    """
    wanted = {tag.strip() for tag in split_tags(preference_tags)}
    if not wanted:
        return []

    matched: list[Post] = []
    for post in sorted(posts, key=lambda p: p.updated_date, reverse=True):
        if any(tag.strip() in wanted for tag in split_tags(post.tags)):
            matched.append(post)
            if len(matched) >= limit:
                break
    return matched


def _midnight(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def digest_windows(now: datetime) -> list[DigestWindow]:
    """Digest windows due at `now` (weekly, monthly, both or neither)."""
    current = now + timedelta(days=1)
    end = _midnight(current.date())
    windows: list[DigestWindow] = []
    if current.weekday() == 0:
        start = _midnight((current - timedelta(days=7)).date())
        windows.append(DigestWindow(DIGEST_FREQUENCY_WEEKLY, start, end))
    if current.day == 1:
        start = _midnight((current - relativedelta(months=1)).date())
        windows.append(DigestWindow(DIGEST_FREQUENCY_MONTHLY, start, end))
    return windows


async def send_digest(
    start: datetime,
    end: datetime,
    frequency: str,
    notifier: CardNotifier,
) -> DigestStats:
    """Send one digest run. A failing team is logged and skipped."""
    settings = get_settings()
    stats = DigestStats(frequency=frequency)
    logger.info(f"{frequency} digest run started for {start.isoformat()} - {end.isoformat()}")

    posts = await search_posts(PostSearchScope.FILTER_POSTS_AS_PER_DATE_RANGE, search_query=None)
    in_range = posts_in_date_range(posts, start, end)
    stats.posts_in_range = len(in_range)
    if not in_range:
        logger.info(f"No digest data between {start.isoformat()} and {end.isoformat()}")
        return stats

    preferences = await get_team_preferences_by_frequency(frequency)
    stats.teams_considered = len(preferences)
    title = WEEKLY_DIGEST_TITLE if frequency == DIGEST_FREQUENCY_WEEKLY else MONTHLY_DIGEST_TITLE

    matches: dict[str, list[Post]] = {}
    for preference in preferences:
        matched = match_posts_to_tags(preference.tags, in_range)
        if matched:
            matches[preference.team_id] = matched
    stats.teams_matched = len(matches)

    team_tags = await get_team_tags_by_team_ids(list(matches))
    for team_id, matched in matches.items():
        team_tag = team_tags.get(team_id)
        if team_tag is None:
            stats.skipped_no_team_tag += 1
            continue

        card = digest_list_card(
            matched,
            title=title,
            app_base_uri=settings.app_base_uri,
            manifest_id=settings.manifest_id,
            discover_tab_entity_id=settings.discover_tab_entity_id,
        )
        try:
            await notifier.send_card_to_team(team_id, team_tag.service_url, card)
        except Exception:
            logger.exception(f"Failed to send {frequency} digest to team {team_id}")
            stats.errors += 1
            stats.failed_team_ids.append(team_id)
            continue
        stats.cards_sent += 1

    logger.info(
        f"{frequency} digest run finished: sent={stats.cards_sent} "
        f"matched={stats.teams_matched} errors={stats.errors}"
    )
    return stats


async def run_due_digests(notifier: CardNotifier, now: datetime | None = None) -> list[DigestStats]:
    """Send every digest due at `now`, once per window across replicas.

    A failing window is logged and unlocked; the other windows still run.
    """
    now = now or datetime.now(timezone.utc)
    results: list[DigestStats] = []
    for window in digest_windows(now):
        lock_key = f"digest:{window.frequency}:{window.end.date().isoformat()}"
        try:
            acquired = await acquire_lock(lock_key)
        except RuntimeError:
            # No Redis: single-instance deployment, run unguarded.
            acquired = True
        if not acquired:
            logger.info(f"{window.frequency} digest for {window.end.date()} already sent")
            continue

        try:
            results.append(await send_digest(window.start, window.end, window.frequency, notifier))
        except Exception:
            # Unlock so a manual or rerun pass for the same window can send it.
            logger.exception(f"{window.frequency} digest for {window.end.date()} failed")
            try:
                await release_lock(lock_key)
            except RuntimeError:
                pass
    return results


async def digest_scheduler_loop(notifier: CardNotifier, interval_seconds: int) -> None:
    """Check for due digests every interval until cancelled. Errors never stop the loop."""
    while True:
        try:
            await run_due_digests(notifier)
        except Exception:
            logger.exception("Digest run failed")
        await asyncio.sleep(interval_seconds)
