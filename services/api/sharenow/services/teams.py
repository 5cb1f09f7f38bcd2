"""Team tag and team preference storage.

A TeamTag row exists for every team the bot is installed in; it is created
by the bot and only its tags are editable over the API. TeamPreference
holds the digest frequency and tags.
"""

from datetime import datetime, timezone

from sqlalchemy import delete, select

from sharenow.models import TeamPreference, TeamTag
from sharenow.stores.postgres import get_session

DIGEST_FREQUENCY_WEEKLY = "Weekly"
DIGEST_FREQUENCY_MONTHLY = "Monthly"
DIGEST_FREQUENCIES = (DIGEST_FREQUENCY_WEEKLY, DIGEST_FREQUENCY_MONTHLY)


# ============================================================
# Team tags
# ============================================================


async def get_team_tag(team_id: str) -> TeamTag | None:
    async with get_session() as session:
        result = await session.execute(select(TeamTag).where(TeamTag.team_id == team_id))
        return result.scalar_one_or_none()


async def upsert_team_tag_on_install(
    *,
    team_id: str,
    service_url: str,
    user_aad_id: str | None,
    created_by_name: str | None,
) -> TeamTag:
    """Record (or refresh) the team's Bot Framework endpoint when the bot is added.

    Re-installing resets the tags to empty.
    """
    async with get_session() as session:
        result = await session.execute(
            select(TeamTag).where(TeamTag.team_id == team_id).with_for_update()
        )
        team_tag = result.scalar_one_or_none()
        if team_tag is None:
            team_tag = TeamTag(team_id=team_id)
            session.add(team_tag)
        team_tag.service_url = service_url
        team_tag.user_aad_id = user_aad_id
        team_tag.created_by_name = created_by_name
        team_tag.tags = ""
        team_tag.created_date = datetime.now(timezone.utc)
        return team_tag


async def update_team_tags(team_id: str, tags: str) -> TeamTag | None:
    """Replace the tags of an installed team. Returns None if the team is unknown."""
    async with get_session() as session:
        result = await session.execute(
            select(TeamTag).where(TeamTag.team_id == team_id).with_for_update()
        )
        team_tag = result.scalar_one_or_none()
        if team_tag is None:
            return None
        team_tag.tags = tags
        return team_tag


async def delete_team_tag(team_id: str) -> bool:
    async with get_session() as session:
        result = await session.execute(delete(TeamTag).where(TeamTag.team_id == team_id))
        return result.rowcount > 0


async def get_team_tags_by_team_ids(team_ids: list[str]) -> dict[str, TeamTag]:
    if not team_ids:
        return {}
    async with get_session() as session:
        result = await session.execute(select(TeamTag).where(TeamTag.team_id.in_(team_ids)))
        return {row.team_id: row for row in result.scalars().all()}


# ============================================================
# Team preferences
# ============================================================


async def get_team_preference(team_id: str) -> TeamPreference | None:
    async with get_session() as session:
        result = await session.execute(
            select(TeamPreference).where(TeamPreference.team_id == team_id)
        )
        return result.scalar_one_or_none()


async def get_team_preferences_by_frequency(digest_frequency: str) -> list[TeamPreference]:
    async with get_session() as session:
        result = await session.execute(
            select(TeamPreference)
            .where(TeamPreference.digest_frequency == digest_frequency)
            .order_by(TeamPreference.id)
        )
        return list(result.scalars().all())


async def upsert_team_preference(
    *,
    team_id: str,
    digest_frequency: str,
    tags: str,
    updated_by_name: str | None,
    updated_by_object_id: str | None,
) -> TeamPreference:
    """Create the team's preference or update frequency, tags and updater."""
    now = datetime.now(timezone.utc)
    async with get_session() as session:
        result = await session.execute(
            select(TeamPreference).where(TeamPreference.team_id == team_id).with_for_update()
        )
        preference = result.scalar_one_or_none()
        if preference is None:
            preference = TeamPreference(team_id=team_id, created_date=now)
            session.add(preference)
        preference.digest_frequency = digest_frequency
        preference.tags = tags
        preference.updated_by_name = updated_by_name
        preference.updated_by_object_id = updated_by_object_id
        preference.updated_date = now
        return preference


async def delete_team_preference(team_id: str) -> bool:
    async with get_session() as session:
        result = await session.execute(
            delete(TeamPreference).where(TeamPreference.team_id == team_id)
        )
        return result.rowcount > 0
