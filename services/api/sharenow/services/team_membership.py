"""Team membership checks for team-scoped endpoints.

A user is a member when the bot is installed in the team (there is a
TeamTag row carrying the service URL) and the Bot Framework roster lookup
finds them. Positive answers are cached for an hour.
"""

import logging

from botbuilder.core import TurnContext
from botbuilder.core.teams import TeamsInfo
from botbuilder.schema import ConversationAccount, ConversationReference, ErrorResponseException
from botframework.connector.auth import MicrosoftAppCredentials

from sharenow.bot.adapter import TEAMS_CHANNEL_ID, get_adapter
from sharenow.services.teams import get_team_tag
from sharenow.settings import get_settings
from sharenow.stores.redis import get_team_member_cache, set_team_member_cache

logger = logging.getLogger("uvicorn.error")


async def lookup_team_member(service_url: str, team_id: str, user_aad_id: str) -> bool:
    """Ask the Teams roster whether the user belongs to the team."""
    settings = get_settings()
    MicrosoftAppCredentials.trust_service_url(service_url)
    reference = ConversationReference(
        channel_id=TEAMS_CHANNEL_ID,
        service_url=service_url,
        conversation=ConversationAccount(id=team_id, is_group=True, tenant_id=settings.tenant_id),
    )
    found = False

    async def _lookup(turn_context: TurnContext) -> None:
        nonlocal found
        try:
            member = await TeamsInfo.get_team_member(turn_context, team_id=team_id, member_id=user_aad_id)
        except ErrorResponseException as e:
            logger.info(f"User {user_aad_id} not found in team {team_id}: {e}")
            return
        found = member is not None

    await get_adapter().continue_conversation(reference, _lookup, bot_id=settings.microsoft_app_id)
    return found


async def is_team_member(team_id: str, user_aad_id: str) -> bool:
    try:
        cached = await get_team_member_cache(team_id, user_aad_id)
    except RuntimeError:
        # Redis may be unavailable in tests/local minimal env.
        cached = None
    if cached:
        return True

    team_tag = await get_team_tag(team_id)
    if team_tag is None:
        return False

    is_member = await lookup_team_member(team_tag.service_url, team_id, user_aad_id)
    if is_member:
        try:
            await set_team_member_cache(team_id, user_aad_id, True)
        except RuntimeError:
            pass
    return is_member
