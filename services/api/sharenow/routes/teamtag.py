"""Team tag endpoints (team members only).

GET  /api/teamtag                 - Team tag configuration
POST /api/teamtag                 - Replace the team's tags
GET  /api/teamtag/configured-tags - The team's tags as a list
"""

import logging

from fastapi import APIRouter, Depends, Query

from sharenow.auth import CurrentUser, ensure_team_member, get_current_user, require_team_member
from sharenow.errors import api_error
from sharenow.schemas import ErrorResponse, TeamTagResponse, TeamTagUpdate
from sharenow.services.post_helpers import split_tags
from sharenow.services.teams import get_team_tag, update_team_tags

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
}


@router.get("", response_model=TeamTagResponse | None, responses=_ERRORS)
async def get_team_tag_configuration(
    team_id: str = Query(default="", alias="teamId"),
    user: CurrentUser = Depends(require_team_member),
) -> TeamTagResponse | None:
    logger.info(f"Call to get team tag for team {team_id}.")
    team_tag = await get_team_tag(team_id)
    return TeamTagResponse.model_validate(team_tag) if team_tag else None


@router.post("", response_model=TeamTagResponse, responses=_ERRORS)
async def save_team_tags(
    body: TeamTagUpdate,
    user: CurrentUser = Depends(get_current_user),
) -> TeamTagResponse:
    """Replace the tags of a team the bot is installed in."""
    logger.info(f"Call to save tags for team {body.team_id}.")
    await ensure_team_member(body.team_id, user)

    team_tag = await update_team_tags(body.team_id, body.tags)
    if team_tag is None:
        logger.error(f"Team {body.team_id} has no tag configuration to update.")
        raise api_error(400, "TEAM_NOT_FOUND", f"Team {body.team_id} is not configured.")
    return TeamTagResponse.model_validate(team_tag)


@router.get("/configured-tags", responses=_ERRORS)
async def get_configured_tags(
    team_id: str = Query(default="", alias="teamId"),
    user: CurrentUser = Depends(require_team_member),
) -> list[str]:
    logger.info(f"Call to get configured tags for team {team_id}.")
    team_tag = await get_team_tag(team_id)
    if team_tag is None:
        return []
    return split_tags(team_tag.tags)
