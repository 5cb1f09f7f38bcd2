"""Team preference endpoints.

GET /api/teampreference             - Digest preference of a team (members only)
GET /api/teampreference/unique-tags - Tag suggestions for the preference dialog
"""

import logging

from fastapi import APIRouter, Depends, Query

from sharenow.auth import CurrentUser, get_current_user, require_team_member
from sharenow.errors import api_error
from sharenow.schemas import ErrorResponse, TeamPreferenceResponse
from sharenow.services.post_lists import unique_tags
from sharenow.services.teams import get_team_preference

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

_ERRORS = {400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}}


@router.get("", response_model=TeamPreferenceResponse | None, responses={**_ERRORS, 403: {"model": ErrorResponse}})
async def get_team_preference_details(
    team_id: str = Query(default="", alias="teamId"),
    user: CurrentUser = Depends(require_team_member),
) -> TeamPreferenceResponse | None:
    logger.info("Call to retrieve team preference.")
    preference = await get_team_preference(team_id)
    return TeamPreferenceResponse.model_validate(preference) if preference else None


@router.get("/unique-tags", responses=_ERRORS)
async def get_unique_tags(
    search_text: str = Query(default="", alias="searchText", description='"*" for the most used tags'),
    user: CurrentUser = Depends(get_current_user),
) -> list[str]:
    """Tags to offer while configuring preferences."""
    logger.info("Call to get list of unique tags to show while configuring the preference.")
    if not search_text:
        logger.error("Search text for unique tags is either null or empty.")
        raise api_error(400, "SEARCH_TEXT_REQUIRED", "Search text is either null or empty.")
    return await unique_tags(search_text)
