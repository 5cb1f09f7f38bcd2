"""Team discover feed endpoints (team members only).

A team's feed is the set of posts carrying at least one of the team's
configured tags.

GET /api/teampost/team-discover-posts  - Newest posts for the team's tags
GET /api/teampost/filtered-team-posts  - Team posts by type/author/tags
GET /api/teampost/search-posts         - Title search within team posts
GET /api/teampost/team-post-authors    - Authors of team posts
"""

import logging

from fastapi import APIRouter, Depends, Query

from sharenow.auth import CurrentUser, require_team_member
from sharenow.errors import api_error
from sharenow.models import TeamTag
from sharenow.routes.userposts import LAZY_LOAD_PER_PAGE_POST_COUNT, page_skip
from sharenow.schemas import ErrorResponse, PostResponse
from sharenow.services.post_helpers import (
    build_post_filter,
    filter_posts_by_team_tags,
    get_tags_query,
    intersect_tags,
    split_tags,
)
from sharenow.services.post_lists import team_author_names
from sharenow.services.post_search import PostFilter, PostSearchScope, search_posts
from sharenow.services.teams import get_team_tag

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
}


async def _configured_team_tag(team_id: str) -> TeamTag | None:
    team_tag = await get_team_tag(team_id)
    if team_tag is None or not team_tag.tags:
        logger.info(f"Tags are not configured for team {team_id}.")
        return None
    return team_tag


def _tags_not_configured(team_id: str):
    return api_error(400, "TAGS_NOT_CONFIGURED", f"Tags are not configured for team {team_id}.")


@router.get("/team-discover-posts", response_model=list[PostResponse], responses=_ERRORS)
async def get_team_posts(
    team_id: str = Query(default="", alias="teamId"),
    page_count: int = Query(default=0, alias="pageCount"),
    user: CurrentUser = Depends(require_team_member),
) -> list[PostResponse]:
    """Newest posts matching the team's configured tags; [] when none are configured."""
    logger.info("Call to get filtered team post details.")
    skip = page_skip(page_count)
    team_tag = await _configured_team_tag(team_id)
    if team_tag is None:
        return []

    posts = await search_posts(
        PostSearchScope.FILTER_AS_PER_TEAM_TAGS,
        get_tags_query(team_tag.tags),
        count=LAZY_LOAD_PER_PAGE_POST_COUNT,
        skip=skip,
    )
    return [PostResponse.model_validate(p) for p in filter_posts_by_team_tags(posts, team_tag.tags)]


@router.get("/filtered-team-posts", response_model=list[PostResponse], responses=_ERRORS)
async def get_filtered_team_posts(
    team_id: str = Query(default="", alias="teamId"),
    post_types: str | None = Query(default=None, alias="postTypes"),
    shared_by_names: str | None = Query(default=None, alias="sharedByNames"),
    tags: str | None = Query(default=None),
    sort_by: int = Query(default=0, alias="sortBy"),
    page_count: int = Query(default=0, alias="pageCount"),
    user: CurrentUser = Depends(require_team_member),
) -> list[PostResponse]:
    """Team posts narrowed by type, author and a subset of the team's tags."""
    logger.info("Call to get team posts as per the applied filters.")
    skip = page_skip(page_count)
    team_tag = await _configured_team_tag(team_id)
    if team_tag is None:
        raise _tags_not_configured(team_id)

    selected = intersect_tags(tags, team_tag.tags)
    if not selected:
        return []

    base_filter = build_post_filter(post_types, shared_by_names) or PostFilter()
    post_filter = PostFilter(
        post_types=base_filter.post_types,
        shared_by_names=base_filter.shared_by_names,
        tags=tuple(split_tags(selected)),
    )
    posts = await search_posts(
        PostSearchScope.FILTER_TEAM_POSTS,
        get_tags_query(selected),
        sort_by=sort_by,
        post_filter=post_filter,
        count=LAZY_LOAD_PER_PAGE_POST_COUNT,
        skip=skip,
    )
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/search-posts", response_model=list[PostResponse], responses=_ERRORS)
async def search_team_posts(
    team_id: str = Query(default="", alias="teamId"),
    search_text: str | None = Query(default=None, alias="searchText"),
    page_count: int = Query(default=0, alias="pageCount"),
    user: CurrentUser = Depends(require_team_member),
) -> list[PostResponse]:
    """Title search restricted to posts carrying one of the team's tags."""
    logger.info("Call to get list of posts as per the configured tags and title.")
    skip = page_skip(page_count)
    team_tag = await _configured_team_tag(team_id)
    if team_tag is None:
        raise _tags_not_configured(team_id)

    posts = await search_posts(
        PostSearchScope.SEARCH_TEAM_POSTS_FOR_TITLE_TEXT,
        search_text,
        post_filter=PostFilter(tags=tuple(split_tags(team_tag.tags))),
        count=LAZY_LOAD_PER_PAGE_POST_COUNT,
        skip=skip,
    )
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/team-post-authors", responses=_ERRORS)
async def get_team_post_authors(
    team_id: str = Query(default="", alias="teamId"),
    user: CurrentUser = Depends(require_team_member),
) -> list[str]:
    """Authors of the team's posts; [] when no tags are configured."""
    logger.info("Call to get unique author names for team posts.")
    team_tag = await _configured_team_tag(team_id)
    if team_tag is None:
        return []
    return await team_author_names(team_id, team_tag.tags)
