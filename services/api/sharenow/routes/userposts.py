"""Post endpoints for the signed-in user.

GET    /api/userposts                    - Page of newest posts
POST   /api/userposts                    - Share a new post
PATCH  /api/userposts                    - Edit own post
DELETE /api/userposts                    - Remove own post (soft delete)
GET    /api/userposts/filtered-posts     - Posts by type/author/tags
GET    /api/userposts/unique-user-names  - Authors to filter by
GET    /api/userposts/search-posts       - Title search

Routers are thin: call services for business logic.
"""

import logging

from fastapi import APIRouter, Depends, Query

from sharenow.auth import CurrentUser, get_current_user
from sharenow.errors import api_error
from sharenow.schemas import ErrorResponse, PostCreate, PostResponse, PostUpdate
from sharenow.services.post_helpers import build_post_filter, get_tags_query
from sharenow.services.post_lists import all_author_names, invalidate_post_lists
from sharenow.services.post_search import PostSearchScope, search_posts
from sharenow.services.posts import create_post, remove_post, update_post

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

LAZY_LOAD_PER_PAGE_POST_COUNT = 50

_ERRORS = {400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}}


def page_skip(page_count: int) -> int:
    """Rows to skip for a 0-based page index."""
    if page_count < 0:
        logger.error("Invalid value for argument pageCount.")
        raise api_error(400, "INVALID_PAGE_COUNT", "Invalid value for argument pageCount.")
    return page_count * LAZY_LOAD_PER_PAGE_POST_COUNT


@router.get("", response_model=list[PostResponse], responses=_ERRORS)
async def get_posts(
    page_count: int = Query(default=0, alias="pageCount"),
    user: CurrentUser = Depends(get_current_user),
) -> list[PostResponse]:
    """Newest posts, 50 per page."""
    logger.info("Call to retrieve list of posts.")
    skip = page_skip(page_count)
    posts = await search_posts(
        PostSearchScope.ALL_ITEMS,
        search_query=None,
        count=LAZY_LOAD_PER_PAGE_POST_COUNT,
        skip=skip,
    )
    return [PostResponse.model_validate(p) for p in posts]


@router.post("", response_model=PostResponse, responses=_ERRORS)
async def add_post(
    body: PostCreate,
    user: CurrentUser = Depends(get_current_user),
) -> PostResponse:
    """Share a new post authored by the caller."""
    logger.info(f"Call to add post by {user.aad_object_id}.")
    post = await create_post(
        user_id=user.aad_object_id,
        created_by_name=user.name,
        post_type=body.type,
        title=body.title,
        description=body.description,
        content_url=body.content_url,
        tags=body.tags,
    )
    await invalidate_post_lists()
    return PostResponse.model_validate(post)


@router.patch("", responses={**_ERRORS, 404: {"model": ErrorResponse}})
async def patch_post(
    body: PostUpdate,
    user: CurrentUser = Depends(get_current_user),
) -> bool:
    """Edit a post the caller created."""
    logger.info("Call to update post details.")
    if not body.post_id:
        logger.error("PostId is either null or empty.")
        raise api_error(400, "POST_ID_REQUIRED", "PostId cannot be null or empty.")
    if body.user_id != user.aad_object_id:
        logger.error(f"User {user.aad_object_id} did not create any post with post Id: {body.post_id}.")
        raise api_error(
            404,
            "POST_NOT_OWNED",
            f"User did not create any post with post Id: {body.post_id}.",
        )

    post = await update_post(
        user_id=user.aad_object_id,
        post_id=body.post_id,
        post_type=body.type,
        title=body.title,
        description=body.description,
        content_url=body.content_url,
        tags=body.tags,
    )
    if post is None:
        logger.info(f"Could not find post {body.post_id} created by user {user.aad_object_id}")
        raise api_error(400, "POST_NOT_FOUND", f"Could not find post {body.post_id} to update.")

    await invalidate_post_lists()
    return True


@router.delete("", responses=_ERRORS)
async def delete_post(
    post_id: str = Query(default="", alias="postId"),
    user: CurrentUser = Depends(get_current_user),
) -> bool:
    """Soft delete a post the caller created."""
    logger.info("Call to delete post.")
    if not post_id:
        raise api_error(400, "POST_ID_REQUIRED", "PostId cannot be null or empty.")

    if not await remove_post(user.aad_object_id, post_id):
        logger.error(f"Post {post_id} not found for user {user.aad_object_id}.")
        raise api_error(400, "POST_NOT_FOUND", f"Could not find post {post_id}.")

    await invalidate_post_lists()
    return True


@router.get("/filtered-posts", response_model=list[PostResponse], responses=_ERRORS)
async def get_filtered_posts(
    post_types: str | None = Query(default=None, alias="postTypes", description="';'-separated type ids"),
    shared_by_names: str | None = Query(default=None, alias="sharedByNames", description="';'-separated author names"),
    tags: str | None = Query(default=None, description="';'-separated tags"),
    sort_by: int = Query(default=0, alias="sortBy", description="1 = most votes, otherwise newest"),
    page_count: int = Query(default=0, alias="pageCount"),
    user: CurrentUser = Depends(get_current_user),
) -> list[PostResponse]:
    """Posts narrowed by type, author and tags."""
    logger.info("Call to get posts as per the applied filters.")
    skip = page_skip(page_count)
    tags_query = get_tags_query(tags) if tags else "*"
    posts = await search_posts(
        PostSearchScope.FILTER_TEAM_POSTS,
        search_query=tags_query,
        sort_by=sort_by,
        post_filter=build_post_filter(post_types, shared_by_names),
        count=LAZY_LOAD_PER_PAGE_POST_COUNT,
        skip=skip,
    )
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/unique-user-names", responses=_ERRORS)
async def get_unique_user_names(
    user: CurrentUser = Depends(get_current_user),
) -> list[str]:
    """Display names of the most active authors."""
    logger.info("Call to get unique author names.")
    return await all_author_names()


@router.get("/search-posts", response_model=list[PostResponse], responses=_ERRORS)
async def search_posts_by_title(
    search_text: str | None = Query(default=None, alias="searchText"),
    page_count: int = Query(default=0, alias="pageCount"),
    user: CurrentUser = Depends(get_current_user),
) -> list[PostResponse]:
    """Posts whose title matches the search text."""
    logger.info("Call to get list of posts matching the search text.")
    skip = page_skip(page_count)
    posts = await search_posts(
        PostSearchScope.SEARCH_TEAM_POSTS_FOR_TITLE_TEXT,
        search_query=search_text,
        count=LAZY_LOAD_PER_PAGE_POST_COUNT,
        skip=skip,
    )
    return [PostResponse.model_validate(p) for p in posts]
