"""Saved ("private") post endpoints.

GET    /api/userprivatepost - Posts the caller saved, most recently saved first
POST   /api/userprivatepost - Save a post (false once 50 are saved)
DELETE /api/userprivatepost - Unsave a post
"""

import logging

from fastapi import APIRouter, Depends, Query

from sharenow.auth import CurrentUser, get_current_user
from sharenow.errors import api_error
from sharenow.schemas import ErrorResponse, PostResponse, PrivatePostCreate
from sharenow.services.post_search import PostFilter, PostSearchScope, search_posts
from sharenow.services.private_posts import (
    add_private_post,
    delete_private_post,
    list_private_post_ids,
)

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

_ERRORS = {400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}}


@router.get("", response_model=list[PostResponse], responses=_ERRORS)
async def get_private_posts(
    user: CurrentUser = Depends(get_current_user),
) -> list[PostResponse]:
    logger.info("Call to retrieve list of private posts.")
    post_ids = await list_private_post_ids(user.aad_object_id)
    if not post_ids:
        return []

    posts = await search_posts(
        PostSearchScope.SEARCH_TEAM_POSTS_FOR_TITLE_TEXT,
        "*",
        post_filter=PostFilter(post_ids=tuple(post_ids)),
    )
    position = {post_id: i for i, post_id in enumerate(post_ids)}
    posts.sort(key=lambda p: position[p.post_id])
    return [PostResponse.model_validate(p) for p in posts]


@router.post("", responses=_ERRORS)
async def save_private_post(
    body: PrivatePostCreate,
    user: CurrentUser = Depends(get_current_user),
) -> bool:
    logger.info("Call to add private post.")
    return await add_private_post(user.aad_object_id, body.post_id, user.name)


@router.delete("", responses=_ERRORS)
async def remove_private_post(
    post_id: str = Query(default="", alias="postId"),
    user: CurrentUser = Depends(get_current_user),
) -> bool:
    logger.info("Call to delete private post.")
    if not post_id:
        logger.error("PostId is either null or empty.")
        raise api_error(400, "POST_ID_REQUIRED", "PostId is either null or empty.")
    return await delete_private_post(user.aad_object_id, post_id)
