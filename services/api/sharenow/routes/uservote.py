"""Vote endpoints.

GET    /api/uservote/user-votes - The caller's votes
POST   /api/uservote/vote       - Upvote a post
DELETE /api/uservote            - Withdraw an upvote

Both writes return whether the post's vote count was updated.
"""

import logging

from fastapi import APIRouter, Depends, Query

from sharenow.auth import CurrentUser, get_current_user
from sharenow.errors import api_error
from sharenow.schemas import ErrorResponse, UserVoteResponse
from sharenow.services.votes import add_vote, get_user_votes, remove_vote

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

_ERRORS = {400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}}


def _require_vote_params(post_created_by_user_id: str, post_id: str) -> None:
    if not post_created_by_user_id:
        logger.error("Parameter postCreatedByUserId is either null or empty.")
        raise api_error(
            400,
            "POST_AUTHOR_REQUIRED",
            "Parameter postCreatedByUserId is either null or empty.",
        )
    if not post_id:
        logger.error("PostId is either null or empty.")
        raise api_error(400, "POST_ID_REQUIRED", "PostId is either null or empty.")


@router.get("/user-votes", response_model=list[UserVoteResponse], responses=_ERRORS)
async def get_votes(
    user: CurrentUser = Depends(get_current_user),
) -> list[UserVoteResponse]:
    logger.info("Call to retrieve list of votes for user.")
    votes = await get_user_votes(user.aad_object_id)
    return [UserVoteResponse.model_validate(v) for v in votes]


@router.post("/vote", responses=_ERRORS)
async def vote(
    post_created_by_user_id: str = Query(default="", alias="postCreatedByUserId"),
    post_id: str = Query(default="", alias="postId"),
    user: CurrentUser = Depends(get_current_user),
) -> bool:
    logger.info("Call to add user vote.")
    _require_vote_params(post_created_by_user_id, post_id)
    return await add_vote(
        user_id=user.aad_object_id,
        post_created_by_user_id=post_created_by_user_id,
        post_id=post_id,
    )


@router.delete("", responses=_ERRORS)
async def unvote(
    post_created_by_user_id: str = Query(default="", alias="postCreatedByUserId"),
    post_id: str = Query(default="", alias="postId"),
    user: CurrentUser = Depends(get_current_user),
) -> bool:
    logger.info("Call to delete user vote.")
    _require_vote_params(post_created_by_user_id, post_id)
    return await remove_vote(
        user_id=user.aad_object_id,
        post_created_by_user_id=post_created_by_user_id,
        post_id=post_id,
    )
