"""User votes and the post vote counter.

A vote row and the post's total_votes change together in one transaction.
If the counter cannot move (post missing, removed, or already at zero) the
vote change is undone in the same transaction and False is returned.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert

from sharenow.models import Post, UserVote
from sharenow.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")


async def get_user_votes(user_id: str) -> list[UserVote]:
    async with get_session() as session:
        result = await session.execute(
            select(UserVote).where(UserVote.user_id == user_id).order_by(UserVote.id)
        )
        return list(result.scalars().all())


async def add_vote(*, user_id: str, post_created_by_user_id: str, post_id: str) -> bool:
    """Upvote a post. Returns True when both the vote and the counter were saved."""
    async with get_session() as session:
        inserted = await session.execute(
            insert(UserVote)
            .values(user_id=user_id, post_id=post_id)
            .on_conflict_do_nothing(constraint="uq_user_votes_user_post")
            .returning(UserVote.id)
        )
        if inserted.first() is None:
            logger.info(f"User {user_id} already voted for post {post_id}")
            return False

        counted = await session.execute(
            update(Post)
            .where(Post.user_id == post_created_by_user_id)
            .where(Post.post_id == post_id)
            .where(Post.is_removed.is_(False))
            .values(total_votes=Post.total_votes + 1)
            .returning(Post.total_votes)
        )
        if counted.first() is None:
            logger.error(f"Vote count not updated for post {post_id} by {user_id}; revoking vote")
            await session.execute(
                delete(UserVote).where(UserVote.user_id == user_id).where(UserVote.post_id == post_id)
            )
            return False
        return True


async def remove_vote(*, user_id: str, post_created_by_user_id: str, post_id: str) -> bool:
    """Withdraw an upvote. The counter never drops below zero."""
    async with get_session() as session:
        deleted = await session.execute(
            delete(UserVote)
            .where(UserVote.user_id == user_id)
            .where(UserVote.post_id == post_id)
            .returning(UserVote.id)
        )
        if deleted.first() is None:
            logger.info(f"No vote by {user_id} on post {post_id} to remove")
            return False

        counted = await session.execute(
            update(Post)
            .where(Post.user_id == post_created_by_user_id)
            .where(Post.post_id == post_id)
            .where(Post.total_votes > 0)
            .values(total_votes=Post.total_votes - 1)
            .returning(Post.total_votes)
        )
        if counted.first() is None:
            logger.error(f"Vote count not updated for post {post_id} by {user_id}; restoring vote")
            await session.execute(insert(UserVote).values(user_id=user_id, post_id=post_id))
            return False
        return True
