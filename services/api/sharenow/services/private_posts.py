"""Posts a user saved to their private list (at most 50 per user)."""

from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert

from sharenow.models import UserPrivatePost
from sharenow.stores.postgres import get_session

MAX_PRIVATE_POSTS_PER_USER = 50


async def list_private_post_ids(user_id: str) -> list[str]:
    """Saved post ids, most recently saved first."""
    async with get_session() as session:
        result = await session.execute(
            select(UserPrivatePost.post_id)
            .where(UserPrivatePost.user_id == user_id)
            .order_by(UserPrivatePost.created_date.desc(), UserPrivatePost.id.desc())
        )
        return list(result.scalars().all())


async def add_private_post(user_id: str, post_id: str, created_by_name: str | None) -> bool:
    """Save a post. Returns False once the user already has the maximum saved."""
    async with get_session() as session:
        # Per-user lock: count and insert must not interleave across requests.
        await session.execute(select(func.pg_advisory_xact_lock(func.hashtext(user_id))))
        saved = await session.scalar(
            select(func.count()).select_from(UserPrivatePost).where(UserPrivatePost.user_id == user_id)
        )
        if (saved or 0) >= MAX_PRIVATE_POSTS_PER_USER:
            return False

        await session.execute(
            insert(UserPrivatePost)
            .values(
                user_id=user_id,
                post_id=post_id,
                created_by_name=created_by_name,
                created_date=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(constraint="uq_user_private_posts_user_post")
        )
        return True


async def delete_private_post(user_id: str, post_id: str) -> bool:
    async with get_session() as session:
        result = await session.execute(
            delete(UserPrivatePost)
            .where(UserPrivatePost.user_id == user_id)
            .where(UserPrivatePost.post_id == post_id)
        )
        return result.rowcount > 0
