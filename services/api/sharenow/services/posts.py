"""Post storage: create, edit and soft delete.

Reads go through post_search; this module only writes.
"""

from datetime import datetime, timezone

from sqlalchemy import select

from sharenow.models import Post
from sharenow.stores.postgres import get_session


async def create_post(
    *,
    user_id: str,
    created_by_name: str,
    post_type: int,
    title: str,
    description: str,
    content_url: str,
    tags: str | None,
) -> Post:
    """Store a new post with zero votes and a server generated id."""
    now = datetime.now(timezone.utc)
    post = Post(
        user_id=user_id,
        created_by_name=created_by_name,
        type=post_type,
        title=title,
        description=description,
        content_url=content_url,
        tags=tags,
        total_votes=0,
        is_removed=False,
        created_date=now,
        updated_date=now,
    )
    async with get_session() as session:
        session.add(post)
        await session.flush()
        await session.refresh(post)
    return post


async def update_post(
    *,
    user_id: str,
    post_id: str,
    post_type: int,
    title: str,
    description: str,
    content_url: str,
    tags: str | None,
) -> Post | None:
    """Edit the caller's post. Returns None if it does not exist or was removed."""
    async with get_session() as session:
        result = await session.execute(
            select(Post)
            .where(Post.user_id == user_id)
            .where(Post.post_id == post_id)
            .with_for_update()
        )
        post = result.scalar_one_or_none()
        if post is None or post.is_removed:
            return None

        post.type = post_type
        post.title = title
        post.description = description
        post.content_url = content_url
        post.tags = tags
        post.updated_date = datetime.now(timezone.utc)
        return post


async def remove_post(user_id: str, post_id: str) -> bool:
    """Soft delete the caller's post. Returns False if no such post."""
    async with get_session() as session:
        result = await session.execute(
            select(Post)
            .where(Post.user_id == user_id)
            .where(Post.post_id == post_id)
            .with_for_update()
        )
        post = result.scalar_one_or_none()
        if post is None:
            return False
        post.is_removed = True
        return True
