"""Cached lists derived from posts: author names and tag suggestions.

Lists are cached in Redis for a few minutes and dropped whenever a post is
written. Without Redis they are computed on every call.
"""

from sharenow.services.post_helpers import get_author_names, get_tags_query, get_unique_tags
from sharenow.services.post_search import PostSearchScope, search_posts
from sharenow.stores.redis import (
    get_author_names_cache,
    get_unique_tags_cache,
    invalidate_post_list_caches,
    set_author_names_cache,
    set_unique_tags_cache,
)


async def _try_get_author_names(key: str) -> list[str] | None:
    try:
        return await get_author_names_cache(key)
    except RuntimeError:
        return None


async def _try_set_author_names(key: str, names: list[str]) -> None:
    try:
        await set_author_names_cache(key, names)
    except RuntimeError:
        # Redis may be unavailable in tests/local minimal env.
        return


async def all_author_names() -> list[str]:
    cached = await _try_get_author_names("all")
    if cached is not None:
        return cached

    posts = await search_posts(PostSearchScope.UNIQUE_USER_NAMES, search_query=None)
    names = get_author_names(posts)
    await _try_set_author_names("all", names)
    return names


async def team_author_names(team_id: str, team_tags: str) -> list[str]:
    """Authors of posts carrying the team's tags."""
    key = f"team:{team_id}:{team_tags}"
    cached = await _try_get_author_names(key)
    if cached is not None:
        return cached

    posts = await search_posts(PostSearchScope.FILTER_AS_PER_TEAM_TAGS, get_tags_query(team_tags))
    names = get_author_names(posts)
    await _try_set_author_names(key, names)
    return names


async def unique_tags(search_text: str) -> list[str]:
    """Tag suggestions for the preference dialog."""
    try:
        cached = await get_unique_tags_cache(search_text)
    except RuntimeError:
        cached = None
    if cached is not None:
        return cached

    posts = await search_posts(PostSearchScope.TEAM_PREFERENCE_TAGS, search_text)
    tags = get_unique_tags(posts, search_text)
    try:
        await set_unique_tags_cache(search_text, tags)
    except RuntimeError:
        pass
    return tags


async def invalidate_post_lists() -> None:
    try:
        await invalidate_post_list_caches()
    except RuntimeError:
        return
