"""In-memory helpers over post search results.

Tags are stored as one ';'-separated string per post or team. These helpers
split, match and aggregate them after a search has narrowed the rows.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from sharenow.models import Post
from sharenow.services.post_search import PostFilter

MAX_AUTHOR_NAMES = 50
MAX_POPULAR_TAGS = 50
MAX_MATCHING_TAGS = 20


def split_tags(tags: str | None) -> list[str]:
    """Split a ';'-separated tag string, dropping blank entries."""
    if not tags:
        return []
    return [tag for tag in tags.split(";") if tag.strip()]


def get_tags_query(tags: str | None) -> str:
    """Turn stored tags into a search query (non-blank tags joined by spaces)."""
    return " ".join(split_tags(tags))


def filter_posts_by_team_tags(posts: Iterable[Post], team_tags: str | None) -> list[Post]:
    """Keep posts sharing at least one tag with the team, case-insensitive."""
    wanted = {tag.strip().casefold() for tag in split_tags(team_tags)}
    if not wanted:
        return []

    filtered: list[Post] = []
    for post in posts:
        post_tags = {tag.strip().casefold() for tag in split_tags(post.tags)}
        if wanted & post_tags:
            filtered.append(post)
    return filtered


def posts_in_date_range(posts: Iterable[Post], start: datetime, end: datetime) -> list[Post]:
    """Posts whose updated_date falls within [start, end]."""
    return [post for post in posts if start <= post.updated_date <= end]


def get_author_names(posts: Iterable[Post]) -> list[str]:
    """Display names of the most prolific authors, sorted alphabetically.

    Authors are grouped by user id (names can change), ranked by post count,
    and the first 50 are kept. Ties keep the order of first appearance.
    """
    counts: Counter[str] = Counter()
    names: dict[str, str] = {}
    for post in posts:
        counts[post.user_id] += 1
        names.setdefault(post.user_id, post.created_by_name)

    top = sorted(counts, key=lambda user_id: counts[user_id], reverse=True)[:MAX_AUTHOR_NAMES]
    return sorted(names[user_id] for user_id in top)


def _split_query_values(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [value.strip() for value in raw.split(";") if value.strip()]


def build_post_filter(post_types: str | None, shared_by_names: str | None) -> PostFilter | None:
    """Build the type/author filter from ';'-separated query params.

    Returns None when neither narrows the search. Non-numeric post types are
    ignored.
    """
    types = tuple(int(t) for t in _split_query_values(post_types) if t.isdigit())
    names = tuple(_split_query_values(shared_by_names))
    if not types and not names:
        return None
    return PostFilter(post_types=types, shared_by_names=names)


def get_unique_tags(posts: Iterable[Post], search_text: str) -> list[str]:
    """Tags to suggest while a team configures its preferences.

    "*" returns the 50 most used tags; anything else returns up to 20 distinct
    tags containing the text (case-sensitive). Both lists are sorted.
    """
    if search_text == "*":
        counts: Counter[str] = Counter()
        for post in posts:
            if post.tags:
                counts.update(post.tags.split(";"))
        ranked = sorted(counts, key=lambda tag: counts[tag], reverse=True)[:MAX_POPULAR_TAGS]
        return sorted(ranked)

    tags: set[str] = set()
    for post in posts:
        if post.tags:
            tags.update(post.tags.split(";"))
    return sorted(tag for tag in tags if search_text in tag)[:MAX_MATCHING_TAGS]


def intersect_tags(selected: str | None, configured: str | None) -> str:
    """Restrict selected tags to the team's configured ones.

    With nothing selected, all configured tags apply. The result is a
    ';'-separated string in the selected order.
    """
    configured_tags = split_tags(configured)
    selected_tags = split_tags(selected)
    if not selected_tags:
        return ";".join(configured_tags)
    allowed = set(configured_tags)
    return ";".join(tag for tag in selected_tags if tag in allowed)
