"""Post search over PostgreSQL.

Every read of posts goes through search_posts(). A scope decides which
column the free-text query is matched against, the ordering and the page
size. Soft-deleted posts are never returned.

Free-text matching:
- None, "" or "*" match everything
- otherwise whitespace-separated terms are OR-ed, each a case-insensitive
  substring match on the scope's search column
"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Select, false, func, or_, select

from sharenow.models import Post
from sharenow.stores.postgres import get_session

DEFAULT_SEARCH_RESULT_COUNT = 1500
TEAM_PREFERENCE_TAGS_COUNT = 5000
DATE_RANGE_RESULT_COUNT = 200
SORT_BY_POPULAR = 1


class PostSearchScope(Enum):
    """What a search is for. Drives column, ordering and page size."""

    ALL_ITEMS = "allItems"
    POSTED_BY_ME = "postedByMe"
    POPULAR = "popular"
    TEAM_PREFERENCE_TAGS = "teamPreferenceTags"
    FILTER_AS_PER_TEAM_TAGS = "filterAsPerTeamTags"
    FILTER_POSTS_AS_PER_DATE_RANGE = "filterPostsAsPerDateRange"
    UNIQUE_USER_NAMES = "uniqueUserNames"
    SEARCH_TEAM_POSTS_FOR_TITLE_TEXT = "searchTeamPostsForTitleText"
    FILTER_TEAM_POSTS = "filterTeamPosts"


_TAG_SEARCH_SCOPES = {
    PostSearchScope.TEAM_PREFERENCE_TAGS,
    PostSearchScope.FILTER_AS_PER_TEAM_TAGS,
    PostSearchScope.FILTER_TEAM_POSTS,
}


@dataclass(frozen=True)
class PostFilter:
    """Structured narrowing applied on top of the free-text query.

    Groups are AND-ed together; values inside a group are OR-ed.
    """

    post_types: tuple[int, ...] = ()
    shared_by_names: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    post_ids: tuple[str, ...] = ()


def search_terms(search_query: str | None) -> list[str]:
    """Split a free-text query into match terms ([] means match everything)."""
    if not search_query:
        return []
    terms = [term.strip("*") for term in search_query.split()]
    return [term for term in terms if term]


def _tag_match(tag: str):
    # ';tag1;tag2;' LIKE '%;tag;%'
    wrapped = func.concat(";", func.lower(func.coalesce(Post.tags, "")), ";")
    return wrapped.contains(f";{tag.strip().lower()};", autoescape=True)


def build_search_statement(
    scope: PostSearchScope,
    search_query: str | None,
    user_object_id: str | None = None,
    count: int | None = None,
    skip: int | None = None,
    sort_by: int | None = None,
    post_filter: PostFilter | None = None,
) -> Select:
    """Build the SELECT for a scoped post search."""
    stmt = select(Post).where(Post.is_removed.is_(False))
    limit = count if count is not None else DEFAULT_SEARCH_RESULT_COUNT

    search_column = Post.tags if scope in _TAG_SEARCH_SCOPES else Post.title
    terms = search_terms(search_query)
    if terms:
        stmt = stmt.where(or_(*(search_column.icontains(term, autoescape=True) for term in terms)))

    if post_filter is not None:
        if post_filter.post_types:
            stmt = stmt.where(Post.type.in_(post_filter.post_types))
        if post_filter.shared_by_names:
            stmt = stmt.where(Post.created_by_name.in_(post_filter.shared_by_names))
        if post_filter.tags:
            stmt = stmt.where(or_(*(_tag_match(tag) for tag in post_filter.tags)))
        if post_filter.post_ids:
            stmt = stmt.where(Post.post_id.in_(post_filter.post_ids))

    if scope is PostSearchScope.POSTED_BY_ME:
        if user_object_id:
            stmt = stmt.where(Post.user_id == user_object_id)
        else:
            stmt = stmt.where(false())

    if scope is PostSearchScope.POPULAR:
        stmt = stmt.order_by(Post.total_votes.desc(), Post.updated_date.desc())
    elif scope is PostSearchScope.TEAM_PREFERENCE_TAGS:
        limit = count if count is not None else TEAM_PREFERENCE_TAGS_COUNT
    elif scope is PostSearchScope.FILTER_POSTS_AS_PER_DATE_RANGE:
        stmt = stmt.order_by(Post.updated_date.desc())
        limit = count if count is not None else DATE_RANGE_RESULT_COUNT
    elif scope is PostSearchScope.FILTER_TEAM_POSTS:
        if sort_by == SORT_BY_POPULAR:
            stmt = stmt.order_by(Post.total_votes.desc(), Post.updated_date.desc())
        elif sort_by is not None:
            stmt = stmt.order_by(Post.updated_date.desc())
    else:
        stmt = stmt.order_by(Post.updated_date.desc())

    # Stable paging when the primary ordering ties
    stmt = stmt.order_by(Post.id.desc())
    return stmt.offset(skip or 0).limit(limit)


async def search_posts(
    scope: PostSearchScope,
    search_query: str | None,
    user_object_id: str | None = None,
    count: int | None = None,
    skip: int | None = None,
    sort_by: int | None = None,
    post_filter: PostFilter | None = None,
) -> list[Post]:
    """Run a scoped post search.

    Args:
        scope: Search scope (column, ordering, default page size).
        search_query: Free-text query; None/""/"*" match everything.
        user_object_id: Caller's AAD object id (POSTED_BY_ME only).
        count: Page size; defaults per scope.
        skip: Rows to skip.
        sort_by: FILTER_TEAM_POSTS ordering (1 = most votes, else newest).
        post_filter: Extra structured narrowing.

    Returns:
        Matching posts, never soft-deleted ones.
    """
    stmt = build_search_statement(
        scope,
        search_query,
        user_object_id=user_object_id,
        count=count,
        skip=skip,
        sort_by=sort_by,
        post_filter=post_filter,
    )
    async with get_session() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())
