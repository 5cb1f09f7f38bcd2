"""Scoped post search statements, compiled for PostgreSQL."""

import re

from sqlalchemy.dialects import postgresql

from sharenow.services.post_search import (
    PostFilter,
    PostSearchScope,
    build_search_statement,
    search_terms,
)


# icontains renders as lower(col) LIKE or col ILIKE depending on the SQLAlchemy release.
def _case_insensitive_match(column: str) -> re.Pattern:
    return re.compile(rf"(lower\({re.escape(column)}\) LIKE|{re.escape(column)} ILIKE)")


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


def test_search_terms():
    assert search_terms(None) == []
    assert search_terms("*") == []
    assert search_terms("  asyncio  python* ") == ["asyncio", "python"]


def test_removed_posts_are_never_returned():
    sql = _sql(build_search_statement(PostSearchScope.ALL_ITEMS, None))
    assert "posts.is_removed IS false" in sql
    assert "LIMIT 1500" in sql


def test_title_scope_matches_title_terms():
    sql = _sql(build_search_statement(PostSearchScope.SEARCH_TEAM_POSTS_FOR_TITLE_TEXT, "asyncio tips"))
    assert _case_insensitive_match("posts.title").search(sql)
    assert "asyncio" in sql and "tips" in sql
    assert " OR " in sql


def test_tag_scopes_match_tags_column():
    sql = _sql(build_search_statement(PostSearchScope.FILTER_AS_PER_TEAM_TAGS, "python"))
    assert _case_insensitive_match("posts.tags").search(sql)
    assert not _case_insensitive_match("posts.title").search(sql)


def test_popular_orders_by_votes():
    sql = _sql(build_search_statement(PostSearchScope.POPULAR, None, count=10, skip=20))
    assert "ORDER BY posts.total_votes DESC, posts.updated_date DESC" in sql
    assert "LIMIT 10" in sql
    assert "OFFSET 20" in sql


def test_posted_by_me_without_user_matches_nothing():
    sql = _sql(build_search_statement(PostSearchScope.POSTED_BY_ME, None))
    where = sql.split("WHERE", 1)[1].split("ORDER BY", 1)[0]
    assert where.strip().endswith("false")
    assert "posts.user_id" not in where

    sql = _sql(build_search_statement(PostSearchScope.POSTED_BY_ME, None, user_object_id="user-1"))
    assert "posts.user_id = 'user-1'" in sql


def test_scope_default_page_sizes():
    assert "LIMIT 5000" in _sql(build_search_statement(PostSearchScope.TEAM_PREFERENCE_TAGS, "py"))
    assert "LIMIT 200" in _sql(build_search_statement(PostSearchScope.FILTER_POSTS_AS_PER_DATE_RANGE, None))


def test_filter_team_posts_sort_by():
    popular = _sql(build_search_statement(PostSearchScope.FILTER_TEAM_POSTS, None, sort_by=1))
    newest = _sql(build_search_statement(PostSearchScope.FILTER_TEAM_POSTS, None, sort_by=0))
    assert "ORDER BY posts.total_votes DESC" in popular
    assert "ORDER BY posts.updated_date DESC" in newest


def test_post_filter_narrows_by_type_author_and_id():
    sql = _sql(
        build_search_statement(
            PostSearchScope.SEARCH_TEAM_POSTS_FOR_TITLE_TEXT,
            "*",
            post_filter=PostFilter(post_types=(1, 3), shared_by_names=("Ada",), post_ids=("p1",), tags=("api",)),
        )
    )
    assert "posts.type IN (1, 3)" in sql
    assert "posts.created_by_name IN ('Ada')" in sql
    assert "posts.post_id IN ('p1')" in sql
    assert "concat(';', lower(coalesce(posts.tags, '')), ';')" in sql
