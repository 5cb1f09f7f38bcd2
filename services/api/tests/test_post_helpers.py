from datetime import datetime, timezone

from conftest import make_post
from sharenow.services.post_helpers import (
    build_post_filter,
    filter_posts_by_team_tags,
    get_author_names,
    get_tags_query,
    get_unique_tags,
    intersect_tags,
    posts_in_date_range,
    split_tags,
)


def test_split_tags_drops_blank_entries():
    assert split_tags("python;; ;api") == ["python", "api"]
    assert split_tags(None) == []
    assert split_tags("") == []


def test_get_tags_query_joins_with_spaces():
    assert get_tags_query("python;api;") == "python api"


def test_filter_posts_by_team_tags_is_exact_and_case_insensitive():
    posts = [
        make_post("p1", tags="Python"),
        make_post("p2", tags="pythonic"),
        make_post("p3", tags=None),
    ]
    assert [p.post_id for p in filter_posts_by_team_tags(posts, "python")] == ["p1"]
    assert filter_posts_by_team_tags(posts, "") == []


def test_posts_in_date_range_is_inclusive():
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    end = datetime(2026, 1, 8, tzinfo=timezone.utc)
    posts = [
        make_post("edge-start", updated_date=start),
        make_post("inside", updated_date=datetime(2026, 1, 4, tzinfo=timezone.utc)),
        make_post("edge-end", updated_date=end),
        make_post("after", updated_date=datetime(2026, 1, 9, tzinfo=timezone.utc)),
    ]
    assert [p.post_id for p in posts_in_date_range(posts, start, end)] == ["edge-start", "inside", "edge-end"]


def test_get_author_names_groups_by_user_and_sorts():
    posts = [
        make_post("1", user_id="u2", created_by_name="Zed"),
        make_post("2", user_id="u1", created_by_name="Ada"),
        make_post("3", user_id="u2", created_by_name="Zed Renamed"),
    ]
    assert get_author_names(posts) == ["Ada", "Zed"]


def test_get_author_names_keeps_fifty_most_prolific():
    posts = [make_post(f"a{i}", user_id=f"u{i}", created_by_name=f"Author {i:03d}") for i in range(60)]
    posts += [make_post("extra", user_id="u59", created_by_name="Author 059")]
    names = get_author_names(posts)
    assert len(names) == 50
    assert "Author 059" in names


def test_build_post_filter():
    assert build_post_filter(None, None) is None
    assert build_post_filter("", " ; ") is None

    post_filter = build_post_filter("1;x;4", "Ada; Grace")
    assert post_filter.post_types == (1, 4)
    assert post_filter.shared_by_names == ("Ada", "Grace")


def test_unique_tags_star_ranks_by_usage():
    posts = [
        make_post("1", tags="python;api"),
        make_post("2", tags="python;rust"),
        make_post("3", tags=None),
    ]
    assert get_unique_tags(posts, "*") == ["api", "python", "rust"]


def test_unique_tags_contains_is_case_sensitive():
    posts = [make_post("1", tags="python;Pythonic;cpython")]
    assert get_unique_tags(posts, "python") == ["cpython", "python"]


def test_intersect_tags():
    assert intersect_tags("api;rust", "python;api") == "api"
    assert intersect_tags(None, "python;api") == "python;api"
    assert intersect_tags("rust", "python") == ""
