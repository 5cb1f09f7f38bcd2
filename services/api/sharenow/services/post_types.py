"""Post types shown on cards and in filters."""

from dataclasses import dataclass
from enum import IntEnum


class PostTypeId(IntEnum):
    """Stored value of Post.type."""

    BLOG_POST = 1
    OTHER = 2
    PODCAST = 3
    VIDEO = 4
    BOOK = 5


@dataclass(frozen=True)
class PostType:
    post_type_id: int
    name: str
    icon_name: str


POST_TYPES: dict[int, PostType] = {
    PostTypeId.BLOG_POST: PostType(PostTypeId.BLOG_POST, "Blog post", "blogTypeDot.png"),
    PostTypeId.OTHER: PostType(PostTypeId.OTHER, "Other", "otherTypeDot.png"),
    PostTypeId.PODCAST: PostType(PostTypeId.PODCAST, "Podcast", "podcastTypeDot.png"),
    PostTypeId.VIDEO: PostType(PostTypeId.VIDEO, "Video", "videoTypeDot.png"),
    PostTypeId.BOOK: PostType(PostTypeId.BOOK, "Book", "bookTypeDot.png"),
}


def get_post_type(key: int) -> PostType | None:
    """Look up display info for a stored type value; None for unknown values."""
    return POST_TYPES.get(key)
