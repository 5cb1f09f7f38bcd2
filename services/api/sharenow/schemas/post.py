"""Schemas for posts, votes and saved posts."""

from datetime import datetime
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from sharenow.schemas.common import validate_tags

POST_TAGS_MAX_COUNT = 3


class PostFields(BaseModel):
    """Editable fields of a post."""

    type: int = Field(ge=1, le=5, description="1 blog post, 2 other, 3 podcast, 4 video, 5 book")
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=150, max_length=300)
    content_url: str = Field(alias="contentUrl", min_length=1, max_length=400)
    tags: str | None = Field(default=None, description="';'-separated, at most 3 tags")

    model_config = {"populate_by_name": True}

    @field_validator("content_url")
    @classmethod
    def _validate_content_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("contentUrl must be an absolute http(s) URL")
        return v

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v: str | None) -> str | None:
        return validate_tags(v, max_count=POST_TAGS_MAX_COUNT)


class PostCreate(PostFields):
    """Body of POST /api/userposts."""


class PostUpdate(PostFields):
    """Body of PATCH /api/userposts."""

    post_id: str = Field(alias="postId", default="")
    user_id: str = Field(alias="userId", default="")


class PostResponse(BaseModel):
    """A post as returned to clients."""

    post_id: str = Field(alias="postId")
    user_id: str = Field(alias="userId")
    type: int
    title: str
    description: str
    content_url: str = Field(alias="contentUrl")
    tags: str | None = None
    created_date: datetime = Field(alias="createdDate")
    created_by_name: str = Field(alias="createdByName")
    updated_date: datetime = Field(alias="updatedDate")
    total_votes: int = Field(alias="totalVotes", ge=0)
    is_removed: bool = Field(alias="isRemoved", default=False)

    model_config = {"populate_by_name": True, "from_attributes": True}


class UserVoteResponse(BaseModel):
    user_id: str = Field(alias="userId")
    post_id: str = Field(alias="postId")

    model_config = {"populate_by_name": True, "from_attributes": True}


class PrivatePostCreate(BaseModel):
    """Body of POST /api/userprivatepost."""

    post_id: str = Field(alias="postId", min_length=1)

    model_config = {"populate_by_name": True}
