"""Pydantic schemas for API request/response validation."""

from sharenow.schemas.common import ErrorDetail, ErrorResponse
from sharenow.schemas.post import (
    PostCreate,
    PostResponse,
    PostUpdate,
    PrivatePostCreate,
    UserVoteResponse,
)
from sharenow.schemas.team import (
    TaskModuleSubmit,
    TeamPreferenceDetails,
    TeamPreferenceResponse,
    TeamTagResponse,
    TeamTagUpdate,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "PrivatePostCreate",
    "UserVoteResponse",
    "TaskModuleSubmit",
    "TeamPreferenceDetails",
    "TeamPreferenceResponse",
    "TeamTagResponse",
    "TeamTagUpdate",
]
