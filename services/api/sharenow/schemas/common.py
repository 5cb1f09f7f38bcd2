"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail


def validate_tags(value: str | None, max_count: int, max_length: int = 20) -> str | None:
    """Validate a ';'-separated tag string.

    Empty is allowed. Otherwise at most `max_count` tags, none blank, each at
    most `max_length` characters.
    """
    if not value:
        return value
    tags = value.split(";")
    if len(tags) > max_count:
        raise ValueError(f"Total number of tags has exceeded max count of {max_count}")
    for tag in tags:
        if not tag.strip():
            raise ValueError("Tag cannot be null or empty")
        if len(tag) > max_length:
            raise ValueError(f"Tag length has exceeded max count of {max_length}")
    return value
