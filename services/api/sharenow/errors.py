"""Structured API errors.

Every error body has the shape { "error": { "code", "message", "detail" } }.
"""

from typing import Any

from fastapi import HTTPException


def api_error(
    status_code: int,
    code: str,
    message: str,
    detail: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> HTTPException:
    """Build an HTTPException carrying a structured error body."""
    return HTTPException(
        status_code=status_code,
        detail={"error": {"code": code, "message": message, "detail": detail}},
        headers=headers,
    )


def error_body(status_code: int, detail: Any) -> dict[str, Any]:
    """Render an HTTPException detail as a structured error body."""
    if isinstance(detail, dict) and "error" in detail:
        return detail
    return {"error": {"code": f"HTTP_{status_code}", "message": str(detail), "detail": None}}
