"""Bearer token authentication for the REST API.

Tabs call the API with an Azure AD token obtained through Teams SSO. The
token is verified against the tenant's signing keys; the caller is the
token's object id (`oid`) and display name (`name`).
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache

import jwt
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sharenow.errors import api_error
from sharenow.services.team_membership import is_team_member
from sharenow.settings import get_settings

logger = logging.getLogger("uvicorn.error")

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    aad_object_id: str
    name: str


class TokenValidationError(Exception):
    """Raised when a bearer token is missing, malformed or not trusted."""


@lru_cache
def _jwks_client() -> jwt.PyJWKClient:
    return jwt.PyJWKClient(get_settings().azure_ad_jwks_url, cache_keys=True)


def decode_token(token: str) -> dict:
    """Verify signature, audience, expiry and issuer. Returns the claims."""
    settings = get_settings()
    audiences = [a for a in (settings.azure_ad_client_id, settings.azure_ad_application_id_uri) if a]
    try:
        signing_key = _jwks_client().get_signing_key_from_jwt(token)
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=audiences or None,
            options={"require": ["exp", "oid"]},
        )
    except jwt.PyJWTError as e:
        raise TokenValidationError(str(e)) from e

    valid_issuers = settings.azure_ad_valid_issuers
    if valid_issuers:
        issuer = str(claims.get("iss", ""))
        if not any(issuer.startswith(prefix) for prefix in valid_issuers):
            raise TokenValidationError(f"Untrusted issuer: {issuer}")
    return claims


def _unauthorized(message: str):
    return api_error(401, "UNAUTHORIZED", message, headers={"WWW-Authenticate": "Bearer"})


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> CurrentUser:
    """Resolve the calling user from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Missing bearer token")

    try:
        # Key lookup may hit the network; keep it off the event loop.
        claims = await asyncio.to_thread(decode_token, credentials.credentials)
    except TokenValidationError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise _unauthorized("Invalid bearer token") from e

    return CurrentUser(aad_object_id=str(claims["oid"]), name=str(claims.get("name", "")))


async def ensure_team_member(team_id: str | None, user: CurrentUser) -> None:
    """Raise unless the user belongs to the team."""
    if not team_id:
        raise api_error(400, "TEAM_ID_REQUIRED", "TeamId is either null or empty.")
    if not await is_team_member(team_id, user.aad_object_id):
        logger.warning(f"User {user.aad_object_id} is not a member of team {team_id}")
        raise api_error(403, "NOT_TEAM_MEMBER", "User is not a member of the team.")


async def require_team_member(
    team_id: str = Query(default="", alias="teamId"),
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Allow the request only for members of the team in ?teamId."""
    await ensure_team_member(team_id, user)
    return user
