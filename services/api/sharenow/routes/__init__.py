"""API routes."""

from fastapi import APIRouter

from sharenow.routes import (
    messages,
    teampost,
    teampreference,
    teamtag,
    userposts,
    userprivatepost,
    uservote,
)

api_router = APIRouter(prefix="/api")

# Tab endpoints (posts, votes, saved posts)
api_router.include_router(userposts.router, prefix="/userposts", tags=["posts"])
api_router.include_router(uservote.router, prefix="/uservote", tags=["votes"])
api_router.include_router(userprivatepost.router, prefix="/userprivatepost", tags=["private posts"])

# Team endpoints (membership required)
api_router.include_router(teampost.router, prefix="/teampost", tags=["team posts"])
api_router.include_router(teamtag.router, prefix="/teamtag", tags=["team tags"])
api_router.include_router(teampreference.router, prefix="/teampreference", tags=["team preferences"])

# Bot Framework webhook
api_router.include_router(messages.router, tags=["bot"])
