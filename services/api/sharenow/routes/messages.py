"""Bot Framework webhook.

POST /api/messages - Activities from Teams (messages, installs, invokes)
"""

import logging
from functools import lru_cache

from botbuilder.schema import Activity
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from sharenow.bot.adapter import get_adapter
from sharenow.bot.handler import ShareNowActivityHandler
from sharenow.errors import api_error

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@lru_cache
def get_bot() -> ShareNowActivityHandler:
    return ShareNowActivityHandler()


@router.post("/messages")
async def messages(request: Request) -> Response:
    """Authenticate the activity and hand it to the bot.

    Invoke activities (task modules, messaging extension) answer with the
    handler's invoke response; everything else gets an empty 201.
    """
    if "application/json" not in request.headers.get("content-type", ""):
        raise api_error(415, "UNSUPPORTED_MEDIA_TYPE", "Activities must be sent as JSON.")

    body = await request.json()
    activity = Activity().deserialize(body)
    auth_header = request.headers.get("Authorization", "")

    try:
        invoke_response = await get_adapter().process_activity(activity, auth_header, get_bot().on_turn)
    except PermissionError as e:
        logger.warning(f"Rejected bot activity: {e}")
        raise api_error(401, "UNAUTHORIZED", "Bot Framework authentication failed.") from e

    if invoke_response:
        return JSONResponse(content=invoke_response.body, status_code=invoke_response.status)
    return Response(status_code=201)
