"""Bot Framework adapter shared by the messages webhook, membership checks and digests."""

import logging
from functools import lru_cache

from botbuilder.core import BotFrameworkAdapter, BotFrameworkAdapterSettings, TurnContext
from botbuilder.schema import ActivityTypes

from sharenow.settings import get_settings

logger = logging.getLogger("uvicorn.error")

TEAMS_CHANNEL_ID = "msteams"


async def on_turn_error(turn_context: TurnContext, error: Exception) -> None:
    """Log unhandled bot errors and tell the user something went wrong."""
    logger.error(f"Unhandled bot error: {error}", exc_info=error)
    if turn_context.activity.type == ActivityTypes.message:
        await turn_context.send_activity("Sorry, something went wrong. Please try again.")


@lru_cache
def get_adapter() -> BotFrameworkAdapter:
    """Get cached adapter instance configured from settings."""
    settings = get_settings()
    adapter = BotFrameworkAdapter(
        BotFrameworkAdapterSettings(
            app_id=settings.microsoft_app_id,
            app_password=settings.microsoft_app_password,
            channel_auth_tenant=settings.tenant_id or None,
        )
    )
    adapter.on_turn_error = on_turn_error
    return adapter
