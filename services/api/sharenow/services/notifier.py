"""Proactive delivery of cards to team channels.

The bot can post into a channel without an incoming activity by continuing a
conversation whose reference points at the team's general channel (the team
id doubles as that channel's conversation id).
"""

import logging

from botbuilder.core import BotFrameworkAdapter, MessageFactory, TurnContext
from botbuilder.schema import (
    Attachment,
    ChannelAccount,
    ConversationAccount,
    ConversationReference,
)
from botframework.connector.auth import MicrosoftAppCredentials
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from sharenow.bot.adapter import TEAMS_CHANNEL_ID, get_adapter
from sharenow.settings import get_settings

logger = logging.getLogger("uvicorn.error")

MAX_RETRY_DELAY_SECONDS = 30


def build_channel_reference(
    *,
    team_id: str,
    service_url: str,
    app_id: str,
    tenant_id: str,
) -> ConversationReference:
    """Conversation reference addressing the general channel of a team."""
    return ConversationReference(
        channel_id=TEAMS_CHANNEL_ID,
        bot=ChannelAccount(id=f"28:{app_id}"),
        service_url=service_url,
        conversation=ConversationAccount(
            conversation_type="channel",
            is_group=True,
            id=team_id,
            tenant_id=tenant_id,
        ),
    )


class TeamsNotifier:
    """Sends cards to team channels with retry."""

    def __init__(
        self,
        adapter: BotFrameworkAdapter,
        app_id: str,
        tenant_id: str,
        retry_count: int = 2,
        median_first_retry_delay_ms: int = 1000,
    ):
        self._adapter = adapter
        self._app_id = app_id
        self._tenant_id = tenant_id
        self._retry_count = retry_count
        self._first_delay = median_first_retry_delay_ms / 1000

    @classmethod
    def from_settings(cls) -> "TeamsNotifier":
        settings = get_settings()
        return cls(
            adapter=get_adapter(),
            app_id=settings.microsoft_app_id,
            tenant_id=settings.tenant_id,
            retry_count=settings.retry_count,
            median_first_retry_delay_ms=settings.median_first_retry_delay_ms,
        )

    async def send_card_to_team(self, team_id: str, service_url: str, attachment: Attachment) -> None:
        """Post a card in the team's general channel.

        Raises the last error once retries are exhausted.
        """
        MicrosoftAppCredentials.trust_service_url(service_url)
        reference = build_channel_reference(
            team_id=team_id,
            service_url=service_url,
            app_id=self._app_id,
            tenant_id=self._tenant_id,
        )

        async def _send(turn_context: TurnContext) -> None:
            await turn_context.send_activity(MessageFactory.attachment(attachment))

        logger.info(f"Sending notification to team {team_id}")
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._retry_count + 1),
            wait=wait_exponential_jitter(
                initial=self._first_delay,
                max=MAX_RETRY_DELAY_SECONDS,
                jitter=self._first_delay,
            ),
            retry=retry_if_exception_type(Exception),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await self._adapter.continue_conversation(reference, _send, bot_id=self._app_id)
