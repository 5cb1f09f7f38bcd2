"""Teams activity handler for the Share Now bot.

Handles:
- Install/uninstall in personal and team scope
- HELP and PREFERENCES commands
- The configure-preferences task module
- Messaging extension search
"""

import logging

from botbuilder.core import MessageFactory, TurnContext
from botbuilder.core.teams import TeamsActivityHandler, teams_get_team_info
from botbuilder.schema import ChannelAccount
from botbuilder.schema.teams import (
    MessagingExtensionQuery,
    MessagingExtensionResponse,
    MessagingExtensionResult,
    TaskModuleContinueResponse,
    TaskModuleRequest,
    TaskModuleResponse,
    TaskModuleTaskInfo,
    TeamInfo,
    TeamsChannelAccount,
)
from pydantic import ValidationError

from sharenow.bot.cards import (
    APP_NAME,
    HELP_COMMAND,
    PREFERENCES_COMMAND,
    help_card,
    post_search_result,
    preference_card,
    welcome_card_personal,
    welcome_card_team,
)
from sharenow.schemas import TaskModuleSubmit
from sharenow.services.bot_users import mark_welcome_card_sent
from sharenow.services.post_search import PostSearchScope, search_posts
from sharenow.services.teams import (
    delete_team_preference,
    delete_team_tag,
    upsert_team_preference,
    upsert_team_tag_on_install,
)
from sharenow.settings import get_settings

logger = logging.getLogger("uvicorn.error")

PERSONAL_CONVERSATION_TYPE = "personal"
CHANNEL_CONVERSATION_TYPE = "channel"

TASK_MODULE_HEIGHT = 460
TASK_MODULE_WIDTH = 600

MESSAGING_EXTENSION_COMMANDS = {
    "allItems": PostSearchScope.ALL_ITEMS,
    "postedByMe": PostSearchScope.POSTED_BY_ME,
    "popularReads": PostSearchScope.POPULAR,
}
SEARCH_TEXT_PARAMETER = "searchText"
INITIAL_RUN_PARAMETER = "initialRun"
MESSAGING_EXTENSION_PAGE_SIZE = 25


def _task_module(path: str) -> TaskModuleResponse:
    settings = get_settings()
    return TaskModuleResponse(
        task=TaskModuleContinueResponse(
            value=TaskModuleTaskInfo(
                url=f"{settings.app_base_uri}/{path}",
                height=TASK_MODULE_HEIGHT,
                width=TASK_MODULE_WIDTH,
                title=APP_NAME,
            )
        )
    )


def _command_text(turn_context: TurnContext) -> str:
    text = TurnContext.remove_recipient_mention(turn_context.activity) or ""
    return text.strip().upper()


class ShareNowActivityHandler(TeamsActivityHandler):
    """Bot entry point for every activity received on /api/messages."""

    # --------------------------------------------------------
    # Install / uninstall
    # --------------------------------------------------------

    async def on_members_added_activity(
        self, members_added: list[ChannelAccount], turn_context: TurnContext
    ) -> None:
        # Personal scope only; team installs arrive via on_teams_members_added.
        activity = turn_context.activity
        if activity.conversation.conversation_type != PERSONAL_CONVERSATION_TYPE:
            return
        if not any(m.id == activity.recipient.id for m in members_added):
            return

        user = activity.from_property
        logger.info(f"Bot added in personal scope for user {user.aad_object_id}.")
        if not await mark_welcome_card_sent(user.id):
            return
        settings = get_settings()
        card = welcome_card_personal(
            settings.app_base_uri, settings.manifest_id, settings.discover_tab_entity_id
        )
        await turn_context.send_activity(MessageFactory.attachment(card))

    async def on_teams_members_added(
        self,
        teams_members_added: list[TeamsChannelAccount],
        team_info: TeamInfo,
        turn_context: TurnContext,
    ) -> None:
        activity = turn_context.activity
        if activity.conversation.conversation_type != CHANNEL_CONVERSATION_TYPE:
            await self.on_members_added_activity(teams_members_added, turn_context)
            return
        if not any(m.id == activity.recipient.id for m in teams_members_added):
            return

        team_id = team_info.id if team_info else activity.conversation.id
        logger.info(f"Bot added in team {team_id}.")
        await turn_context.send_activity(
            MessageFactory.attachment(welcome_card_team(get_settings().app_base_uri))
        )
        await upsert_team_tag_on_install(
            team_id=team_id,
            service_url=activity.service_url,
            user_aad_id=activity.from_property.aad_object_id,
            created_by_name=activity.from_property.name,
        )

    async def on_teams_members_removed(
        self,
        teams_members_removed: list[TeamsChannelAccount],
        team_info: TeamInfo,
        turn_context: TurnContext,
    ) -> None:
        activity = turn_context.activity
        if activity.conversation.conversation_type != CHANNEL_CONVERSATION_TYPE:
            return
        if not any(m.id == activity.recipient.id for m in teams_members_removed):
            return

        team_id = team_info.id if team_info else activity.conversation.id
        logger.info(f"Bot removed from team {team_id}.")
        await delete_team_tag(team_id)
        await delete_team_preference(team_id)

    # --------------------------------------------------------
    # Messages
    # --------------------------------------------------------

    async def on_message_activity(self, turn_context: TurnContext) -> None:
        command = _command_text(turn_context)
        if command == HELP_COMMAND:
            await turn_context.send_activity(MessageFactory.attachment(help_card()))
        elif command == PREFERENCES_COMMAND:
            await turn_context.send_activity(MessageFactory.attachment(preference_card()))
        else:
            logger.info(f"Unrecognized command: {command!r}")

    # --------------------------------------------------------
    # Task module
    # --------------------------------------------------------

    async def on_teams_task_module_fetch(
        self, turn_context: TurnContext, task_module_request: TaskModuleRequest
    ) -> TaskModuleResponse | None:
        data = task_module_request.data or {}
        inner = data.get("data") if isinstance(data, dict) else None
        command = str((inner or {}).get("text", "")).strip().upper()
        if command == PREFERENCES_COMMAND:
            return _task_module("configurepreferences")

        logger.info(f"No task module for command {command!r}")
        return None

    async def on_teams_task_module_submit(
        self, turn_context: TurnContext, task_module_request: TaskModuleRequest
    ) -> TaskModuleResponse | None:
        activity = turn_context.activity
        try:
            submit = TaskModuleSubmit.model_validate(task_module_request.data or {})
        except ValidationError as e:
            logger.error(f"Invalid task module submit data: {e}")
            return _task_module("error")

        command = (submit.command or "").strip().lower()
        if command == "close":
            return None
        if command != "submit":
            logger.info(f"Unknown task module submit command {submit.command!r}")
            return None

        details = submit.configure_details
        if details is None:
            logger.error("Task module submit has no preference details.")
            return _task_module("error")

        team_info = teams_get_team_info(activity)
        team_id = team_info.id if team_info and team_info.id else details.team_id
        try:
            await upsert_team_preference(
                team_id=team_id,
                digest_frequency=details.digest_frequency,
                tags=details.tags,
                updated_by_name=activity.from_property.name,
                updated_by_object_id=activity.from_property.aad_object_id,
            )
        except Exception:
            logger.exception(f"Failed to save preference for team {team_id}")
            return _task_module("error")
        return None

    # --------------------------------------------------------
    # Messaging extension
    # --------------------------------------------------------

    async def on_teams_messaging_extension_query(
        self, turn_context: TurnContext, query: MessagingExtensionQuery
    ) -> MessagingExtensionResponse:
        scope = MESSAGING_EXTENSION_COMMANDS.get(query.command_id)
        if scope is None:
            logger.info(f"Unknown messaging extension command {query.command_id!r}")
            return _search_results([])

        search_text = None
        for parameter in query.parameters or []:
            if parameter.name == SEARCH_TEXT_PARAMETER:
                search_text = str(parameter.value or "")
            elif parameter.name == INITIAL_RUN_PARAMETER:
                search_text = None

        options = query.query_options
        count = options.count if options and options.count else MESSAGING_EXTENSION_PAGE_SIZE
        skip = options.skip if options and options.skip else 0

        posts = await search_posts(
            scope,
            search_query=search_text,
            user_object_id=turn_context.activity.from_property.aad_object_id,
            count=count,
            skip=skip,
        )
        return _search_results([post_search_result(p) for p in posts])


def _search_results(attachments: list) -> MessagingExtensionResponse:
    return MessagingExtensionResponse(
        compose_extension=MessagingExtensionResult(
            type="result",
            attachment_layout="list",
            attachments=attachments,
        )
    )
