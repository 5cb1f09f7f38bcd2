"""Card builders for the bot, the messaging extension and digests.

Cards are kept deliberately plain: adaptive cards with text and actions,
plus the Teams list card used by digests.
"""

import html
from collections.abc import Iterable
from typing import Any

from botbuilder.core import CardFactory
from botbuilder.schema import Attachment, ThumbnailCard
from botbuilder.schema.teams import MessagingExtensionAttachment

from sharenow.models import Post
from sharenow.services.post_helpers import split_tags
from sharenow.services.post_types import get_post_type

APP_NAME = "Share Now"
ADAPTIVE_CARD_VERSION = "1.2"
LIST_CARD_CONTENT_TYPE = "application/vnd.microsoft.teams.card.list"

PREFERENCES_COMMAND = "PREFERENCES"
HELP_COMMAND = "HELP"

WEEKLY_DIGEST_TITLE = "Weekly digest"
MONTHLY_DIGEST_TITLE = "Monthly digest"


def _adaptive_card(body: list[dict[str, Any]], actions: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
        "type": "AdaptiveCard",
        "version": ADAPTIVE_CARD_VERSION,
        "body": body,
        "actions": actions or [],
    }


def _text(text: str, **extra: Any) -> dict[str, Any]:
    return {"type": "TextBlock", "text": text, "wrap": True, **extra}


def discover_tab_deep_link(manifest_id: str, discover_tab_entity_id: str) -> str:
    return f"https://teams.microsoft.com/l/entity/{manifest_id}/{discover_tab_entity_id}"


def welcome_card_personal(app_base_uri: str, manifest_id: str, discover_tab_entity_id: str) -> Attachment:
    """Welcome card sent once per user when the app is installed personally."""
    card = _adaptive_card(
        body=[
            {"type": "Image", "url": f"{app_base_uri}/Artifacts/appLogo.png", "size": "Medium"},
            _text(f"Welcome to {APP_NAME}!", weight="Bolder", size="Large"),
            _text("Share blogs, podcasts, videos and books with your colleagues, vote on what you liked and discover what your teams are reading."),
        ],
        actions=[
            {
                "type": "Action.OpenUrl",
                "title": "Discover posts",
                "url": discover_tab_deep_link(manifest_id, discover_tab_entity_id),
            }
        ],
    )
    return CardFactory.adaptive_card(card)


def preference_card() -> Attachment:
    """Card with a button opening the digest preference task module."""
    card = _adaptive_card(
        body=[
            _text("Choose the tags your team follows and how often you want a digest of new posts."),
        ],
        actions=[
            {
                "type": "Action.Submit",
                "title": "Configure preferences",
                "data": {"msteams": {"type": "task/fetch"}, "data": {"text": PREFERENCES_COMMAND}},
            }
        ],
    )
    return CardFactory.adaptive_card(card)


def welcome_card_team(app_base_uri: str) -> Attachment:
    """Welcome card posted in the channel when the bot is added to a team."""
    card = _adaptive_card(
        body=[
            {"type": "Image", "url": f"{app_base_uri}/Artifacts/appLogo.png", "size": "Medium"},
            _text(f"{APP_NAME} has been added to your team.", weight="Bolder", size="Large"),
            _text("Set the tags your team cares about and receive a weekly or monthly digest of matching posts in this channel."),
        ],
        actions=[
            {
                "type": "Action.Submit",
                "title": "Configure preferences",
                "data": {"msteams": {"type": "task/fetch"}, "data": {"text": PREFERENCES_COMMAND}},
            }
        ],
    )
    return CardFactory.adaptive_card(card)


def help_card() -> Attachment:
    card = _adaptive_card(
        body=[
            _text(f"{APP_NAME} help", weight="Bolder", size="Medium"),
            _text("Use the Discover tab to browse, filter and vote on posts."),
            _text("Use the messaging extension to search posts and share them in a conversation."),
            _text(f"In a team, send **{PREFERENCES_COMMAND.lower()}** to configure the digest."),
        ]
    )
    return CardFactory.adaptive_card(card)


def digest_list_card(
    posts: Iterable[Post],
    title: str,
    app_base_uri: str,
    manifest_id: str,
    discover_tab_entity_id: str,
) -> Attachment:
    """Teams list card with one item per post and a "View more" deep link."""
    vote_icon = f"<img src='{app_base_uri}/Artifacts/voteIconME.png' alt='vote' width='15' height='16'>"
    items: list[dict[str, Any]] = []
    for post in posts:
        post_type = get_post_type(post.type)
        items.append(
            {
                "type": "resultItem",
                "id": post.post_id,
                "title": post.title,
                "subtitle": f"{post.created_by_name} | {post.total_votes} {vote_icon}",
                "icon": f"{app_base_uri}/Artifacts/{post_type.icon_name}" if post_type else "",
            }
        )

    content = {
        "title": title,
        "items": items,
        "buttons": [
            {
                "type": "openUrl",
                "title": "View more",
                "value": discover_tab_deep_link(manifest_id, discover_tab_entity_id),
            }
        ],
    }
    return Attachment(content_type=LIST_CARD_CONTENT_TYPE, content=content)


def _truncate(text: str, limit: int) -> str:
    return text if len(text) < limit else f"{text[: limit - 1]} ..."


def post_search_result(post: Post) -> MessagingExtensionAttachment:
    """Adaptive card for the conversation plus a thumbnail preview for the result list."""
    post_type = get_post_type(post.type)
    type_name = post_type.name if post_type else ""
    tags = split_tags(post.tags)

    body = [
        _text(post.title, weight="Bolder"),
        _text(post.description, size="Small"),
        _text(f"{post.created_by_name} | {type_name}", isSubtle=True),
    ]
    if tags:
        body.append(_text(" ".join(f"#{tag.strip()}" for tag in tags), size="Small", color="Accent"))

    card = _adaptive_card(
        body=body,
        actions=[{"type": "Action.OpenUrl", "title": "Open item", "url": post.content_url}],
    )
    preview = ThumbnailCard(
        title=f"<p style='font-weight: 600;'>{html.escape(post.title)}</p>",
        text=f"{html.escape(_truncate(post.created_by_name, 25))} | {type_name} | {post.total_votes}",
    )
    return MessagingExtensionAttachment(
        content_type=CardFactory.content_types.adaptive_card,
        content=card,
        preview=CardFactory.thumbnail_card(preview),
    )
