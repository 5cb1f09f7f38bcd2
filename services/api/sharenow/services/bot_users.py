"""Bot state per Teams user."""

from sqlalchemy.dialects.postgresql import insert

from sharenow.models import UserConversationState
from sharenow.stores.postgres import get_session


async def mark_welcome_card_sent(user_id: str) -> bool:
    """Record that the user got the welcome card. True only the first time."""
    async with get_session() as session:
        result = await session.execute(
            insert(UserConversationState)
            .values(user_id=user_id)
            .on_conflict_do_nothing(index_elements=[UserConversationState.user_id])
            .returning(UserConversationState.id)
        )
        return result.first() is not None
