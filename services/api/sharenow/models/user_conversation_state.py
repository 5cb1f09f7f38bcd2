"""Per-user bot state (welcome card already sent in personal scope)."""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from sharenow.stores.postgres import Base


class UserConversationState(Base):
    """Bot state keyed by the Teams user id of the personal conversation."""

    __tablename__ = "user_conversation_states"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    welcome_card_sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
