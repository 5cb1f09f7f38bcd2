"""Team tag model.

Created when the bot is installed in a team. Carries the Bot Framework
service URL used for membership checks and proactive digests, and the
tags the team filters its discover feed by.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from sharenow.stores.postgres import Base


class TeamTag(Base):
    """Per-team tag configuration."""

    __tablename__ = "team_tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[str] = mapped_column(String(200), unique=True, index=True)

    # Installer (AAD object id) and Bot Framework endpoint for the team
    user_aad_id: Mapped[str | None] = mapped_column(String(100))
    service_url: Mapped[str] = mapped_column(Text)

    tags: Mapped[str] = mapped_column(Text, default="", server_default="")  # ';'-separated

    created_by_name: Mapped[str | None] = mapped_column(String(200))
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<TeamTag {self.team_id} tags={self.tags!r}>"
