"""Team preference model (digest frequency + tags)."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from sharenow.stores.postgres import Base


class TeamPreference(Base):
    """Digest configuration of a team."""

    __tablename__ = "team_preferences"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[str] = mapped_column(String(200), unique=True, index=True)

    digest_frequency: Mapped[str] = mapped_column(String(20), index=True)  # Weekly | Monthly
    tags: Mapped[str] = mapped_column(Text, default="", server_default="")  # ';'-separated

    updated_by_name: Mapped[str | None] = mapped_column(String(200))
    updated_by_object_id: Mapped[str | None] = mapped_column(String(100))
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<TeamPreference {self.team_id} {self.digest_frequency}>"
