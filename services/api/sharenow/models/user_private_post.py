"""Posts a user saved to their private list."""

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from sharenow.stores.postgres import Base


class UserPrivatePost(Base):
    """Saved post of a user."""

    __tablename__ = "user_private_posts"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_user_private_posts_user_post"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(100), index=True)
    post_id: Mapped[str] = mapped_column(String(100))
    created_by_name: Mapped[str | None] = mapped_column(String(200))
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserPrivatePost {self.user_id} -> {self.post_id}>"
