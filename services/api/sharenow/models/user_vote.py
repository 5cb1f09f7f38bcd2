"""User vote model.

One upvote per (user, post). The post's total_votes counter is kept in step
with these rows by the vote service.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from sharenow.stores.postgres import Base


class UserVote(Base):
    """Upvote by a user on a post."""

    __tablename__ = "user_votes"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_user_votes_user_post"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(100), index=True)
    post_id: Mapped[str] = mapped_column(String(100), index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<UserVote {self.user_id} -> {self.post_id}>"
