"""Post model.

A content link (blog post, podcast, video, book...) shared by a user.
Posts are soft deleted: removed rows stay in the table with is_removed set.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, SmallInteger, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from sharenow.stores.postgres import Base


def generate_post_id() -> str:
    """Generate unique post ID."""
    return str(uuid4())


class Post(Base):
    """A shared content link."""

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("total_votes >= 0", name="ck_posts_total_votes_non_negative"),
        CheckConstraint("type BETWEEN 1 AND 5", name="ck_posts_type_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # Public post ID (used by clients)
    post_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        default=generate_post_id,
    )

    # Author (AAD object id)
    user_id: Mapped[str] = mapped_column(String(100), index=True)

    # Content
    type: Mapped[int] = mapped_column(SmallInteger)
    title: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(300))
    content_url: Mapped[str] = mapped_column(String(400))
    tags: Mapped[str | None] = mapped_column(Text)  # ';'-separated

    # Audit
    created_by_name: Mapped[str] = mapped_column(String(200))
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    total_votes: Mapped[int] = mapped_column(default=0, server_default="0", index=True)
    is_removed: Mapped[bool] = mapped_column(default=False, server_default="false", index=True)

    def __repr__(self) -> str:
        return f"<Post {self.post_id} votes={self.total_votes}>"
