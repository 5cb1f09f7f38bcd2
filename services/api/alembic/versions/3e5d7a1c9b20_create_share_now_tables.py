"""create_share_now_tables

Revision ID: 3e5d7a1c9b20
Revises:
Create Date: 2026-10-17
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e5d7a1c9b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.String(length=100), nullable=False),
        sa.Column("user_id", sa.String(length=100), nullable=False),
        sa.Column("type", sa.SmallInteger(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=300), nullable=False),
        sa.Column("content_url", sa.String(length=400), nullable=False),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("created_by_name", sa.String(length=200), nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("total_votes", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_removed", sa.Boolean(), server_default="false", nullable=False),
        sa.CheckConstraint("total_votes >= 0", name="ck_posts_total_votes_non_negative"),
        sa.CheckConstraint("type BETWEEN 1 AND 5", name="ck_posts_type_range"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_posts_post_id"), "posts", ["post_id"], unique=True)
    op.create_index(op.f("ix_posts_user_id"), "posts", ["user_id"], unique=False)
    op.create_index(op.f("ix_posts_updated_date"), "posts", ["updated_date"], unique=False)
    op.create_index(op.f("ix_posts_total_votes"), "posts", ["total_votes"], unique=False)
    op.create_index(op.f("ix_posts_is_removed"), "posts", ["is_removed"], unique=False)

    op.create_table(
        "user_votes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=100), nullable=False),
        sa.Column("post_id", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_user_votes_user_post"),
    )
    op.create_index(op.f("ix_user_votes_user_id"), "user_votes", ["user_id"], unique=False)
    op.create_index(op.f("ix_user_votes_post_id"), "user_votes", ["post_id"], unique=False)

    op.create_table(
        "team_tags",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.String(length=200), nullable=False),
        sa.Column("user_aad_id", sa.String(length=100), nullable=True),
        sa.Column("service_url", sa.Text(), nullable=False),
        sa.Column("tags", sa.Text(), server_default="", nullable=False),
        sa.Column("created_by_name", sa.String(length=200), nullable=True),
        sa.Column("created_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_team_tags_team_id"), "team_tags", ["team_id"], unique=True)

    op.create_table(
        "team_preferences",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.String(length=200), nullable=False),
        sa.Column("digest_frequency", sa.String(length=20), nullable=False),
        sa.Column("tags", sa.Text(), server_default="", nullable=False),
        sa.Column("updated_by_name", sa.String(length=200), nullable=True),
        sa.Column("updated_by_object_id", sa.String(length=100), nullable=True),
        sa.Column("created_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_team_preferences_team_id"), "team_preferences", ["team_id"], unique=True)
    op.create_index(
        op.f("ix_team_preferences_digest_frequency"),
        "team_preferences",
        ["digest_frequency"],
        unique=False,
    )

    op.create_table(
        "user_private_posts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=100), nullable=False),
        sa.Column("post_id", sa.String(length=100), nullable=False),
        sa.Column("created_by_name", sa.String(length=200), nullable=True),
        sa.Column("created_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_user_private_posts_user_post"),
    )
    op.create_index(op.f("ix_user_private_posts_user_id"), "user_private_posts", ["user_id"], unique=False)
    op.create_index(
        op.f("ix_user_private_posts_created_date"),
        "user_private_posts",
        ["created_date"],
        unique=False,
    )

    op.create_table(
        "user_conversation_states",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=200), nullable=False),
        sa.Column("welcome_card_sent_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_user_conversation_states_user_id"),
        "user_conversation_states",
        ["user_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_user_conversation_states_user_id"), table_name="user_conversation_states")
    op.drop_table("user_conversation_states")
    op.drop_index(op.f("ix_user_private_posts_created_date"), table_name="user_private_posts")
    op.drop_index(op.f("ix_user_private_posts_user_id"), table_name="user_private_posts")
    op.drop_table("user_private_posts")
    op.drop_index(op.f("ix_team_preferences_digest_frequency"), table_name="team_preferences")
    op.drop_index(op.f("ix_team_preferences_team_id"), table_name="team_preferences")
    op.drop_table("team_preferences")
    op.drop_index(op.f("ix_team_tags_team_id"), table_name="team_tags")
    op.drop_table("team_tags")
    op.drop_index(op.f("ix_user_votes_post_id"), table_name="user_votes")
    op.drop_index(op.f("ix_user_votes_user_id"), table_name="user_votes")
    op.drop_table("user_votes")
    op.drop_index(op.f("ix_posts_is_removed"), table_name="posts")
    op.drop_index(op.f("ix_posts_total_votes"), table_name="posts")
    op.drop_index(op.f("ix_posts_updated_date"), table_name="posts")
    op.drop_index(op.f("ix_posts_user_id"), table_name="posts")
    op.drop_index(op.f("ix_posts_post_id"), table_name="posts")
    op.drop_table("posts")
