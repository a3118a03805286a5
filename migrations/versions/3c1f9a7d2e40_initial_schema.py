"""initial_schema

Create the SkillConnect schema:
- Users (profiles keyed by auth provider uid, unique usernames)
- Discussions (threads with a denormalized comment count)
- Comments (children of a discussion, with skill points)

Revision ID: 3c1f9a7d2e40
Revises:
Create Date: 2026-10-18 09:12:44.301266

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(128), nullable=False),  # Auth provider uid
        sa.Column("username", sa.String(64), nullable=False),  # Always lowercase
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("skill_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "skill_points >= 0", name="users_skill_points_non_negative"
        ),
    )
    # Every profile without a chosen username shares the placeholder
    op.create_index(
        "uq_users_username",
        "users",
        ["username"],
        unique=True,
        postgresql_where=sa.text("username <> 'new user'"),
    )

    # ========================================================================
    # DISCUSSIONS table
    # ========================================================================
    op.create_table(
        "discussions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("author_id", sa.String(128), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "comment_count >= 0", name="discussions_comment_count_non_negative"
        ),
    )
    op.create_index(
        "idx_discussions_created_at",
        "discussions",
        [sa.text("created_at DESC")],
    )
    op.create_index("idx_discussions_author_id", "discussions", ["author_id"])

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("discussion_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author_id", sa.String(128), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("skill_points", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(
            ["discussion_id"], ["discussions.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "skill_points >= 0", name="comments_skill_points_non_negative"
        ),
    )
    op.create_index(
        "idx_comments_discussion_created",
        "comments",
        ["discussion_id", "created_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("comments")
    op.drop_table("discussions")
    op.drop_index("uq_users_username", table_name="users")
    op.drop_table("users")
