"""SQLAlchemy table definitions for SkillConnect.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

from skillconnect.domain.value import PLACEHOLDER_USERNAME

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (profiles, keyed by auth provider uid)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("username", String(64), nullable=False),  # Always lowercase
    Column("bio", Text, nullable=False, server_default=""),
    Column("email", String(255), nullable=False, server_default=""),
    Column("avatar_url", Text, nullable=True),
    Column("skill_points", Integer, nullable=False, server_default="0"),
    Column("version", Integer, nullable=False, server_default="1"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("skill_points >= 0", name="users_skill_points_non_negative"),
)

# Placeholder usernames are shared by every profile that has not picked one
Index(
    "uq_users_username",
    users_table.c.username,
    unique=True,
    postgresql_where=users_table.c.username != PLACEHOLDER_USERNAME.root,
)

# ============================================================================
# DISCUSSIONS TABLE (threads)
# ============================================================================
discussions_table = Table(
    "discussions",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("title", String(300), nullable=False),
    Column("body", Text, nullable=False),
    Column("author_id", String(128), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("comment_count", Integer, nullable=False, server_default="0"),
    Column("version", Integer, nullable=False, server_default="1"),
    CheckConstraint("comment_count >= 0", name="discussions_comment_count_non_negative"),
)

Index("idx_discussions_created_at", discussions_table.c.created_at.desc())
Index("idx_discussions_author_id", discussions_table.c.author_id)

# ============================================================================
# COMMENTS TABLE (children of a discussion)
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "discussion_id",
        UUID(as_uuid=True),
        ForeignKey("discussions.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("text", Text, nullable=False),
    Column("author_id", String(128), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("skill_points", Integer, nullable=False, server_default="0"),
    CheckConstraint("skill_points >= 0", name="comments_skill_points_non_negative"),
)

Index(
    "idx_comments_discussion_created",
    comments_table.c.discussion_id,
    comments_table.c.created_at,
)
