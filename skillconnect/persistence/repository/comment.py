"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skillconnect.domain.model import Comment
from skillconnect.domain.repository import CommentRepository
from skillconnect.domain.value import CommentId, ThreadId
from skillconnect.persistence.mappers import row_to_comment
from skillconnect.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(
        self, thread_id: ThreadId, comment_id: CommentId
    ) -> Optional[Comment]:
        """Find a comment of a thread by ID."""
        stmt = select(comments_table).where(
            comments_table.c.id == comment_id,
            comments_table.c.discussion_id == thread_id,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_comment(dict(row)) if row else None

    async def find_by_thread(self, thread_id: ThreadId) -> List[Comment]:
        """Find all comments of a thread, oldest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.discussion_id == thread_id)
            .order_by(comments_table.c.created_at, comments_table.c.id)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_comment(dict(row)) for row in rows]

    async def count_by_thread(self, thread_id: ThreadId) -> int:
        """Count the comments of a thread."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.discussion_id == thread_id)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()
