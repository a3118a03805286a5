"""PostgreSQL implementation of Thread repository."""

from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skillconnect.domain.error import WriteError
from skillconnect.domain.model import Thread
from skillconnect.domain.repository import THREADS_TOPIC, ThreadRepository
from skillconnect.domain.value import ThreadId, UserId
from skillconnect.persistence.change_feed import notify
from skillconnect.persistence.mappers import row_to_thread, thread_to_dict
from skillconnect.persistence.tables import discussions_table


class PostgresThreadRepository(ThreadRepository):
    """PostgreSQL implementation of ThreadRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, thread_id: ThreadId) -> Optional[Thread]:
        """Find a thread by ID."""
        stmt = select(discussions_table).where(discussions_table.c.id == thread_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_thread(dict(row)) if row else None

    async def find_all(self) -> List[Thread]:
        """Find every thread, newest first."""
        stmt = select(discussions_table).order_by(desc(discussions_table.c.created_at))
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_thread(dict(row)) for row in rows]

    async def find_by_author(self, author_id: UserId) -> List[Thread]:
        """Find threads of one author, newest first."""
        stmt = (
            select(discussions_table)
            .where(discussions_table.c.author_id == author_id)
            .order_by(desc(discussions_table.c.created_at))
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_thread(dict(row)) for row in rows]

    async def save(self, thread: Thread) -> Thread:
        """Insert a new thread."""
        stmt = discussions_table.insert().values(**thread_to_dict(thread))
        try:
            async with self.session_factory.begin() as session:
                await session.execute(stmt)
                await notify(session, [THREADS_TOPIC])
        except SQLAlchemyError as e:
            raise WriteError(f"Failed to save thread {thread.id}: {e}") from e
        return thread
