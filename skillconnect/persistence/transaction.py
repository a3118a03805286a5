"""PostgreSQL store transactions.

Runs under the default READ COMMITTED isolation. The version guard on the
comment count is an ``UPDATE ... WHERE version = :read_version``: a
concurrent writer that committed first makes it match no row, which is
reported as a conflict. Increments are plain ``SET x = x + 1`` updates,
which PostgreSQL serializes on the row lock.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import logfire
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skillconnect.domain.error import WriteConflictError, WriteError
from skillconnect.domain.model import Comment, Profile, Thread
from skillconnect.domain.repository import (
    THREADS_TOPIC,
    Transaction,
    TransactionManager,
    comments_topic,
    profile_topic,
)
from skillconnect.domain.value import CommentId, ThreadId, UserId
from skillconnect.persistence.change_feed import notify
from skillconnect.persistence.mappers import (
    comment_to_dict,
    row_to_comment,
    row_to_profile,
    row_to_thread,
)
from skillconnect.persistence.tables import comments_table, discussions_table, users_table


class PostgresTransaction(Transaction):
    """Transaction bound to one session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.topics: set[str] = set()
        self._thread_versions: dict[ThreadId, int] = {}

    async def get_thread(self, thread_id: ThreadId) -> Optional[Thread]:
        stmt = select(discussions_table).where(discussions_table.c.id == thread_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if row is None:
            return None
        self._thread_versions[thread_id] = row["version"]
        return row_to_thread(dict(row))

    async def get_comment(
        self, thread_id: ThreadId, comment_id: CommentId
    ) -> Optional[Comment]:
        stmt = select(comments_table).where(
            comments_table.c.id == comment_id,
            comments_table.c.discussion_id == thread_id,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_comment(dict(row)) if row else None

    async def get_profile(self, user_id: UserId) -> Optional[Profile]:
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def add_comment(self, comment: Comment) -> None:
        try:
            await self.session.execute(
                comments_table.insert().values(**comment_to_dict(comment))
            )
        except IntegrityError as e:
            # Parent thread deleted after it was read
            raise WriteConflictError("Thread", str(comment.thread_id)) from e
        self.topics.update((THREADS_TOPIC, comments_topic(comment.thread_id)))

    async def set_comment_count(self, thread_id: ThreadId, count: int) -> None:
        read_version = self._thread_versions.get(thread_id)
        if read_version is None:
            raise RuntimeError(f"Thread {thread_id} was not read in this transaction")

        stmt = (
            discussions_table.update()
            .where(
                discussions_table.c.id == thread_id,
                discussions_table.c.version == read_version,
            )
            .values(comment_count=count, version=read_version + 1)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise WriteConflictError("Thread", str(thread_id))
        self._thread_versions[thread_id] = read_version + 1
        self.topics.add(THREADS_TOPIC)

    async def increment_comment_skill_points(
        self, thread_id: ThreadId, comment_id: CommentId, delta: int = 1
    ) -> None:
        stmt = (
            comments_table.update()
            .where(
                comments_table.c.id == comment_id,
                comments_table.c.discussion_id == thread_id,
            )
            .values(skill_points=comments_table.c.skill_points + delta)
            .returning(comments_table.c.id)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            raise WriteConflictError("Comment", str(comment_id))
        self.topics.add(comments_topic(thread_id))

    async def increment_profile_skill_points(
        self, user_id: UserId, delta: int = 1
    ) -> None:
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(
                skill_points=users_table.c.skill_points + delta,
                version=users_table.c.version + 1,
            )
            .returning(users_table.c.id)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            raise WriteConflictError("Profile", user_id)
        self.topics.add(profile_topic(user_id))


class PostgresTransactionManager(TransactionManager):
    """Opens one session and database transaction per store transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize transaction manager.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[Transaction]:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    tx = PostgresTransaction(session)
                    yield tx
                    await notify(session, tx.topics)
        except SQLAlchemyError as e:
            logfire.error("Store transaction failed", error=str(e))
            raise WriteError(f"Transaction failed: {e}") from e
