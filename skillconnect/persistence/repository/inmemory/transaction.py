"""In-memory store transactions for testing.

Reads yield to the event loop so concurrent transactions interleave the
way they would against a remote store. Writes are buffered and applied
atomically on commit, after the guards are checked.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from skillconnect.domain.error import WriteConflictError
from skillconnect.domain.model import Comment, Profile, Thread
from skillconnect.domain.repository import (
    THREADS_TOPIC,
    Transaction,
    TransactionManager,
    comments_topic,
    profile_topic,
)
from skillconnect.domain.value import CommentId, ThreadId, UserId

from .database import InMemoryDatabase


class InMemoryTransaction(Transaction):
    """Buffered transaction over an ``InMemoryDatabase``."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database
        self._thread_versions: dict[ThreadId, int] = {}
        self._new_comments: list[Comment] = []
        self._comment_counts: dict[ThreadId, int] = {}
        self._comment_increments: dict[tuple[ThreadId, CommentId], int] = {}
        self._profile_increments: dict[UserId, int] = {}

    async def get_thread(self, thread_id: ThreadId) -> Optional[Thread]:
        await asyncio.sleep(0)
        thread = self.database.threads.get(thread_id)
        if thread is not None:
            self._thread_versions[thread_id] = self.database.version(
                ("thread", thread_id)
            )
        return thread

    async def get_comment(
        self, thread_id: ThreadId, comment_id: CommentId
    ) -> Optional[Comment]:
        await asyncio.sleep(0)
        return self.database.comments.get(thread_id, {}).get(comment_id)

    async def get_profile(self, user_id: UserId) -> Optional[Profile]:
        await asyncio.sleep(0)
        return self.database.profiles.get(user_id)

    async def add_comment(self, comment: Comment) -> None:
        self._new_comments.append(comment)

    async def set_comment_count(self, thread_id: ThreadId, count: int) -> None:
        if thread_id not in self._thread_versions:
            raise RuntimeError(f"Thread {thread_id} was not read in this transaction")
        self._comment_counts[thread_id] = count

    async def increment_comment_skill_points(
        self, thread_id: ThreadId, comment_id: CommentId, delta: int = 1
    ) -> None:
        key = (thread_id, comment_id)
        self._comment_increments[key] = self._comment_increments.get(key, 0) + delta

    async def increment_profile_skill_points(
        self, user_id: UserId, delta: int = 1
    ) -> None:
        self._profile_increments[user_id] = (
            self._profile_increments.get(user_id, 0) + delta
        )

    def commit(self) -> None:
        """Check guards, then apply every buffered write.

        Raises:
            WriteConflictError: If a guarded document changed or a target
                document vanished; nothing is applied
        """
        db = self.database

        for thread_id in self._comment_counts:
            if (
                thread_id not in db.threads
                or db.version(("thread", thread_id)) != self._thread_versions[thread_id]
            ):
                raise WriteConflictError("Thread", str(thread_id))
        for comment in self._new_comments:
            if comment.thread_id not in db.threads:
                raise WriteConflictError("Thread", str(comment.thread_id))
        for thread_id, comment_id in self._comment_increments:
            if comment_id not in db.comments.get(thread_id, {}):
                raise WriteConflictError("Comment", str(comment_id))
        for user_id in self._profile_increments:
            if user_id not in db.profiles:
                raise WriteConflictError("Profile", user_id)

        topics: set[str] = set()
        for comment in self._new_comments:
            db.comments[comment.thread_id][comment.id] = comment.model_copy(
                update={"author": None}
            )
            topics.update((THREADS_TOPIC, comments_topic(comment.thread_id)))
        for thread_id, count in self._comment_counts.items():
            thread = db.threads[thread_id]
            db.threads[thread_id] = thread.model_copy(update={"comment_count": count})
            db.bump(("thread", thread_id))
            topics.add(THREADS_TOPIC)
        for (thread_id, comment_id), delta in self._comment_increments.items():
            comment = db.comments[thread_id][comment_id]
            db.comments[thread_id][comment_id] = comment.model_copy(
                update={"skill_points": comment.skill_points + delta}
            )
            topics.add(comments_topic(thread_id))
        for user_id, delta in self._profile_increments.items():
            profile = db.profiles[user_id]
            db.profiles[user_id] = profile.model_copy(
                update={"skill_points": profile.skill_points + delta}
            )
            db.bump(("profile", user_id))
            topics.add(profile_topic(user_id))

        db.change_feed.publish_all(topics)


class InMemoryTransactionManager(TransactionManager):
    """In-memory implementation of TransactionManager for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[Transaction]:
        tx = InMemoryTransaction(self.database)
        yield tx
        tx.commit()
