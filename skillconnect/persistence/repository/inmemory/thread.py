"""In-memory thread repository for testing."""

from typing import List, Optional

from skillconnect.domain.model import Thread
from skillconnect.domain.repository import THREADS_TOPIC, ThreadRepository
from skillconnect.domain.value import ThreadId, UserId

from .database import InMemoryDatabase


class InMemoryThreadRepository(ThreadRepository):
    """In-memory implementation of ThreadRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    async def find_by_id(self, thread_id: ThreadId) -> Optional[Thread]:
        """Find a thread by ID."""
        return self.database.threads.get(thread_id)

    async def find_all(self) -> List[Thread]:
        """Find every thread, newest first."""
        return sorted(
            self.database.threads.values(), key=lambda t: t.created_at, reverse=True
        )

    async def find_by_author(self, author_id: UserId) -> List[Thread]:
        """Find threads of one author, newest first."""
        return [t for t in await self.find_all() if t.author_id == author_id]

    async def save(self, thread: Thread) -> Thread:
        """Insert a new thread."""
        stored = thread.model_copy(update={"author": None})
        self.database.threads[thread.id] = stored
        self.database.bump(("thread", thread.id))
        self.database.change_feed.publish(THREADS_TOPIC)
        return stored
