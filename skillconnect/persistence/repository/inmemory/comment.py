"""In-memory comment repository for testing."""

from typing import List, Optional

from skillconnect.domain.model import Comment
from skillconnect.domain.repository import CommentRepository
from skillconnect.domain.value import CommentId, ThreadId

from .database import InMemoryDatabase


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    async def find_by_id(
        self, thread_id: ThreadId, comment_id: CommentId
    ) -> Optional[Comment]:
        """Find a comment of a thread by ID."""
        return self.database.comments.get(thread_id, {}).get(comment_id)

    async def find_by_thread(self, thread_id: ThreadId) -> List[Comment]:
        """Find all comments of a thread, oldest first."""
        return sorted(
            self.database.comments.get(thread_id, {}).values(),
            key=lambda c: c.created_at,
        )

    async def count_by_thread(self, thread_id: ThreadId) -> int:
        """Count the comments of a thread."""
        return len(self.database.comments.get(thread_id, {}))
