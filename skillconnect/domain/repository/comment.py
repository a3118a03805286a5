"""Comment repository interface.

Comments are only created through the add-comment transaction, so this
port is read-only.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from skillconnect.domain.model.comment import Comment
from skillconnect.domain.value import CommentId, ThreadId


class CommentRepository(ABC):
    """Repository for Comment entity."""

    @abstractmethod
    async def find_by_id(
        self, thread_id: ThreadId, comment_id: CommentId
    ) -> Optional[Comment]:
        """Find a comment of a thread by ID.

        Args:
            thread_id: The parent thread
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_thread(self, thread_id: ThreadId) -> List[Comment]:
        """Find all comments of a thread, oldest first.

        Args:
            thread_id: The parent thread

        Returns:
            List of comments in creation order
        """
        pass

    @abstractmethod
    async def count_by_thread(self, thread_id: ThreadId) -> int:
        """Count the comments attached to a thread.

        Args:
            thread_id: The parent thread

        Returns:
            Number of comments
        """
        pass
