"""Thread repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from skillconnect.domain.model.thread import Thread
from skillconnect.domain.value import ThreadId, UserId


class ThreadRepository(ABC):
    """Repository for Thread entity."""

    @abstractmethod
    async def find_by_id(self, thread_id: ThreadId) -> Optional[Thread]:
        """Find a thread by ID.

        Args:
            thread_id: The thread's unique identifier

        Returns:
            The thread if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all(self) -> List[Thread]:
        """Find every thread, newest first."""
        pass

    @abstractmethod
    async def find_by_author(self, author_id: UserId) -> List[Thread]:
        """Find threads started by a specific author, newest first.

        Args:
            author_id: The author's principal id

        Returns:
            List of threads by the author
        """
        pass

    @abstractmethod
    async def save(self, thread: Thread) -> Thread:
        """Create a thread.

        Args:
            thread: The thread to store

        Returns:
            The stored thread

        Raises:
            WriteError: If the store rejects the write
        """
        pass
