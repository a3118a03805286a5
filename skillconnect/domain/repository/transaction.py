"""Atomic store transaction interface.

A transaction is a read-modify-write unit that commits all of its writes
or none of them. Two kinds of write exist:

- ``set_comment_count`` overwrites a value the transaction computed from
  an earlier read. It is guarded by the version of the thread that was
  read; if the thread changed in the meantime the store raises
  ``WriteConflictError`` and nothing commits.
- ``increment_*`` apply the store's native atomic increment. Increments
  commute, so concurrent increments never conflict with each other; they
  only require the target document to still exist.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional

from skillconnect.domain.model.comment import Comment
from skillconnect.domain.model.profile import Profile
from skillconnect.domain.model.thread import Thread
from skillconnect.domain.value import CommentId, ThreadId, UserId


class Transaction(ABC):
    """Operations available inside one store transaction."""

    @abstractmethod
    async def get_thread(self, thread_id: ThreadId) -> Optional[Thread]:
        """Read a thread and remember its version."""
        pass

    @abstractmethod
    async def get_comment(
        self, thread_id: ThreadId, comment_id: CommentId
    ) -> Optional[Comment]:
        """Read a comment of a thread."""
        pass

    @abstractmethod
    async def get_profile(self, user_id: UserId) -> Optional[Profile]:
        """Read a profile."""
        pass

    @abstractmethod
    async def add_comment(self, comment: Comment) -> None:
        """Insert a new comment under its thread."""
        pass

    @abstractmethod
    async def set_comment_count(self, thread_id: ThreadId, count: int) -> None:
        """Overwrite a thread's comment count.

        The thread must have been read in this transaction first.

        Raises:
            WriteConflictError: If the thread changed since it was read
        """
        pass

    @abstractmethod
    async def increment_comment_skill_points(
        self, thread_id: ThreadId, comment_id: CommentId, delta: int = 1
    ) -> None:
        """Atomically add ``delta`` to a comment's skill points.

        Raises:
            WriteConflictError: If the comment vanished since it was read
        """
        pass

    @abstractmethod
    async def increment_profile_skill_points(
        self, user_id: UserId, delta: int = 1
    ) -> None:
        """Atomically add ``delta`` to a profile's skill points.

        Raises:
            WriteConflictError: If the profile vanished since it was read
        """
        pass


class TransactionManager(ABC):
    """Opens store transactions."""

    @abstractmethod
    def begin(self) -> AbstractAsyncContextManager[Transaction]:
        """Open a transaction.

        The transaction commits when the ``async with`` block exits normally
        and rolls back when it raises. Commit may itself raise
        ``WriteConflictError``.
        """
        pass
