"""Shared state behind the in-memory repositories."""

from collections import defaultdict
from typing import Hashable

from skillconnect.domain.model import Comment, Profile, Thread
from skillconnect.domain.value import CommentId, ThreadId, UserId
from skillconnect.persistence.change_feed import LocalChangeFeed


class InMemoryDatabase:
    """Documents, per-document versions and the change feed.

    Repositories and transactions built on the same instance see each
    other's writes.
    """

    def __init__(self) -> None:
        self.profiles: dict[UserId, Profile] = {}
        self.threads: dict[ThreadId, Thread] = {}
        self.comments: dict[ThreadId, dict[CommentId, Comment]] = defaultdict(dict)
        self.change_feed = LocalChangeFeed()
        self._versions: dict[Hashable, int] = defaultdict(int)

    def version(self, key: Hashable) -> int:
        """Current version of a document."""
        return self._versions[key]

    def bump(self, key: Hashable) -> None:
        """Record a write to a document."""
        self._versions[key] += 1
