"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .database import InMemoryDatabase
from .profile import InMemoryProfileRepository
from .thread import InMemoryThreadRepository
from .transaction import InMemoryTransaction, InMemoryTransactionManager

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryDatabase",
    "InMemoryProfileRepository",
    "InMemoryThreadRepository",
    "InMemoryTransaction",
    "InMemoryTransactionManager",
]
