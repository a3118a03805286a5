"""PostgreSQL repository implementations."""

from skillconnect.persistence.repository.comment import PostgresCommentRepository
from skillconnect.persistence.repository.profile import PostgresProfileRepository
from skillconnect.persistence.repository.thread import PostgresThreadRepository

__all__ = [
    "PostgresProfileRepository",
    "PostgresThreadRepository",
    "PostgresCommentRepository",
]
