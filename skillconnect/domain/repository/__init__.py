"""Repository interfaces for SkillConnect domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from skillconnect.domain.repository.change_feed import (
    THREADS_TOPIC,
    ChangeFeed,
    ChangeListener,
    comments_topic,
    profile_topic,
)
from skillconnect.domain.repository.comment import CommentRepository
from skillconnect.domain.repository.profile import ProfileRepository
from skillconnect.domain.repository.thread import ThreadRepository
from skillconnect.domain.repository.transaction import Transaction, TransactionManager

__all__ = [
    "ProfileRepository",
    "ThreadRepository",
    "CommentRepository",
    "Transaction",
    "TransactionManager",
    "ChangeFeed",
    "ChangeListener",
    "THREADS_TOPIC",
    "comments_topic",
    "profile_topic",
]
