"""Domain value objects for SkillConnect."""

from skillconnect.domain.value.identifiers import CommentId, ThreadId, UserId
from skillconnect.domain.value.types import PLACEHOLDER_USERNAME, BlobHandle, Username

__all__ = [
    # Identifiers
    "UserId",
    "ThreadId",
    "CommentId",
    # Types
    "Username",
    "BlobHandle",
    "PLACEHOLDER_USERNAME",
]
