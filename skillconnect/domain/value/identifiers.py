"""Strongly typed identifiers for SkillConnect entities.

User ids are opaque strings minted by the auth provider. Threads and
comments are keyed by UUIDs generated client-side.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", str)
ThreadId = NewType("ThreadId", UUID)
CommentId = NewType("CommentId", UUID)
