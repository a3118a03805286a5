"""Comment entity."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from skillconnect.domain.model.common import DomainModel
from skillconnect.domain.model.profile import Profile
from skillconnect.domain.value import CommentId, ThreadId, UserId


class Comment(DomainModel):
    """Reply attached to exactly one thread.

    ``skill_points`` counts the points awarded to this comment. Every award
    also lands on the author's profile total in the same transaction.
    """

    id: CommentId
    thread_id: ThreadId
    text: str = Field(min_length=1, max_length=10000)
    author_id: UserId
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    skill_points: int = Field(default=0, ge=0)
    author: Optional[Profile] = None
