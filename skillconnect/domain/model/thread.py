"""Thread entity (a discussion post)."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from skillconnect.domain.model.common import DomainModel
from skillconnect.domain.model.profile import Profile
from skillconnect.domain.value import ThreadId, UserId


class Thread(DomainModel):
    """Discussion thread.

    Title and body are fixed at creation. ``comment_count`` is denormalized
    and only written by the add-comment transaction. ``author`` is resolved
    from the profile store when threads are streamed and is never persisted.
    """

    id: ThreadId
    title: str = Field(min_length=1, max_length=300)
    body: str = Field(min_length=1, max_length=10000)
    author_id: UserId
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    comment_count: int = Field(default=0, ge=0)
    author: Optional[Profile] = None
