"""Profile entity.

One profile per principal, keyed by the principal id. The username, bio
and avatar are edited by the owner; skill points only move through the
reputation core.
"""

from typing import Optional

from pydantic import Field

from skillconnect.domain.model.common import DomainModel
from skillconnect.domain.value import UserId, Username


class Profile(DomainModel):
    """Application-level user record."""

    id: UserId
    username: Username
    bio: str = ""
    email: str = ""  # Stored redundantly so usernames can resolve to a login email
    avatar_url: Optional[str] = None
    skill_points: int = Field(default=0, ge=0)
