"""In-memory profile repository for testing."""

from typing import Any, List, Optional

from skillconnect.domain.error import UsernameInUseError
from skillconnect.domain.model import Profile
from skillconnect.domain.repository import ProfileRepository, profile_topic
from skillconnect.domain.value import PLACEHOLDER_USERNAME, UserId, Username

from .database import InMemoryDatabase


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing.

    Enforces the same username uniqueness as the database index.
    """

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        """Find a profile by owner id."""
        return self.database.profiles.get(user_id)

    async def find_by_username(self, username: Username) -> List[Profile]:
        """Find profiles with the given username."""
        return [p for p in self.database.profiles.values() if p.username == username]

    async def save(self, profile: Profile) -> Profile:
        """Insert or replace a profile, keeping any stored skill points."""
        self._check_username(profile.id, profile.username)
        existing = self.database.profiles.get(profile.id)
        if existing:
            profile = profile.model_copy(update={"skill_points": existing.skill_points})
        self._write(profile)
        return profile

    async def create_if_absent(self, profile: Profile) -> Profile:
        """Insert the profile unless its id already exists."""
        existing = self.database.profiles.get(profile.id)
        if existing:
            return existing
        self._check_username(profile.id, profile.username)
        self._write(profile)
        return profile

    async def update_fields(
        self, user_id: UserId, fields: dict[str, Any]
    ) -> Optional[Profile]:
        """Apply a partial update."""
        existing = self.database.profiles.get(user_id)
        if existing is None:
            return None
        if "username" in fields:
            self._check_username(user_id, fields["username"])
        updated = existing.model_copy(update=fields)
        self._write(updated)
        return updated

    def _check_username(self, user_id: UserId, username: Username) -> None:
        if username == PLACEHOLDER_USERNAME:
            return
        for other in self.database.profiles.values():
            if other.id != user_id and other.username == username:
                raise UsernameInUseError(username.root)

    def _write(self, profile: Profile) -> None:
        self.database.profiles[profile.id] = profile
        self.database.bump(("profile", profile.id))
        self.database.change_feed.publish(profile_topic(profile.id))
