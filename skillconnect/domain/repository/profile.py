"""Profile repository interface."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from skillconnect.domain.model.profile import Profile
from skillconnect.domain.value import UserId, Username


class ProfileRepository(ABC):
    """Repository for Profile entity.

    Defines the contract for profile persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        """Find a profile by its owner's principal id.

        Args:
            user_id: The principal id

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: Username) -> List[Profile]:
        """Find every profile whose username equals the given one.

        Usernames are stored lowercase, so this is a case-insensitive lookup.
        More than one result means the username is ambiguous.

        Args:
            username: Normalized username

        Returns:
            Matching profiles (possibly empty)
        """
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """Write a profile, replacing any existing record with the same id.

        Skill points of an existing record are kept.

        Raises:
            UsernameInUseError: If another profile already claims the username
            WriteError: If the store rejects the write
        """
        pass

    @abstractmethod
    async def create_if_absent(self, profile: Profile) -> Profile:
        """Create the profile unless one already exists for its id.

        Conditional create keyed by id: concurrent callers converge on a
        single record.

        Args:
            profile: Profile to create

        Returns:
            The stored profile (the existing one if there was one)

        Raises:
            UsernameInUseError: If another profile already claims the username
        """
        pass

    @abstractmethod
    async def update_fields(
        self, user_id: UserId, fields: dict[str, Any]
    ) -> Optional[Profile]:
        """Apply a partial update to a profile.

        Only the given fields change.

        Args:
            user_id: Profile id
            fields: Model field names mapped to new values

        Returns:
            The updated profile, or None if no profile exists

        Raises:
            UsernameInUseError: If the new username is claimed by another profile
            WriteError: If the store rejects the write
        """
        pass
