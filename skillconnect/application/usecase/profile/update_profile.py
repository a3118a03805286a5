"""Update profile use case."""

from pydantic import BaseModel, Field

from skillconnect.domain.error import NotAuthenticatedError
from skillconnect.domain.service import IdentityService, ProfileService


class UpdateProfileRequest(BaseModel):
    """Update profile request.

    Fields left as None are not changed.
    """

    username: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    avatar: bytes | None = Field(default=None, repr=False)  # Encoded image
    avatar_content_type: str = "image/jpeg"


class UpdateProfileResponse(BaseModel):
    """Update profile response."""

    user_id: str
    username: str
    bio: str
    avatar_url: str | None
    skill_points: int


class UpdateProfileUseCase:
    """Use case for the profile edit form.

    Users can change their username, bio and avatar. Skill points cannot be
    changed here.
    """

    def __init__(
        self, identity_service: IdentityService, profile_service: ProfileService
    ) -> None:
        """Initialize update profile use case.

        Args:
            identity_service: Identity domain service
            profile_service: Profile domain service
        """
        self.identity_service = identity_service
        self.profile_service = profile_service

    async def execute(self, request: UpdateProfileRequest) -> UpdateProfileResponse:
        """Execute update profile flow.

        Steps:
        1. Upload the new avatar, if any, and point the profile at it
        2. Apply username and bio changes

        Args:
            request: Fields to change

        Returns:
            Updated profile

        Raises:
            NotAuthenticatedError: If nobody is signed in
            UsernameInUseError: If the new username is taken
            NotFoundError: If the principal has no profile
        """
        principal = self.identity_service.current_principal()
        if principal is None:
            raise NotAuthenticatedError("edit your profile")

        if request.avatar:
            await self.profile_service.upload_avatar(
                principal, request.avatar, request.avatar_content_type
            )

        profile = await self.profile_service.update_profile(
            principal.id, username=request.username, bio=request.bio
        )

        return UpdateProfileResponse(
            user_id=profile.id,
            username=profile.username.root,
            bio=profile.bio,
            avatar_url=profile.avatar_url,
            skill_points=profile.skill_points,
        )
