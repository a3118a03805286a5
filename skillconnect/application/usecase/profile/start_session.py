"""Start session use case."""

from pydantic import BaseModel

from skillconnect.domain.error import NotAuthenticatedError
from skillconnect.domain.service import IdentityService, ProfileService


class StartSessionResponse(BaseModel):
    """Profile of the signed-in user."""

    user_id: str
    username: str
    bio: str
    email: str
    avatar_url: str | None
    skill_points: int


class StartSessionUseCase:
    """Use case run whenever the app opens with a signed-in principal.

    Creates the default profile if the principal has none yet, which also
    repairs registrations whose profile write failed.
    """

    def __init__(
        self, identity_service: IdentityService, profile_service: ProfileService
    ) -> None:
        """Initialize start session use case.

        Args:
            identity_service: Identity domain service
            profile_service: Profile domain service
        """
        self.identity_service = identity_service
        self.profile_service = profile_service

    async def execute(self) -> StartSessionResponse:
        """Load or create the signed-in principal's profile.

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        principal = self.identity_service.current_principal()
        if principal is None:
            raise NotAuthenticatedError("view your profile")

        profile = await self.profile_service.ensure_profile(principal)
        return StartSessionResponse(
            user_id=profile.id,
            username=profile.username.root,
            bio=profile.bio,
            email=profile.email,
            avatar_url=profile.avatar_url,
            skill_points=profile.skill_points,
        )
