"""Login use case."""

from pydantic import BaseModel

from skillconnect.domain.service import IdentityService, ProfileService


class LoginRequest(BaseModel):
    """Login request."""

    identifier: str  # Email or username
    password: str


class LoginResponse(BaseModel):
    """Login response."""

    user_id: str
    email: str
    username: str
    skill_points: int


class LoginUseCase:
    """Use case for signing in with an email or a username."""

    def __init__(
        self, identity_service: IdentityService, profile_service: ProfileService
    ) -> None:
        """Initialize login use case.

        Args:
            identity_service: Identity domain service
            profile_service: Profile domain service
        """
        self.identity_service = identity_service
        self.profile_service = profile_service

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Resolve the identifier (email, or username via profile lookup)
        2. Authenticate with the auth provider
        3. Make sure the principal has a profile (repairs failed registrations)

        Args:
            request: Login request

        Returns:
            Signed-in user summary

        Raises:
            ValidationError: If identifier or password is empty
            NotFoundError: If the username or account does not exist
            InvalidCredentialError: If the password is wrong
        """
        principal = await self.identity_service.resolve_login_identifier(
            request.identifier, request.password
        )
        profile = await self.profile_service.ensure_profile(principal)

        return LoginResponse(
            user_id=principal.id,
            email=principal.email,
            username=profile.username.root,
            skill_points=profile.skill_points,
        )
