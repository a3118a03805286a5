"""Register use case."""

from pydantic import BaseModel

from skillconnect.domain.service import IdentityService


class RegisterRequest(BaseModel):
    """Register request."""

    username: str
    email: str
    password: str


class RegisterResponse(BaseModel):
    """Register response."""

    user_id: str
    email: str
    username: str


class RegisterUseCase:
    """Use case for creating an account and its profile."""

    def __init__(self, identity_service: IdentityService) -> None:
        """Initialize register use case.

        Args:
            identity_service: Identity domain service
        """
        self.identity_service = identity_service

    async def execute(self, request: RegisterRequest) -> RegisterResponse:
        """Execute registration.

        Raises:
            ValidationError: If a field is empty
            UsernameInUseError: If the username is taken
            WeakPasswordError: If the password is rejected
            EmailInUseError: If the email already has an account
        """
        principal = await self.identity_service.register_account(
            request.username, request.email, request.password
        )
        return RegisterResponse(
            user_id=principal.id,
            email=principal.email,
            username=request.username.strip().lower(),
        )
