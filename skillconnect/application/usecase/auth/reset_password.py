"""Reset password use case."""

from pydantic import BaseModel

from skillconnect.domain.service import IdentityService


class ResetPasswordRequest(BaseModel):
    """Reset password request."""

    email: str


class ResetPasswordResponse(BaseModel):
    """Reset password response."""

    message: str


class ResetPasswordUseCase:
    """Use case for requesting a password reset email."""

    def __init__(self, identity_service: IdentityService) -> None:
        self.identity_service = identity_service

    async def execute(self, request: ResetPasswordRequest) -> ResetPasswordResponse:
        """Send the reset email.

        Raises:
            ValidationError: If the email is empty
        """
        await self.identity_service.send_password_reset(request.email)
        return ResetPasswordResponse(
            message="Password reset email sent. Please check your inbox."
        )
