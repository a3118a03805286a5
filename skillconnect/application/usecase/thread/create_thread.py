"""Create thread use case."""

from pydantic import BaseModel

from skillconnect.domain.service import DiscussionService, IdentityService


class CreateThreadRequest(BaseModel):
    """Create thread request."""

    title: str
    body: str


class CreateThreadResponse(BaseModel):
    """Create thread response."""

    thread_id: str


class CreateThreadUseCase:
    """Use case for starting a discussion."""

    def __init__(
        self, identity_service: IdentityService, discussion_service: DiscussionService
    ) -> None:
        """Initialize create thread use case.

        Args:
            identity_service: Identity domain service
            discussion_service: Discussion domain service
        """
        self.identity_service = identity_service
        self.discussion_service = discussion_service

    async def execute(self, request: CreateThreadRequest) -> CreateThreadResponse:
        """Create a thread authored by the signed-in principal.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ValidationError: If title or body is blank
        """
        principal = self.identity_service.current_principal()
        thread_id = await self.discussion_service.create_thread(
            principal.id if principal else None, request.title, request.body
        )
        return CreateThreadResponse(thread_id=str(thread_id))
