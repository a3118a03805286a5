"""Add comment use case."""

from uuid import UUID

from pydantic import BaseModel

from skillconnect.domain.service import IdentityService, ReputationService
from skillconnect.domain.value import ThreadId


class AddCommentRequest(BaseModel):
    """Add comment request."""

    thread_id: str  # UUID string
    text: str


class AddCommentResponse(BaseModel):
    """Add comment response."""

    comment_id: str
    thread_id: str


class AddCommentUseCase:
    """Use case for replying to a thread."""

    def __init__(
        self, identity_service: IdentityService, reputation_service: ReputationService
    ) -> None:
        """Initialize add comment use case.

        Args:
            identity_service: Identity domain service
            reputation_service: Reputation domain service
        """
        self.identity_service = identity_service
        self.reputation_service = reputation_service

    async def execute(self, request: AddCommentRequest) -> AddCommentResponse:
        """Add a comment authored by the signed-in principal.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ValidationError: If the text is blank
            NotFoundError: If the thread does not exist
            WriteConflictError: If the thread stayed contended through every retry
        """
        principal = self.identity_service.current_principal()
        thread_id = ThreadId(UUID(request.thread_id))

        comment_id = await self.reputation_service.add_comment(
            thread_id, principal.id if principal else None, request.text
        )
        return AddCommentResponse(comment_id=str(comment_id), thread_id=str(thread_id))
