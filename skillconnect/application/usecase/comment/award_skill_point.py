"""Award skill point use case."""

from uuid import UUID

from pydantic import BaseModel

from skillconnect.domain.error import NotAuthenticatedError
from skillconnect.domain.service import IdentityService, ReputationService
from skillconnect.domain.value import CommentId, ThreadId


class AwardSkillPointRequest(BaseModel):
    """Award skill point request."""

    thread_id: str  # UUID string
    comment_id: str  # UUID string


class AwardSkillPointResponse(BaseModel):
    """Award skill point response."""

    comment_id: str
    awarded: bool


class AwardSkillPointUseCase:
    """Use case for rewarding a helpful comment."""

    def __init__(
        self, identity_service: IdentityService, reputation_service: ReputationService
    ) -> None:
        """Initialize award skill point use case.

        Args:
            identity_service: Identity domain service
            reputation_service: Reputation domain service
        """
        self.identity_service = identity_service
        self.reputation_service = reputation_service

    async def execute(self, request: AwardSkillPointRequest) -> AwardSkillPointResponse:
        """Give one point to the comment and its author.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            NotFoundError: If the comment or its author's profile is missing
        """
        if self.identity_service.current_principal() is None:
            raise NotAuthenticatedError("award skill points")

        comment_id = CommentId(UUID(request.comment_id))
        await self.reputation_service.award_skill_point(
            comment_id, ThreadId(UUID(request.thread_id))
        )
        return AwardSkillPointResponse(comment_id=str(comment_id), awarded=True)
