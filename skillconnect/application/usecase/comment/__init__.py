"""Comment use cases."""

from .add_comment import AddCommentRequest, AddCommentResponse, AddCommentUseCase
from .award_skill_point import (
    AwardSkillPointRequest,
    AwardSkillPointResponse,
    AwardSkillPointUseCase,
)

__all__ = [
    "AddCommentRequest",
    "AddCommentResponse",
    "AddCommentUseCase",
    "AwardSkillPointRequest",
    "AwardSkillPointResponse",
    "AwardSkillPointUseCase",
]
