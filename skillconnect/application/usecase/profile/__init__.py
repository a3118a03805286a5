"""Profile use cases."""

from .start_session import StartSessionResponse, StartSessionUseCase
from .update_profile import (
    UpdateProfileRequest,
    UpdateProfileResponse,
    UpdateProfileUseCase,
)

__all__ = [
    "StartSessionResponse",
    "StartSessionUseCase",
    "UpdateProfileRequest",
    "UpdateProfileResponse",
    "UpdateProfileUseCase",
]
