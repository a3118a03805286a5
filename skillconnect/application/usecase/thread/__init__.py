"""Thread use cases."""

from .create_thread import (
    CreateThreadRequest,
    CreateThreadResponse,
    CreateThreadUseCase,
)

__all__ = [
    "CreateThreadRequest",
    "CreateThreadResponse",
    "CreateThreadUseCase",
]
