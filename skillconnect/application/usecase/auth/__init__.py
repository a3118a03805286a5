"""Auth use cases."""

from .login import LoginRequest, LoginResponse, LoginUseCase
from .register import RegisterRequest, RegisterResponse, RegisterUseCase
from .reset_password import (
    ResetPasswordRequest,
    ResetPasswordResponse,
    ResetPasswordUseCase,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "LoginUseCase",
    "RegisterRequest",
    "RegisterResponse",
    "RegisterUseCase",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    "ResetPasswordUseCase",
]
