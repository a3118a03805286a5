"""Unit tests for RegisterUseCase and ResetPasswordUseCase."""

import pytest

from skillconnect.adapter.firebase.auth import MockFirebaseAuthClient
from skillconnect.application.usecase.auth import (
    RegisterRequest,
    RegisterUseCase,
    ResetPasswordRequest,
    ResetPasswordUseCase,
)
from skillconnect.domain.error import UsernameInUseError, ValidationError
from skillconnect.domain.repository import ProfileRepository
from skillconnect.domain.service import AuthClient
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestRegisterUseCase:
    """Tests for RegisterUseCase."""

    @pytest.mark.asyncio
    async def test_register_signs_in_new_account(self, unit_env):
        """Should create the account, sign it in and return the lowercase username."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        use_case = await unit_env.get(RegisterUseCase)

        # Act
        response = await use_case.execute(
            RegisterRequest(
                username="Carol", email="carol@example.com", password="secret123"
            )
        )

        # Assert
        assert response.username == "carol"
        assert response.email == "carol@example.com"
        assert auth.current_principal().id == response.user_id
        profile = await profile_repo.find_by_id(response.user_id)
        assert profile.username.root == "carol"

    @pytest.mark.asyncio
    async def test_second_registration_with_same_username(self, unit_env):
        """Should refuse a username registered a moment ago."""
        use_case = await unit_env.get(RegisterUseCase)
        await use_case.execute(
            RegisterRequest(username="dora", email="d1@example.com", password="secret123")
        )

        with pytest.raises(UsernameInUseError):
            await use_case.execute(
                RegisterRequest(
                    username="Dora", email="d2@example.com", password="secret123"
                )
            )


class TestResetPasswordUseCase:
    """Tests for ResetPasswordUseCase."""

    @pytest.mark.asyncio
    async def test_reset_sends_email(self, unit_env):
        """Should request the reset email and confirm it."""
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        use_case = await unit_env.get(ResetPasswordUseCase)

        response = await use_case.execute(ResetPasswordRequest(email="e@example.com"))

        assert auth.password_resets == ["e@example.com"]
        assert "check your inbox" in response.message

    @pytest.mark.asyncio
    async def test_reset_requires_email(self, unit_env):
        """Should raise ValidationError for a blank email."""
        use_case = await unit_env.get(ResetPasswordUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(ResetPasswordRequest(email=""))
