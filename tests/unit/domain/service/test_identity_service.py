"""Unit tests for IdentityService."""

import pytest

from skillconnect.adapter.firebase.auth import MockFirebaseAuthClient
from skillconnect.adapter.firebase.storage import MockBlobStore
from skillconnect.config import ProfileSettings
from skillconnect.domain.error import (
    EmailInUseError,
    InvalidCredentialError,
    NotFoundError,
    UsernameInUseError,
    ValidationError,
    WeakPasswordError,
    WriteError,
)
from skillconnect.domain.repository import ProfileRepository
from skillconnect.domain.service import AuthClient, IdentityService, ProfileService
from skillconnect.domain.value import Username
from skillconnect.persistence.repository.inmemory import (
    InMemoryDatabase,
    InMemoryProfileRepository,
)
from tests.conftest import make_profile, next_matching
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestResolveLoginIdentifier:
    """Tests for signing in by email or username."""

    @pytest.mark.asyncio
    async def test_username_is_case_insensitive(self, unit_env):
        """Should resolve "Alice" and "alice" to the same principal."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        service = await unit_env.get(IdentityService)

        principal = auth.add_account("alice@example.com", "secret123")
        await profile_repo.save(
            make_profile("alice", user_id=principal.id, email="alice@example.com")
        )

        # Act
        upper = await service.resolve_login_identifier("Alice", "secret123")
        lower = await service.resolve_login_identifier("alice", "secret123")

        # Assert
        assert upper.id == principal.id
        assert lower.id == principal.id
        assert auth.sign_in_calls == ["alice@example.com", "alice@example.com"]

    @pytest.mark.asyncio
    async def test_email_goes_straight_to_provider(self, unit_env):
        """Should sign in directly when the identifier contains "@"."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        service = await unit_env.get(IdentityService)
        principal = auth.add_account("bob@example.com", "secret123")

        # Act
        result = await service.resolve_login_identifier(
            "  bob@example.com ", "secret123"
        )

        # Assert
        assert result.id == principal.id
        assert service.current_principal() == principal

    @pytest.mark.asyncio
    async def test_unknown_username_never_contacts_provider(self, unit_env):
        """Should raise NotFoundError without a sign-in attempt."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        service = await unit_env.get(IdentityService)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.resolve_login_identifier("nobody", "secret123")
        assert auth.sign_in_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "identifier,password",
        [("", "secret123"), ("alice", ""), ("   ", "   ")],
    )
    async def test_empty_fields_rejected(self, unit_env, identifier, password):
        """Should raise ValidationError before any lookup."""
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        service = await unit_env.get(IdentityService)

        with pytest.raises(ValidationError, match="cannot be empty"):
            await service.resolve_login_identifier(identifier, password)
        assert auth.sign_in_calls == []

    @pytest.mark.asyncio
    async def test_ambiguous_username_not_found(self, unit_env):
        """Should refuse a username shared by several profiles."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        database = await unit_env.get(InMemoryDatabase)
        service = await unit_env.get(IdentityService)

        # Written around the repository, as a legacy store could hold
        for profile in (make_profile("twin"), make_profile("twin")):
            database.profiles[profile.id] = profile

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.resolve_login_identifier("twin", "secret123")
        assert auth.sign_in_calls == []

    @pytest.mark.asyncio
    async def test_profile_without_email_not_found(self, unit_env):
        """Should raise NotFoundError when the profile carries no email."""
        profile_repo = await unit_env.get(ProfileRepository)
        service = await unit_env.get(IdentityService)
        await profile_repo.save(make_profile("quiet", email=""))

        with pytest.raises(NotFoundError, match="Email for username"):
            await service.resolve_login_identifier("quiet", "secret123")

    @pytest.mark.asyncio
    async def test_wrong_password_propagates(self, unit_env):
        """Should surface the provider's credential error."""
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        service = await unit_env.get(IdentityService)
        principal = auth.add_account("alice@example.com", "secret123")
        await profile_repo.save(
            make_profile("alice", user_id=principal.id, email="alice@example.com")
        )

        with pytest.raises(InvalidCredentialError):
            await service.resolve_login_identifier("alice", "wrong-password")
        assert service.current_principal() is None


class TestRegisterAccount:
    """Tests for account registration."""

    @pytest.mark.asyncio
    async def test_creates_identity_and_profile(self, unit_env):
        """Should create the account, set its display name and store a profile."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        service = await unit_env.get(IdentityService)

        # Act
        principal = await service.register_account(
            "Carol", "carol@example.com", "secret123"
        )

        # Assert
        assert principal.display_name == "Carol"
        assert auth.display_name_updates == [(principal.id, "Carol")]
        profile = await profile_repo.find_by_id(principal.id)
        assert profile.username == Username("carol")
        assert profile.username.root == "carol"
        assert profile.email == "carol@example.com"
        assert profile.bio == "Tap Edit to add a bio!"
        assert profile.skill_points == 0

    @pytest.mark.asyncio
    async def test_claimed_username_rejected_before_sign_up(self, unit_env):
        """Should raise UsernameInUseError without creating an identity."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        service = await unit_env.get(IdentityService)
        await profile_repo.save(make_profile("carol"))

        # Act & Assert
        with pytest.raises(UsernameInUseError):
            await service.register_account("CAROL", "other@example.com", "secret123")
        assert "other@example.com" not in auth.accounts

    @pytest.mark.asyncio
    async def test_placeholder_username_rejected(self, unit_env):
        """Should not let anyone register the placeholder username."""
        service = await unit_env.get(IdentityService)

        with pytest.raises(UsernameInUseError):
            await service.register_account("New User", "n@example.com", "secret123")

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self, unit_env):
        """Should surface weak passwords and taken emails without a profile."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        database = await unit_env.get(InMemoryDatabase)
        service = await unit_env.get(IdentityService)
        auth.add_account("taken@example.com", "secret123")

        # Act & Assert
        with pytest.raises(WeakPasswordError):
            await service.register_account("dave", "dave@example.com", "123")
        with pytest.raises(EmailInUseError):
            await service.register_account("erin", "taken@example.com", "secret123")
        assert database.profiles == {}

    @pytest.mark.asyncio
    async def test_missing_field_rejected(self, unit_env):
        """Should raise ValidationError when a field is blank."""
        service = await unit_env.get(IdentityService)

        with pytest.raises(ValidationError, match="fill in all fields"):
            await service.register_account("  ", "x@example.com", "secret123")

    @pytest.mark.asyncio
    async def test_display_name_failure_is_not_fatal(self, unit_env):
        """Should still register when the display name request fails."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        profile_repo = await unit_env.get(ProfileRepository)
        service = await unit_env.get(IdentityService)
        auth.fail_display_name_update = True

        # Act
        principal = await service.register_account(
            "frank", "frank@example.com", "secret123"
        )

        # Assert
        assert principal.display_name is None
        assert await profile_repo.find_by_id(principal.id) is not None

    @pytest.mark.asyncio
    async def test_profile_write_failure_is_repaired_by_ensure_profile(self):
        """Should leave the identity in place and recreate the profile later."""

        class FailingSaveRepository(InMemoryProfileRepository):
            async def save(self, profile):
                raise WriteError("store unavailable")

        # Arrange
        database = InMemoryDatabase()
        auth = MockFirebaseAuthClient()
        settings = ProfileSettings()
        service = IdentityService(auth, FailingSaveRepository(database), settings)

        # Act
        with pytest.raises(WriteError):
            await service.register_account("gina", "gina@example.com", "secret123")

        # Assert - the account exists and the next session repairs the profile
        assert "gina@example.com" in auth.accounts
        principal = auth.current_principal()
        profiles = ProfileService(
            InMemoryProfileRepository(database),
            database.change_feed,
            MockBlobStore(),
            settings,
        )
        profile = await profiles.ensure_profile(principal)
        assert profile.username == Username("gina")
        assert profile.skill_points == 0


class TestSessionState:
    """Tests for sign-out, password reset and auth state streaming."""

    @pytest.mark.asyncio
    async def test_watch_auth_state_follows_sign_in_and_out(self, unit_env):
        """Should emit None, then the principal, then None again."""
        # Arrange
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        service = await unit_env.get(IdentityService)
        principal = auth.add_account("hank@example.com", "secret123")

        async with service.watch_auth_state() as states:
            # Act & Assert
            assert await next_matching(states) is None

            await service.authenticate_with_email("hank@example.com", "secret123")
            signed_in = await next_matching(states, lambda p: p is not None)
            assert signed_in.id == principal.id

            await service.sign_out()
            assert await next_matching(states, lambda p: p is None) is None

    @pytest.mark.asyncio
    async def test_send_password_reset(self, unit_env):
        """Should forward the email and reject a blank one."""
        auth: MockFirebaseAuthClient = await unit_env.get(AuthClient)
        service = await unit_env.get(IdentityService)

        await service.send_password_reset(" ivy@example.com ")
        with pytest.raises(ValidationError, match="reset your password"):
            await service.send_password_reset("   ")

        assert auth.password_resets == ["ivy@example.com"]
