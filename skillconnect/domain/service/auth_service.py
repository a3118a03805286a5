"""Identity gateway domain service."""

import asyncio
from typing import Optional

import logfire

from skillconnect.config import ProfileSettings
from skillconnect.domain.error import (
    ExternalServiceError,
    NotFoundError,
    UsernameInUseError,
    ValidationError,
    WriteError,
)
from skillconnect.domain.model import Principal, Profile
from skillconnect.domain.repository import ProfileRepository
from skillconnect.domain.value import PLACEHOLDER_USERNAME, Username

from .base import Service
from .subscription import Subscription


class AuthClient:
    """Auth provider interface.

    Implementations talk to the provider and call ``_set_current`` whenever
    the signed-in principal changes.
    """

    def __init__(self) -> None:
        self._current: Optional[Principal] = None
        self._watchers: set[asyncio.Event] = set()

    async def sign_in(self, email: str, password: str) -> Principal:
        """Authenticate with email and password.

        Raises:
            InvalidCredentialError: If the password is wrong
            NotFoundError: If no account uses the email
            RateLimitedError: If the provider throttles the request
        """
        raise NotImplementedError

    async def sign_up(self, email: str, password: str) -> Principal:
        """Create an account and sign it in.

        Raises:
            WeakPasswordError: If the provider rejects the password
            EmailInUseError: If the email already has an account
        """
        raise NotImplementedError

    async def update_display_name(self, principal: Principal, display_name: str) -> None:
        """Send a profile change request setting the display name."""
        raise NotImplementedError

    async def send_password_reset(self, email: str) -> None:
        """Ask the provider to email a password reset link."""
        raise NotImplementedError

    def current_principal(self) -> Optional[Principal]:
        """The signed-in principal, if any."""
        return self._current

    async def sign_out(self) -> None:
        """Forget the signed-in principal."""
        self._set_current(None)

    def watch(self) -> asyncio.Event:
        """Register an event set on every auth state change."""
        event = asyncio.Event()
        self._watchers.add(event)
        return event

    def unwatch(self, event: asyncio.Event) -> None:
        """Drop an event registered with ``watch``."""
        self._watchers.discard(event)

    def _set_current(self, principal: Optional[Principal]) -> None:
        self._current = principal
        for event in self._watchers:
            event.set()


class IdentityService(Service):
    """Domain service resolving login credentials to principals."""

    def __init__(
        self,
        auth_client: AuthClient,
        profile_repository: ProfileRepository,
        profile_settings: ProfileSettings,
    ) -> None:
        """Initialize identity service.

        Args:
            auth_client: Auth provider client
            profile_repository: Profile repository, used for username lookup
            profile_settings: Defaults for new profiles
        """
        self.auth_client = auth_client
        self.profile_repository = profile_repository
        self.profile_settings = profile_settings

    async def authenticate_with_email(self, email: str, password: str) -> Principal:
        """Sign in with an email and password.

        Args:
            email: Account email
            password: Account password

        Returns:
            The authenticated principal

        Raises:
            InvalidCredentialError, NotFoundError, RateLimitedError,
            ExternalServiceError: As reported by the auth provider
        """
        with logfire.span("identity_service.authenticate_with_email", email=email):
            principal = await self.auth_client.sign_in(email, password)
            logfire.info("Principal authenticated", user_id=principal.id)
            return principal

    async def resolve_login_identifier(
        self, identifier: str, password: str
    ) -> Principal:
        """Sign in with either an email or a username.

        An identifier containing "@" is an email. Anything else is a
        username: the profile with that (lowercase) username supplies the
        email to sign in with. Profiles store the email redundantly for this
        lookup.

        Args:
            identifier: Email or username, any case
            password: Account password

        Returns:
            The authenticated principal

        Raises:
            ValidationError: If identifier or password is empty
            NotFoundError: If the username matches no profile, several
                profiles, or a profile without an email
        """
        identifier = identifier.strip()
        password = password.strip()
        if not identifier or not password:
            raise ValidationError("Email/Username and Password cannot be empty.")

        if "@" in identifier:
            return await self.authenticate_with_email(identifier, password)

        with logfire.span("identity_service.resolve_username", identifier=identifier):
            try:
                username = Username(identifier)
            except ValueError:
                raise NotFoundError("Username", identifier)

            matches = await self.profile_repository.find_by_username(username)
            if len(matches) != 1:
                logfire.warn(
                    "Username did not resolve to exactly one profile",
                    username=username.root,
                    matches=len(matches),
                )
                raise NotFoundError("Username", identifier)

            email = matches[0].email
            if not email:
                logfire.warn("Profile has no email", user_id=matches[0].id)
                raise NotFoundError("Email for username", username.root)

        return await self.authenticate_with_email(email, password)

    async def register_account(
        self, username: str, email: str, password: str
    ) -> Principal:
        """Create an auth identity and its profile.

        The two writes are not atomic. If the profile write fails the
        identity still exists, the error propagates, and
        ``ProfileService.ensure_profile`` recreates the profile on the next
        session start.

        Args:
            username: Desired username (stored lowercase)
            email: Account email
            password: Account password

        Returns:
            The new principal

        Raises:
            ValidationError: If a field is empty
            UsernameInUseError: If the username is already claimed
            WeakPasswordError, EmailInUseError: As reported by the auth provider
        """
        username = username.strip()
        email = email.strip()
        if not username or not email or not password:
            raise ValidationError("Please fill in all fields.")

        try:
            claimed = Username(username)
        except ValueError:
            raise ValidationError("Username must be 1-64 characters.")

        with logfire.span(
            "identity_service.register_account", username=claimed.root, email=email
        ):
            if claimed == PLACEHOLDER_USERNAME or await self.profile_repository.find_by_username(
                claimed
            ):
                logfire.warn("Username already taken", username=claimed.root)
                raise UsernameInUseError(claimed.root)

            principal = await self.auth_client.sign_up(email, password)

            try:
                await self.auth_client.update_display_name(principal, username)
                principal = principal.model_copy(update={"display_name": username})
            except ExternalServiceError as e:
                logfire.warn(
                    "Display name change request failed",
                    user_id=principal.id,
                    error=str(e),
                )

            profile = Profile(
                id=principal.id,
                username=claimed,
                bio=self.profile_settings.default_bio,
                email=email,
                skill_points=0,
            )
            try:
                await self.profile_repository.save(profile)
            except (WriteError, UsernameInUseError) as e:
                logfire.error(
                    "Profile write failed after account creation",
                    user_id=principal.id,
                    error=str(e),
                )
                raise

            logfire.info(
                "Account registered", user_id=principal.id, username=claimed.root
            )
            return principal

    def current_principal(self) -> Optional[Principal]:
        """The signed-in principal, if any."""
        return self.auth_client.current_principal()

    async def sign_out(self) -> None:
        """Sign the current principal out."""
        principal = self.auth_client.current_principal()
        await self.auth_client.sign_out()
        logfire.info("Signed out", user_id=principal.id if principal else None)

    async def send_password_reset(self, email: str) -> None:
        """Email a password reset link.

        Raises:
            ValidationError: If the email is empty
        """
        email = email.strip()
        if not email:
            raise ValidationError("Please enter your email to reset your password.")

        with logfire.span("identity_service.send_password_reset", email=email):
            await self.auth_client.send_password_reset(email)
            logfire.info("Password reset requested", email=email)

    def watch_auth_state(self) -> Subscription[Optional[Principal]]:
        """Stream the signed-in principal.

        Emits the current principal immediately and again after every
        sign-in or sign-out.
        """

        async def produce(emit) -> None:
            changed = self.auth_client.watch()
            try:
                while True:
                    emit(self.auth_client.current_principal())
                    await changed.wait()
                    changed.clear()
            finally:
                self.auth_client.unwatch(changed)

        return Subscription("auth_state", produce)
