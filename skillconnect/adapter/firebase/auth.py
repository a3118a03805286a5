"""Firebase Authentication client.

Talks to the Identity Toolkit REST API (the backend of the Firebase Auth
SDKs) with the project's web API key.
"""

from typing import Any, Optional
from uuid import uuid4

import httpx
import logfire

from skillconnect.adapter.error import ProviderError
from skillconnect.domain.error import (
    DomainError,
    EmailInUseError,
    InvalidCredentialError,
    NotFoundError,
    RateLimitedError,
    WeakPasswordError,
)
from skillconnect.domain.model import Principal
from skillconnect.domain.service.auth_service import AuthClient
from skillconnect.domain.value import UserId

DEFAULT_BASE_URL = "https://identitytoolkit.googleapis.com/v1"

_INVALID_CREDENTIAL_CODES = {
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
}


class FirebaseAuthError(ProviderError):
    """Firebase Auth error."""

    pass


class FirebaseAuthClient(AuthClient):
    """Base class for Firebase Auth clients.

    Provides type distinction for dependency injection.
    """

    pass


def map_auth_error(message: str, email: str = "") -> DomainError:
    """Translate an Identity Toolkit error message into a domain error.

    Messages look like ``"WEAK_PASSWORD : Password should be at least 6
    characters"``; only the code before the colon is significant.

    Args:
        message: ``error.message`` from the response body
        email: Email the request was about

    Returns:
        Domain error to raise
    """
    code = message.split(" : ", 1)[0].strip()
    if code == "EMAIL_NOT_FOUND":
        return NotFoundError("Account", email)
    if code in _INVALID_CREDENTIAL_CODES:
        return InvalidCredentialError("The email or password is incorrect.")
    if code == "TOO_MANY_ATTEMPTS_TRY_LATER":
        return RateLimitedError("Too many attempts. Please try again later.")
    if code == "EMAIL_EXISTS":
        return EmailInUseError(email)
    if code == "WEAK_PASSWORD":
        return WeakPasswordError("Password should be at least 6 characters.")
    return FirebaseAuthError(message)


class RealFirebaseAuthClient(FirebaseAuthClient):
    """Firebase Auth client backed by the Identity Toolkit REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize Firebase Auth client.

        Args:
            api_key: Web API key of the Firebase project
            base_url: Identity Toolkit base URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests pass a MockTransport)
        """
        super().__init__()
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def sign_in(self, email: str, password: str) -> Principal:
        """Sign in with email and password."""
        data = await self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
            email=email,
        )
        principal = self._principal(data)
        self._set_current(principal)
        logfire.info("Firebase sign-in succeeded", user_id=principal.id)
        return principal

    async def sign_up(self, email: str, password: str) -> Principal:
        """Create an email/password account and sign it in."""
        data = await self._call(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
            email=email,
        )
        principal = self._principal(data)
        self._set_current(principal)
        logfire.info("Firebase account created", user_id=principal.id)
        return principal

    async def update_display_name(self, principal: Principal, display_name: str) -> None:
        """Set the account's display name."""
        if not principal.id_token:
            raise FirebaseAuthError("Principal has no ID token")

        await self._call(
            "update",
            {
                "idToken": principal.id_token,
                "displayName": display_name,
                "returnSecureToken": False,
            },
            email=principal.email,
        )
        current = self.current_principal()
        if current and current.id == principal.id:
            self._set_current(current.model_copy(update={"display_name": display_name}))

    async def send_password_reset(self, email: str) -> None:
        """Send a password reset email."""
        await self._call(
            "sendOobCode", {"requestType": "PASSWORD_RESET", "email": email}, email=email
        )

    async def _call(
        self, endpoint: str, payload: dict[str, Any], email: str = ""
    ) -> dict[str, Any]:
        """POST to ``accounts:<endpoint>`` and return the JSON body.

        Raises:
            DomainError: Mapped from the provider's error code
            FirebaseAuthError: On transport failure or an unknown error code
        """
        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    url, params={"key": self.api_key}, json=payload
                )
        except httpx.HTTPError as e:
            logfire.error("Firebase Auth HTTP error", endpoint=endpoint, error=str(e))
            raise FirebaseAuthError(f"HTTP error calling {endpoint}: {e}") from e

        if response.status_code != 200:
            message = _error_message(response)
            logfire.warn(
                "Firebase Auth request rejected",
                endpoint=endpoint,
                status_code=response.status_code,
                error=message,
            )
            raise map_auth_error(message, email)

        return response.json()

    @staticmethod
    def _principal(data: dict[str, Any]) -> Principal:
        return Principal(
            id=UserId(data["localId"]),
            email=data.get("email", ""),
            display_name=data.get("displayName") or None,
            id_token=data.get("idToken"),
        )


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}: {response.text}"


class MockFirebaseAuthClient(FirebaseAuthClient):
    """Mock Firebase Auth client for testing.

    Keeps accounts in memory and records calls instead of making real API
    requests.
    """

    def __init__(self) -> None:
        """Initialize mock client with no accounts."""
        super().__init__()
        self.accounts: dict[str, tuple[str, Principal]] = {}
        self.sign_in_calls: list[str] = []
        self.display_name_updates: list[tuple[UserId, str]] = []
        self.password_resets: list[str] = []
        self.fail_display_name_update = False

    def add_account(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> Principal:
        """Register an account directly, without signing it in."""
        principal = Principal(
            id=UserId(f"uid-{uuid4().hex[:12]}"),
            email=email,
            display_name=display_name,
            id_token=f"token-{uuid4().hex}",
        )
        self.accounts[email.lower()] = (password, principal)
        return principal

    async def sign_in(self, email: str, password: str) -> Principal:
        """Check the password against the stored account."""
        self.sign_in_calls.append(email)
        account = self.accounts.get(email.lower())
        if account is None:
            raise NotFoundError("Account", email)
        stored_password, principal = account
        if stored_password != password:
            raise InvalidCredentialError("The email or password is incorrect.")
        self._set_current(principal)
        return principal

    async def sign_up(self, email: str, password: str) -> Principal:
        """Create an account and sign it in."""
        if email.lower() in self.accounts:
            raise EmailInUseError(email)
        if len(password) < 6:
            raise WeakPasswordError("Password should be at least 6 characters.")
        principal = self.add_account(email, password)
        self._set_current(principal)
        return principal

    async def update_display_name(self, principal: Principal, display_name: str) -> None:
        """Record the display name change."""
        if self.fail_display_name_update:
            raise FirebaseAuthError("Mock display name update failure")
        self.display_name_updates.append((principal.id, display_name))
        password, _ = self.accounts[principal.email.lower()]
        updated = principal.model_copy(update={"display_name": display_name})
        self.accounts[principal.email.lower()] = (password, updated)
        current = self.current_principal()
        if current and current.id == principal.id:
            self._set_current(updated)

    async def send_password_reset(self, email: str) -> None:
        """Record the reset request."""
        self.password_resets.append(email)
