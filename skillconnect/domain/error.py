"""Domain layer errors.

Every failure the presentation layer can see is one of these types. None
of them is fatal to the process; the caller renders the message next to
the control that triggered it.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Input rejected before any call to the store or auth provider."""

    pass


class NotAuthenticatedError(DomainError):
    """Raised when an operation requires a signed-in principal and none is present."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"You must be logged in to {action}.")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class WriteConflictError(DomainError):
    """Optimistic concurrency collision inside a store transaction.

    Raised by store transactions when a guarded document changed after it
    was read. The reputation core retries on it and only lets it escape
    once the attempt budget is spent.
    """

    def __init__(self, resource: str, identifier: str, attempts: int | None = None):
        self.resource = resource
        self.identifier = identifier
        self.attempts = attempts
        message = f"Concurrent update to {resource} {identifier}"
        if attempts is not None:
            message += f" (gave up after {attempts} attempts)"
        super().__init__(message)


class InvalidCredentialError(DomainError):
    """Email/password pair rejected by the auth provider."""

    pass


class RateLimitedError(DomainError):
    """The auth provider is throttling this account or client."""

    pass


class WeakPasswordError(DomainError):
    """The auth provider rejected the password as too weak."""

    pass


class EmailInUseError(DomainError):
    """Another account already uses this email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already in use: {email}")


class UsernameInUseError(DomainError):
    """Another profile already claims this username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already taken: {username}")


class ExternalServiceError(DomainError):
    """Network, auth provider or store failure, carrying the provider's message."""

    pass


class WriteError(ExternalServiceError):
    """A store write failed."""

    pass
