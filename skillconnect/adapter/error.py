"""Infrastructure layer errors."""

from skillconnect.domain.error import ExternalServiceError


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError, ExternalServiceError):
    """External provider error."""

    pass
