"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container

from skillconnect.config import Settings
from skillconnect.util.di import PROVIDERS, get_provider


def create_container(settings: Settings | None = None) -> AsyncContainer:
    """Build production container (all prod implementations).

    Args:
        settings: Application settings; loaded from environment variables
            and .env when omitted

    Returns:
        Configured DI container with production providers
    """
    # Get provider instances - all are instantiated without arguments
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(
        *provider_instances, context={Settings: settings or Settings()}
    )
