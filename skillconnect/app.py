"""Application entry point for the presentation layer.

Usage:
    container = create_app()
    async with container() as session:
        login = await session.get(LoginUseCase)
        await login.execute(LoginRequest(identifier="alice", password="..."))
    await container.close()
"""

from dishka import AsyncContainer

from skillconnect.config import Settings
from skillconnect.util.di.container import create_container
from skillconnect.util.logging import setup_logging
from skillconnect.util.observability import configure_logfire, instrument_httpx


def create_app(settings: Settings | None = None) -> AsyncContainer:
    """Configure logging and observability and build the DI container.

    Args:
        settings: Settings for logging setup and for the container; loaded
            from the environment when omitted

    Returns:
        Production container; close it on shutdown to release the database
        pool and the change feed connection
    """
    settings = settings or Settings()

    setup_logging(settings)
    configure_logfire(settings)

    # Logfire must be configured before instrumentation
    instrument_httpx()

    return create_container(settings)
