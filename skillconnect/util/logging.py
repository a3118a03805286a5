"""Logging configuration for the application."""

import logging
import sys

from skillconnect.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure application logging.

    Sets up structured logging with appropriate levels based on environment.

    Args:
        settings: Application settings
    """
    if settings.debug:
        level = logging.DEBUG
    elif settings.environment == "production":
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)

    logging.getLogger("skillconnect").setLevel(level)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: environment={settings.environment}, level={logging.getLevelName(level)}"
    )
