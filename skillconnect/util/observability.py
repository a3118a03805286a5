"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Comment added", comment_id=str(comment_id), thread_id=str(thread_id))

    # Manual spans for critical operations
    with logfire.span("reputation_service.award_skill_point", comment_id=...):
        ...
"""

import logfire
from sqlalchemy.ext.asyncio import AsyncEngine

from skillconnect.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Token Configuration:
    - Set OBSERVABILITY__LOGFIRE_TOKEN environment variable to enable cloud sending
    - If token is present, logs will be sent to Logfire cloud by default
    - Can be explicitly controlled with OBSERVABILITY__SEND_TO_LOGFIRE

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "skillconnect-core",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Instrument SQLAlchemy engine with Logfire.

    Traces every statement, including the version-guarded updates issued
    by store transactions.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Instrument httpx with Logfire.

    Traces the Firebase Auth and Firebase Storage REST calls.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
