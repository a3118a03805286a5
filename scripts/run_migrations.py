#!/usr/bin/env python3
"""Upgrade the SkillConnect schema (users, threads, comments).

Usage: run_migrations.py [REVISION]

Upgrades to ``head`` unless a revision is given. Failures are reported to
Logfire before the error propagates.
"""

import sys
import logfire
from alembic import command
from alembic.config import Config

from skillconnect.config import Settings
from skillconnect.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Upgrade the schema to the requested revision."""
    settings = Settings()
    configure_logfire(settings)

    revision = argv[0] if argv else "head"
    try:
        logfire.info("Upgrading SkillConnect schema", revision=revision)
        command.upgrade(Config("alembic.ini"), revision)
        logfire.info("SkillConnect schema up to date", revision=revision)
        return 0

    except Exception as e:
        logfire.error(
            "SkillConnect schema upgrade failed",
            revision=revision,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
