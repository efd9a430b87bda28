#!/usr/bin/env python3
"""Apply the social auth schema migrations with Logfire error tracking.

Usage:
    run_migrations.py [REVISION]   (defaults to "head")
"""

import sys
import logfire
from alembic import command
from alembic.config import Config

from socialauth.config import Settings
from socialauth.util.logging import setup_logging
from socialauth.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Upgrade the database to the requested revision."""
    settings = Settings()
    revision = argv[1] if len(argv) > 1 else "head"

    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info("Starting database migrations", revision=revision)

        alembic_cfg = Config("alembic.ini")
        alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)

        command.upgrade(alembic_cfg, revision)

        logfire.info("Database migrations completed", revision=revision)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the deploy fails instead of serving a stale schema
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv))
