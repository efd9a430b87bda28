#!/usr/bin/env python3
"""Start the social auth API with Logfire error tracking for startup errors."""

import sys
import logfire
import uvicorn

from socialauth.config import Settings
from socialauth.util.logging import setup_logging
from socialauth.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure logging and Logfire early to catch startup errors
    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info(
            "Starting social auth API",
            environment=settings.environment,
            port=settings.port,
        )

        uvicorn.run(
            "socialauth.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            proxy_headers=True,  # X-Forwarded-For feeds state origin binding
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
