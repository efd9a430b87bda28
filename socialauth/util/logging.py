"""Standard library logging for the API process and scripts."""

import logging
import re
import sys

from socialauth.config import Settings

_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.~+/]+=*", re.IGNORECASE)


class BearerTokenFilter(logging.Filter):
    """Mask bearer tokens that end up in third-party log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if _BEARER.search(message):
            record.msg = _BEARER.sub(r"\1[redacted]", message)
            record.args = None
        return True


def setup_logging(settings: Settings) -> None:
    """Configure root logging.

    Debug mode logs everything; otherwise INFO. httpx and httpcore stay at
    WARNING because their INFO lines include provider URLs with query strings.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(BearerTokenFilter())
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
        force=True,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("socialauth").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )
