"""Shared pieces for domain services."""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Service:
    """Base class for domain services.

    Services that compare against the current time take a ``clock`` so tests
    can pin and advance it.
    """
