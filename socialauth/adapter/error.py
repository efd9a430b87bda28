"""Adapter errors and their conversion to failures."""

import logfire

from socialauth.domain.value import AuthErrorCode, Failure


class AdapterError(Exception):
    """Base adapter error."""


class ProviderError(AdapterError):
    """A provider endpoint answered with an error.

    Raised inside adapters only; ``provider_failure`` turns it into a
    ``Failure`` at the adapter boundary.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def provider_failure(provider: str, operation: str, error: Exception) -> Failure:
    """Log a failed provider call and return a PROVIDER_ERROR failure.

    Args:
        provider: Provider name, e.g. "github"
        operation: What was attempted, e.g. "token exchange"
        error: ProviderError, transport error or undecodable response
    """
    status_code = getattr(error, "status_code", None)
    logfire.error(
        "{provider} {operation} failed",
        provider=provider,
        operation=operation,
        status_code=status_code,
        error=str(error),
    )
    return Failure(
        code=AuthErrorCode.PROVIDER_ERROR,
        message=str(error),
        detail={"status_code": status_code} if status_code else None,
    )
