"""Interface layer errors and HTTP mapping of domain failures."""

from typing import Any

from fastapi import status

from socialauth.domain.value import AuthErrorCode, Failure


class InterfaceError(Exception):
    """Base interface error."""

    pass


class AuthenticationRequiredError(InterfaceError):
    """Request to an authenticated route without a valid session."""

    pass


# Every other expected failure is a 400
_STATUS_OVERRIDES: dict[AuthErrorCode, int] = {
    AuthErrorCode.EMAIL_EXISTS_DIFFERENT_PROVIDER: status.HTTP_409_CONFLICT,
}


def status_for(code: AuthErrorCode) -> int:
    """HTTP status for an expected failure code."""
    return _STATUS_OVERRIDES.get(code, status.HTTP_400_BAD_REQUEST)


def failure_body(failure: Failure) -> dict[str, Any]:
    """JSON body for a failure.

    Detail keys (e.g. ``existingUser``) are merged at the top level as-is.
    """
    body: dict[str, Any] = {"error": failure.code.value, "message": failure.message}
    if failure.detail:
        body.update(failure.detail)
    return body
