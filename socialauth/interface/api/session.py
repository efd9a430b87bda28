"""Request helpers shared by authenticated routes."""

from fastapi import Request

from socialauth.config import Settings
from socialauth.domain.service import JWTService
from socialauth.interface.error import AuthenticationRequiredError

AUTH_COOKIE = "auth_token"


def extract_session_token(request: Request) -> str | None:
    """Session token from ``Authorization: Bearer`` or the auth cookie.

    The header wins when both are present.
    """
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(AUTH_COOKIE)


def require_user_id(request: Request, jwt_service: JWTService) -> str:
    """Authenticated user ID for the request.

    Raises:
        AuthenticationRequiredError: If the session is missing or invalid
    """
    user_id = jwt_service.get_user_id_from_token(extract_session_token(request))
    if not user_id:
        raise AuthenticationRequiredError("Authentication required")
    return user_id


def client_ip(request: Request) -> str | None:
    """Caller IP: first hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def user_agent(request: Request) -> str | None:
    return request.headers.get("user-agent")


def cookie_options(settings: Settings) -> dict:
    """Session cookie attributes.

    Production (cross-site frontend): SameSite=None, Secure.
    Development (same-origin over http): SameSite=Lax.
    """
    is_production = settings.environment == "production"
    return {
        "httponly": True,
        "secure": is_production,
        "samesite": "none" if is_production else "lax",
        "domain": settings.auth.cookie_domain,
        "path": "/",
    }
