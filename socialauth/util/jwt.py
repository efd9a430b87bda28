"""Session JWT encoding with PyJWT.

Sessions use registered claims: ``sub`` holds the user ID, ``iss`` is fixed
to this service and ``iat``/``exp`` bound the lifetime.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, Field

from socialauth.config import AuthSettings

SESSION_ISSUER = "socialauth"


class TokenPayload(BaseModel):
    """Decoded session claims."""

    user_id: str = Field(alias="sub")
    username: str
    issued_at: datetime = Field(alias="iat")
    exp: datetime


class JWTError(Exception):
    """Session token could not be verified."""


def create_token(
    user_id: str, username: str, settings: AuthSettings
) -> tuple[str, datetime]:
    """Sign a session token for ``user_id``.

    Returns:
        Encoded token and its expiry
    """
    issued_at = datetime.now(timezone.utc)
    expiry = issued_at + timedelta(days=settings.jwt_expiry_days)
    payload = {
        "sub": user_id,
        "username": username,
        "iss": SESSION_ISSUER,
        "iat": issued_at,
        "exp": expiry,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expiry


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify signature, issuer and expiry of a session token.

    Raises:
        JWTError: If the token is expired, forged or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=SESSION_ISSUER,
            options={"require": ["sub", "iat", "exp", "iss"]},
        )
        return TokenPayload.model_validate(payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")
