"""JWT session domain service."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from socialauth.config import AuthSettings
from socialauth.domain.model.user import User
from socialauth.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class SessionToken(BaseModel):
    """Session handed to the client after a successful login."""

    session_token: str
    expires_at: datetime


class JWTService(Service):
    """Domain service for session JWT operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_session(self, user: User) -> SessionToken:
        """Mint a session token for a resolved user.

        Args:
            user: Logged-in user

        Returns:
            Signed session token and its expiry
        """
        with logfire.span("jwt_service.create_session", user_id=str(user.id)):
            token, expires_at = create_token(
                str(user.id), user.username.root, self.auth_settings
            )
            logfire.info("Session token created", user_id=str(user.id))
            return SessionToken(session_token=token, expires_at=expires_at)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("Session token verified", user_id=payload.user_id)
                return payload
            except JWTError as e:
                logfire.warn("Session token verification failed", error=str(e))
                raise

    def get_user_id_from_token(self, token: str | None) -> str | None:
        """Extract user ID from a session token without raising.

        Args:
            token: JWT token string (optional)

        Returns:
            User ID if token is valid, None if token is missing or invalid
        """
        if not token:
            return None

        try:
            payload = self.verify_token(token)
            return payload.user_id
        except JWTError as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug(
                "JWT verification failed, treating as unauthenticated", error=str(e)
            )
            return None
