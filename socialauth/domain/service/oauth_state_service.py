"""CSRF state service for the provider redirect round trip."""

import asyncio
import secrets
from datetime import datetime, timedelta

import logfire

from socialauth.config import OAuthStateSettings
from socialauth.domain.model.oauth_state import OAuthState
from socialauth.domain.repository.oauth_state import OAuthStateRepository
from socialauth.domain.value import AuthErrorCode, Failure, StateMetadata

from .base import Clock, Service, utc_now


class OAuthStateService(Service):
    """Issues, validates and single-use-consumes state tokens.

    Tokens are ``<64 hex chars>.<expiry epoch seconds>``. The expiry suffix
    lets a token that was already swept still be reported as expired rather
    than unknown; it carries no authority of its own.
    """

    def __init__(
        self,
        repository: OAuthStateRepository,
        settings: OAuthStateSettings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize state service.

        Args:
            repository: Pending state storage
            settings: TTL, sweep interval and binding mode
            clock: Source of the current time
        """
        self.repository = repository
        self.settings = settings
        self.clock = clock

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.settings.ttl_seconds)

    def issue(self, provider: str, metadata: StateMetadata | None = None) -> str:
        """Issue a new state token bound to a provider and request origin.

        Args:
            provider: Provider name the authorization URL is built for
            metadata: Origin IP / user agent of the requesting client

        Returns:
            The opaque state token
        """
        now = self.clock()
        expires_at = now + self.ttl
        token = f"{secrets.token_hex(32)}.{int(expires_at.timestamp())}"

        self.repository.add(
            OAuthState(
                token=token,
                provider=provider.lower(),
                issued_at=now,
                expires_at=expires_at,
                metadata=metadata or StateMetadata(),
            )
        )
        logfire.debug(
            "OAuth state issued",
            provider=provider,
            state=token[:8] + "...",
            expires_at=expires_at.isoformat(),
        )
        return token

    def validate_and_consume(
        self,
        provider: str,
        token: str | None,
        current_metadata: StateMetadata | None = None,
    ) -> OAuthState | Failure:
        """Validate a state token and consume it.

        The entry is removed on the first lookup whatever the outcome.

        Args:
            provider: Provider the callback claims to come from
            token: State token presented by the client
            current_metadata: Origin of the callback request

        Returns:
            The consumed state entry, or a failure tagged with
            INVALID_STATE, STATE_PROVIDER_MISMATCH, STATE_EXPIRED or
            STATE_METADATA_MISMATCH
        """
        with logfire.span("oauth_state_service.validate_and_consume", provider=provider):
            if not token:
                return Failure(
                    code=AuthErrorCode.INVALID_STATE,
                    message="State parameter missing",
                )

            now = self.clock()
            entry = self.repository.pop(token)

            if entry is None:
                if self._embedded_expiry_passed(token, now):
                    logfire.warn("Swept OAuth state presented", state=token[:8] + "...")
                    return Failure(
                        code=AuthErrorCode.STATE_EXPIRED, message="State has expired"
                    )
                logfire.warn("Unknown OAuth state presented", state=token[:8] + "...")
                return Failure(
                    code=AuthErrorCode.INVALID_STATE,
                    message="Invalid state parameter",
                )

            if entry.provider != provider.lower():
                logfire.warn(
                    "OAuth state provider mismatch",
                    expected=entry.provider,
                    actual=provider,
                )
                return Failure(
                    code=AuthErrorCode.STATE_PROVIDER_MISMATCH,
                    message="State provider mismatch",
                )

            if entry.is_expired(now):
                return Failure(
                    code=AuthErrorCode.STATE_EXPIRED, message="State has expired"
                )

            mismatch = self._metadata_mismatch(
                entry.metadata, current_metadata or StateMetadata()
            )
            if mismatch:
                logfire.warn("OAuth state metadata mismatch", field=mismatch)
                return Failure(
                    code=AuthErrorCode.STATE_METADATA_MISMATCH,
                    message=f"State validation failed ({mismatch} mismatch)",
                )

            return entry

    def _metadata_mismatch(
        self, stored: StateMetadata, current: StateMetadata
    ) -> str | None:
        """Name of the first bound field that does not match, if any."""
        for field in ("origin_ip", "user_agent"):
            expected = getattr(stored, field)
            actual = getattr(current, field)
            if not expected:
                continue
            if not actual and not self.settings.strict_metadata_binding:
                continue
            if expected != actual:
                return field
        return None

    @staticmethod
    def _embedded_expiry_passed(token: str, now: datetime) -> bool:
        _, _, suffix = token.rpartition(".")
        if not suffix.isdigit():
            return False
        return now.timestamp() > int(suffix)

    def sweep_expired(self) -> int:
        """Drop entries that are past expiry.

        Returns:
            Number of entries removed
        """
        removed = self.repository.delete_expired(self.clock())
        if removed:
            logfire.info(
                "Expired OAuth states swept",
                removed=removed,
                remaining=len(self.repository),
            )
        return removed

    async def run_sweeper(self) -> None:
        """Sweep expired entries forever, every ``sweep_interval_seconds``.

        Meant to run as a background task; stops when cancelled.
        """
        interval = self.settings.sweep_interval_seconds
        logfire.info("OAuth state sweeper started", interval_seconds=interval)
        while True:
            await asyncio.sleep(interval)
            self.sweep_expired()
