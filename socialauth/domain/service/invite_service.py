"""Invite code domain service."""

import secrets
from datetime import datetime, timezone
from uuid import uuid4

import logfire

from socialauth.config import InvitationSettings
from socialauth.domain.error import InviteCodeExhaustedError
from socialauth.domain.model.invite_code import InviteCode, InviteUsage
from socialauth.domain.repository import InviteCodeRepository
from socialauth.domain.value import (
    InviteCodeId,
    InviteUsageId,
    StateMetadata,
    UserId,
)
from socialauth.domain.value.invite import (
    InviteExemptionWindow,
    InvitePolicy,
    InviteValidation,
)

from .base import Clock, Service, utc_now

# Excludes look-alike characters (0/O, 1/I)
INVITE_CODE_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZ"
INVITE_CODE_LENGTH = 8


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class InviteCodeService(Service):
    """Domain service for invite code validation and consumption."""

    def __init__(
        self,
        invite_code_repository: InviteCodeRepository,
        settings: InvitationSettings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize invite code service.

        Args:
            invite_code_repository: Invite code repository
            settings: Enforcement flag and exemption window bounds
            clock: Source of the current time
        """
        self.invite_code_repository = invite_code_repository
        self.settings = settings
        self.clock = clock

    @property
    def exemption_window(self) -> InviteExemptionWindow | None:
        return InviteExemptionWindow.from_config(
            self.settings.exempt_start, self.settings.exempt_end
        )

    def exemption_window_active(self, now: datetime | None = None) -> bool:
        """Whether ``now`` falls inside a well-formed exemption window."""
        window = self.exemption_window
        if window is None:
            return False
        return window.is_active(now or self.clock())

    def current_policy(self, now: datetime | None = None) -> InvitePolicy:
        """Invite requirement in effect for a new account at ``now``.

        Returns:
            Policy with ``required`` set only when enforcement is on and no
            exemption window is active
        """
        exemption_active = self.exemption_window_active(now)
        required = self.settings.invite_code_required and not exemption_active
        return InvitePolicy(required=required, exemption_active=exemption_active)

    async def validate_code(self, code: str | None) -> InviteValidation:
        """Check whether an invite code can be consumed.

        Args:
            code: Code supplied by the client

        Returns:
            Validation result with the code's id and creator when valid
        """
        if not code or not code.strip():
            return InviteValidation(
                valid=False, error="MISSING", message="Invite code is required"
            )

        normalized = code.strip().upper()
        with logfire.span("invite_service.validate_code", code=normalized[:4]):
            invite_code = await self.invite_code_repository.find_by_code(normalized)

            if invite_code is None:
                result = InviteValidation(
                    valid=False, error="NOT_FOUND", message="Invite code does not exist"
                )
            elif not invite_code.is_active:
                result = InviteValidation(
                    valid=False, error="INACTIVE", message="Invite code is disabled"
                )
            elif invite_code.expires_at and self.clock() > _as_utc(
                invite_code.expires_at
            ):
                result = InviteValidation(
                    valid=False, error="EXPIRED", message="Invite code has expired"
                )
            elif invite_code.used_count >= invite_code.max_uses:
                result = InviteValidation(
                    valid=False,
                    error="MAX_USES_REACHED",
                    message="Invite code has no remaining uses",
                )
            else:
                result = InviteValidation(
                    valid=True,
                    invite_code_id=invite_code.id,
                    inviter_id=invite_code.created_by,
                    code=invite_code.code,
                )

            if result.valid:
                logfire.info("Invite code valid", code=normalized[:4])
            else:
                logfire.warn(
                    "Invite code rejected", code=normalized[:4], error=result.error
                )
            return result

    async def consume(
        self,
        invite: InviteValidation,
        user_id: UserId,
        metadata: StateMetadata | None = None,
    ) -> InviteUsage:
        """Consume one use of a validated code and record provenance.

        Must run inside the account-creation transaction.

        Args:
            invite: Successful validation result
            user_id: Newly created user
            metadata: Origin of the sign-up request

        Returns:
            The recorded usage

        Raises:
            InviteCodeExhaustedError: If the last use was taken concurrently
            ValueError: If ``invite`` is not a successful validation
        """
        if not invite.valid or invite.invite_code_id is None:
            raise ValueError("Only a valid invite code can be consumed")
        metadata = metadata or StateMetadata()

        with logfire.span(
            "invite_service.consume",
            code_id=str(invite.invite_code_id),
            user_id=str(user_id),
        ):
            consumed = await self.invite_code_repository.increment_use(
                invite.invite_code_id
            )
            if not consumed:
                logfire.warn(
                    "Invite code exhausted during consumption",
                    code_id=str(invite.invite_code_id),
                )
                raise InviteCodeExhaustedError(invite.code or "")

            usage = await self.invite_code_repository.save_usage(
                InviteUsage(
                    id=InviteUsageId(uuid4()),
                    code_id=invite.invite_code_id,
                    user_id=user_id,
                    ip_address=metadata.origin_ip,
                    user_agent=metadata.user_agent,
                    used_at=self.clock(),
                )
            )
            logfire.info(
                "Invite code consumed",
                code_id=str(invite.invite_code_id),
                user_id=str(user_id),
            )
            return usage

    async def create_invite_code(
        self,
        created_by: UserId | None = None,
        max_uses: int = 1,
        expires_at: datetime | None = None,
        description: str | None = None,
    ) -> InviteCode:
        """Create a new invite code with a random unique value.

        Args:
            created_by: Issuing user, None for system codes
            max_uses: Number of accounts the code can create
            expires_at: Optional expiry
            description: Free-form note

        Returns:
            Saved invite code

        Raises:
            RuntimeError: If no unused code could be generated
        """
        with logfire.span("invite_service.create_invite_code", max_uses=max_uses):
            for _ in range(10):
                code = "".join(
                    secrets.choice(INVITE_CODE_ALPHABET)
                    for _ in range(INVITE_CODE_LENGTH)
                )
                if await self.invite_code_repository.find_by_code(code) is None:
                    break
            else:
                raise RuntimeError("Failed to generate a unique invite code")

            saved = await self.invite_code_repository.save(
                InviteCode(
                    id=InviteCodeId(uuid4()),
                    code=code,
                    created_by=created_by,
                    max_uses=max_uses,
                    expires_at=expires_at,
                    description=description,
                    created_at=self.clock(),
                )
            )
            logfire.info("Invite code created", code_id=str(saved.id))
            return saved
