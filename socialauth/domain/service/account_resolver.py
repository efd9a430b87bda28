"""Account resolution for federated logins."""

import logfire
from pydantic import BaseModel

from socialauth.domain.error import DataIntegrityError, InviteCodeExhaustedError
from socialauth.domain.model.social_account import SocialAccount
from socialauth.domain.model.user import User
from socialauth.domain.repository import UnitOfWork
from socialauth.domain.value import (
    AuthErrorCode,
    Failure,
    NormalizedIdentity,
    SocialCredentials,
    StateMetadata,
)
from socialauth.domain.value.invite import InviteValidation

from .base import Service
from .identity_service import IdentityService
from .invite_service import InviteCodeService
from .social_account_service import SocialAccountService
from .user_service import UserService


class LoginResolution(BaseModel):
    """Successful outcome of resolving a federated identity."""

    user: User
    social_account: SocialAccount
    is_new_user: bool


class AccountResolver(Service):
    """Decides whether an inbound identity logs in, conflicts or signs up.

    Steps run strictly in order:

    1. acquire the identity from the provider
    2. reject unverified emails
    3. log in through an existing (provider, provider_id) link
    4. refuse an email that already belongs to another account
    5. create user + social account in one transaction, invite-gated
    6. retroactively exempt the user while an exemption window is active

    The social account lookup (3) always precedes the email check (4) so a
    user who already linked this exact identity never sees a conflict.
    """

    def __init__(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        social_account_service: SocialAccountService,
        invite_service: InviteCodeService,
        unit_of_work: UnitOfWork,
    ) -> None:
        self.identity_service = identity_service
        self.user_service = user_service
        self.social_account_service = social_account_service
        self.invite_service = invite_service
        self.unit_of_work = unit_of_work

    async def resolve(
        self,
        provider: str,
        credentials: SocialCredentials,
        state: str | None = None,
        metadata: StateMetadata | None = None,
        invite_code: str | None = None,
    ) -> LoginResolution | Failure:
        """Resolve a login attempt to a first-party account.

        Args:
            provider: Provider name from the request
            credentials: id token, authorization code or access token
            state: CSRF state token issued with the authorization URL
            metadata: Origin of the login request
            invite_code: Code supplied for new-account creation

        Returns:
            The logged-in user and social account, or a failure
        """
        with logfire.span("account_resolver.resolve", provider=provider):
            # Steps 1-2
            identity = await self.identity_service.acquire(
                provider, credentials, state, metadata
            )
            if isinstance(identity, Failure):
                return identity

            # Step 3
            resolution = await self._login_existing(identity)

            if resolution is None:
                # Step 4
                conflict = await self._email_conflict(identity)
                if conflict is not None:
                    return conflict

                # Step 5
                created = await self._provision(identity, invite_code, metadata)
                if isinstance(created, Failure):
                    return created
                resolution = created

            # Step 6
            if (
                not resolution.user.invite_verified
                and self.invite_service.exemption_window_active()
            ):
                user = await self.user_service.apply_invite_exemption(resolution.user)
                resolution = resolution.model_copy(update={"user": user})

            logfire.info(
                "Login resolved",
                provider=identity.provider,
                user_id=str(resolution.user.id),
                is_new_user=resolution.is_new_user,
            )
            return resolution

    async def _login_existing(
        self, identity: NormalizedIdentity
    ) -> LoginResolution | None:
        account = await self.social_account_service.get_by_provider(
            identity.provider, identity.provider_id
        )
        if account is None:
            return None

        user = await self.user_service.find_by_id(account.user_id)
        if user is None:
            logfire.error(
                "Social account owner missing",
                account_id=str(account.id),
                user_id=str(account.user_id),
            )
            raise DataIntegrityError(
                f"Social account {account.id} references missing user {account.user_id}"
            )

        account = await self.social_account_service.touch(account, identity)
        user = await self.user_service.record_login(user)
        return LoginResolution(user=user, social_account=account, is_new_user=False)

    async def _email_conflict(self, identity: NormalizedIdentity) -> Failure | None:
        existing = await self.user_service.get_by_email(identity.email or "")
        if existing is None:
            return None

        logfire.warn(
            "Email already registered to another account",
            provider=identity.provider,
            user_id=str(existing.id),
        )
        return Failure(
            code=AuthErrorCode.EMAIL_EXISTS_DIFFERENT_PROVIDER,
            message="An account with this email already exists",
            detail={
                "existingUser": {
                    "id": str(existing.id),
                    "email": existing.email,
                    "hasPassword": existing.has_password,
                }
            },
        )

    async def _provision(
        self,
        identity: NormalizedIdentity,
        invite_code: str | None,
        metadata: StateMetadata | None,
    ) -> LoginResolution | Failure:
        policy = self.invite_service.current_policy()

        invite: InviteValidation | None = None
        if policy.required:
            if not invite_code:
                return Failure(
                    code=AuthErrorCode.INVITE_REQUIRED,
                    message="An invite code is required to create an account",
                    detail={"requires_invite_code": True},
                )
            invite = await self.invite_service.validate_code(invite_code)
            if not invite.valid:
                return Failure(
                    code=AuthErrorCode.INVITE_INVALID,
                    message=invite.message or "Invite code is not valid",
                    detail={"reason": invite.error, "requires_invite_code": True},
                )

        base = identity.username or (identity.email or "").split("@")[0]

        try:
            async with self.unit_of_work.transaction():
                username = await self.user_service.generate_unique_username(base)
                user = await self.user_service.save(
                    self.user_service.build_social_user(identity, username, invite)
                )
                account = await self.social_account_service.create_from_identity(
                    user.id, identity
                )
                if invite is not None:
                    await self.invite_service.consume(invite, user.id, metadata)
        except InviteCodeExhaustedError as e:
            return Failure(
                code=AuthErrorCode.INVITE_INVALID,
                message=str(e),
                detail={"reason": "MAX_USES_REACHED", "requires_invite_code": True},
            )

        logfire.info(
            "Account created from social identity",
            provider=identity.provider,
            user_id=str(user.id),
            username=user.username.root,
            invite_used=invite is not None,
            exemption_active=policy.exemption_active,
        )
        return LoginResolution(user=user, social_account=account, is_new_user=True)
