"""Social login use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from socialauth.domain.model import User
from socialauth.domain.service import AccountResolver, JWTService, SessionToken
from socialauth.domain.value import SocialCredentials, StateMetadata

from ..base import BaseUseCase


class SocialLoginRequest(BaseModel):
    """Login request posted by the client after the provider consent flow.

    Exactly one credential is used, in the order id_token, code,
    access_token.
    """

    provider: str
    id_token: str | None = None
    code: str | None = None
    access_token: str | None = None
    state: str | None = None
    invite_code: str | None = None
    origin_ip: str | None = None
    user_agent: str | None = None


class UserInfo(BaseModel):
    """Public user information."""

    id: str
    username: str
    email: str
    display_name: str | None
    avatar_url: str | None
    invite_verified: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            username=user.username.root,
            email=user.email,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            invite_verified=user.invite_verified,
            created_at=user.created_at,
        )


class SocialLoginResponse(BaseModel):
    """Login response."""

    user: UserInfo
    session: SessionToken
    is_new_user: bool


class SocialLoginUseCase(BaseUseCase):
    """Use case for logging in (or signing up) with a provider identity."""

    def __init__(
        self, account_resolver: AccountResolver, jwt_service: JWTService
    ) -> None:
        """Initialize social login use case.

        Args:
            account_resolver: Account resolution service
            jwt_service: JWT session domain service
        """
        self.account_resolver = account_resolver
        self.jwt_service = jwt_service

    async def execute(self, request: SocialLoginRequest) -> SocialLoginResponse:
        """Resolve the provider identity to a user and mint a session.

        Args:
            request: Credentials, state, optional invite code and origin

        Returns:
            The user, a session token and whether the account is new

        Raises:
            SocialAuthError: Any expected failure of the resolution
        """
        resolution = self.unwrap(
            await self.account_resolver.resolve(
                request.provider,
                SocialCredentials(
                    id_token=request.id_token,
                    code=request.code,
                    access_token=request.access_token,
                ),
                state=request.state,
                metadata=StateMetadata(
                    origin_ip=request.origin_ip, user_agent=request.user_agent
                ),
                invite_code=request.invite_code,
            )
        )

        session = self.jwt_service.create_session(resolution.user)

        logfire.info(
            "Social login completed",
            user_id=str(resolution.user.id),
            provider=resolution.social_account.provider,
            is_new_user=resolution.is_new_user,
        )
        return SocialLoginResponse(
            user=UserInfo.from_user(resolution.user),
            session=session,
            is_new_user=resolution.is_new_user,
        )
