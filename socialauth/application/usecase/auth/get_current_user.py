"""Get current user use case."""

from uuid import UUID

from pydantic import BaseModel

from socialauth.domain.service import JWTService, SocialAccountService, UserService
from socialauth.domain.value import UserId

from ..base import BaseUseCase
from ..social.list_linked_accounts import SocialAccountInfo
from .social_login import UserInfo


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str  # JWT token


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    user: UserInfo
    has_password: bool
    social_accounts: list[SocialAccountInfo]


class GetCurrentUserUseCase(BaseUseCase):
    """Use case for getting current authenticated user."""

    def __init__(
        self,
        jwt_service: JWTService,
        user_service: UserService,
        social_account_service: SocialAccountService,
    ) -> None:
        """Initialize get current user use case.

        Args:
            jwt_service: JWT token domain service
            user_service: User domain service
            social_account_service: Social account domain service
        """
        self.jwt_service = jwt_service
        self.user_service = user_service
        self.social_account_service = social_account_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Execute get current user flow.

        Steps:
        1. Verify JWT token via JWT service
        2. Load user from storage
        3. Load user's linked social accounts

        Args:
            request: Request with JWT token

        Returns:
            User information if token is valid and user exists

        Raises:
            JWTError: If token is invalid or expired
            NotFoundError: If user not found
        """
        # Verify token (raises JWTError if invalid)
        payload = self.jwt_service.verify_token(request.token)

        # Raises NotFoundError if the user was deleted after the token was minted
        user = await self.user_service.get_by_id(UserId(UUID(payload.user_id)))

        accounts = await self.social_account_service.list_for_user(user.id)

        return GetCurrentUserResponse(
            user=UserInfo.from_user(user),
            has_password=user.has_password,
            social_accounts=[
                SocialAccountInfo.from_account(account) for account in accounts
            ],
        )
