"""Domain services."""

from .account_resolver import AccountResolver, LoginResolution
from .base import Service
from .identity_service import IdentityService
from .invite_service import InviteCodeService
from .jwt_service import JWTService, SessionToken
from .linking_service import LinkingService, LinkResult
from .oauth_state_service import OAuthStateService
from .provider import ProviderAdapter
from .provider_registry import ProviderRegistry
from .social_account_service import SocialAccountService
from .user_service import UserService

__all__ = [
    "AccountResolver",
    "IdentityService",
    "InviteCodeService",
    "JWTService",
    "LinkResult",
    "LinkingService",
    "LoginResolution",
    "OAuthStateService",
    "ProviderAdapter",
    "ProviderRegistry",
    "Service",
    "SessionToken",
    "SocialAccountService",
    "UserService",
]
