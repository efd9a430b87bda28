"""Domain model entities for social authentication."""

from socialauth.domain.model.invite_code import InviteCode, InviteUsage
from socialauth.domain.model.oauth_state import OAuthState
from socialauth.domain.model.social_account import SocialAccount
from socialauth.domain.model.user import User

__all__ = [
    "User",
    "SocialAccount",
    "InviteCode",
    "InviteUsage",
    "OAuthState",
]
