"""Repository interfaces for the social auth domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from socialauth.domain.repository.invite_code import InviteCodeRepository
from socialauth.domain.repository.oauth_state import OAuthStateRepository
from socialauth.domain.repository.social_account import SocialAccountRepository
from socialauth.domain.repository.unit_of_work import UnitOfWork
from socialauth.domain.repository.user import UserRepository

__all__ = [
    "UserRepository",
    "SocialAccountRepository",
    "InviteCodeRepository",
    "OAuthStateRepository",
    "UnitOfWork",
]
