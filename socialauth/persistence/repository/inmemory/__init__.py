"""In-memory repository implementations for testing."""

from .invite_code import InMemoryInviteCodeRepository
from .oauth_state import InMemoryOAuthStateRepository
from .social_account import InMemorySocialAccountRepository
from .unit_of_work import InMemoryUnitOfWork
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryInviteCodeRepository",
    "InMemoryOAuthStateRepository",
    "InMemorySocialAccountRepository",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
]
