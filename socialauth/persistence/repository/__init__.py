"""PostgreSQL repository implementations."""

from socialauth.persistence.repository.invite_code import PostgresInviteCodeRepository
from socialauth.persistence.repository.social_account import (
    PostgresSocialAccountRepository,
)
from socialauth.persistence.repository.unit_of_work import PostgresUnitOfWork
from socialauth.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresSocialAccountRepository",
    "PostgresInviteCodeRepository",
    "PostgresUnitOfWork",
]
