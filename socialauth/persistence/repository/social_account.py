"""PostgreSQL implementation of SocialAccount repository."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.model import SocialAccount
from socialauth.domain.repository import SocialAccountRepository
from socialauth.domain.value import SocialAccountId, UserId
from socialauth.persistence.mappers import (
    row_to_social_account,
    social_account_to_dict,
)
from socialauth.persistence.tables import social_accounts_table


class PostgresSocialAccountRepository(SocialAccountRepository):
    """PostgreSQL implementation of SocialAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: SocialAccountId) -> Optional[SocialAccount]:
        stmt = select(social_accounts_table).where(
            social_accounts_table.c.id == account_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_social_account(dict(row)) if row else None

    async def find_by_provider(
        self, provider: str, provider_id: str
    ) -> Optional[SocialAccount]:
        """Find a social account by its (provider, provider_id) join key.

        Args:
            provider: Provider name
            provider_id: The identity's ID on that provider

        Returns:
            The social account if found, None otherwise
        """
        stmt = (
            select(social_accounts_table)
            .where(social_accounts_table.c.provider == provider)
            .where(social_accounts_table.c.provider_id == provider_id)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_social_account(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[SocialAccount]:
        stmt = (
            select(social_accounts_table)
            .where(social_accounts_table.c.user_id == user_id)
            .order_by(social_accounts_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_social_account(dict(row)) for row in result.mappings()]

    async def count_by_user_id(self, user_id: UserId) -> int:
        stmt = (
            select(func.count())
            .select_from(social_accounts_table)
            .where(social_accounts_table.c.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def save(self, account: SocialAccount) -> SocialAccount:
        """Save a social account (create or update).

        Args:
            account: Social account to save

        Returns:
            Saved social account
        """
        existing = await self.find_by_id(account.id)

        account_dict = social_account_to_dict(account)

        if existing:
            stmt = (
                social_accounts_table.update()
                .where(social_accounts_table.c.id == account.id)
                .values(**account_dict)
            )
        else:
            stmt = social_accounts_table.insert().values(**account_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return account

    async def delete_by_user_and_provider(self, user_id: UserId, provider: str) -> int:
        stmt = (
            social_accounts_table.delete()
            .where(social_accounts_table.c.user_id == user_id)
            .where(social_accounts_table.c.provider == provider)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
