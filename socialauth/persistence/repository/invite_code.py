"""PostgreSQL implementation of InviteCode repository."""

from typing import Optional

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.model import InviteCode, InviteUsage
from socialauth.domain.repository import InviteCodeRepository
from socialauth.domain.value import InviteCodeId
from socialauth.persistence.mappers import (
    invite_code_to_dict,
    invite_usage_to_dict,
    row_to_invite_code,
    row_to_invite_usage,
)
from socialauth.persistence.tables import invite_codes_table, invite_usages_table


class PostgresInviteCodeRepository(InviteCodeRepository):
    """PostgreSQL implementation of InviteCodeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_code(self, code: str) -> Optional[InviteCode]:
        """Find an invite code by its public code string.

        Args:
            code: Invite code to look up

        Returns:
            Invite code if found, None otherwise
        """
        stmt = select(invite_codes_table).where(invite_codes_table.c.code == code)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite_code(dict(row)) if row else None

    async def find_by_id(self, code_id: InviteCodeId) -> Optional[InviteCode]:
        stmt = select(invite_codes_table).where(invite_codes_table.c.id == code_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite_code(dict(row)) if row else None

    async def save(self, invite_code: InviteCode) -> InviteCode:
        """Save an invite code (create or update).

        Args:
            invite_code: Invite code to save

        Returns:
            Saved invite code
        """
        existing = await self.find_by_id(invite_code.id)

        code_dict = invite_code_to_dict(invite_code)

        if existing:
            stmt = (
                invite_codes_table.update()
                .where(invite_codes_table.c.id == invite_code.id)
                .values(**code_dict)
            )
        else:
            stmt = invite_codes_table.insert().values(**code_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return invite_code

    async def increment_use(self, code_id: InviteCodeId) -> bool:
        """Atomically consume one use of an invite code.

        Single conditional UPDATE, so two concurrent sign-ups cannot both
        take the last use.

        Args:
            code_id: Invite code ID

        Returns:
            True if a use was consumed
        """
        stmt = (
            update(invite_codes_table)
            .where(
                and_(
                    invite_codes_table.c.id == code_id,
                    invite_codes_table.c.used_count < invite_codes_table.c.max_uses,
                )
            )
            .values(used_count=invite_codes_table.c.used_count + 1)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def save_usage(self, usage: InviteUsage) -> InviteUsage:
        stmt = invite_usages_table.insert().values(**invite_usage_to_dict(usage))
        await self.session.execute(stmt)
        await self.session.flush()
        return usage

    async def find_usages(self, code_id: InviteCodeId) -> list[InviteUsage]:
        stmt = (
            select(invite_usages_table)
            .where(invite_usages_table.c.code_id == code_id)
            .order_by(invite_usages_table.c.used_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_invite_usage(dict(row)) for row in result.mappings()]
