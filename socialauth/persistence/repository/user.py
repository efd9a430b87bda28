"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import exists, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from socialauth.domain.model import User
from socialauth.domain.repository import UserRepository
from socialauth.domain.value import UserId
from socialauth.persistence.mappers import row_to_user, user_to_dict
from socialauth.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """UserRepository over the ``users`` table.

    Email lookups go through the ``lower(email)`` unique index.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _first(self, *criteria) -> Optional[User]:
        result = await self.session.execute(select(users_table).where(*criteria))
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return await self._first(users_table.c.id == user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._first(func.lower(users_table.c.email) == email.lower())

    async def username_exists(self, username: str) -> bool:
        stmt = select(exists().where(users_table.c.username == username))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def save(self, user: User) -> User:
        """Upsert by primary key.

        ``created_at`` is never overwritten on update.
        """
        values = user_to_dict(user)
        stmt = insert(users_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[users_table.c.id],
            set_={k: v for k, v in values.items() if k not in ("id", "created_at")},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return user
