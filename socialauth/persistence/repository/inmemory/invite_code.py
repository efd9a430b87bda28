"""In-memory invite code repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from socialauth.domain.model.invite_code import InviteCode, InviteUsage
from socialauth.domain.repository.invite_code import InviteCodeRepository
from socialauth.domain.value import InviteCodeId


class InMemoryInviteCodeRepository(InviteCodeRepository):
    """In-memory implementation of InviteCodeRepository for testing."""

    def __init__(self) -> None:
        self._codes: dict[InviteCodeId, InviteCode] = {}
        self._usages: list[InviteUsage] = []

    async def find_by_code(self, code: str) -> Optional[InviteCode]:
        """Find an invite code by its code string."""
        for invite_code in self._codes.values():
            if invite_code.code == code:
                return invite_code
        return None

    async def find_by_id(self, code_id: InviteCodeId) -> Optional[InviteCode]:
        return self._codes.get(code_id)

    async def save(self, invite_code: InviteCode) -> InviteCode:
        """Save an invite code (create or update).

        Raises:
            IntegrityError: If another invite code has the same code string
        """
        existing = await self.find_by_code(invite_code.code)
        if existing and existing.id != invite_code.id:
            raise IntegrityError("Duplicate invite code", None, Exception())
        self._codes[invite_code.id] = invite_code
        return invite_code

    async def increment_use(self, code_id: InviteCodeId) -> bool:
        """Consume one use if any remain."""
        invite_code = self._codes.get(code_id)
        if invite_code is None or invite_code.used_count >= invite_code.max_uses:
            return False
        self._codes[code_id] = invite_code.evolve(used_count=invite_code.used_count + 1)
        return True

    async def save_usage(self, usage: InviteUsage) -> InviteUsage:
        self._usages.append(usage)
        return usage

    async def find_usages(self, code_id: InviteCodeId) -> list[InviteUsage]:
        return [u for u in self._usages if u.code_id == code_id]

    def snapshot(self) -> tuple[dict[InviteCodeId, InviteCode], list[InviteUsage]]:
        return dict(self._codes), list(self._usages)

    def restore(
        self, snapshot: tuple[dict[InviteCodeId, InviteCode], list[InviteUsage]]
    ) -> None:
        self._codes, self._usages = snapshot
