"""Invite code entities.

Codes gate account creation while invite enforcement is on. Each consumed
use is recorded as an InviteUsage row.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from socialauth.domain.model.common import DomainModel
from socialauth.domain.value import InviteCodeId, InviteUsageId, UserId


class InviteCode(DomainModel):
    """Invite code with a bounded number of uses."""

    id: InviteCodeId
    code: str
    created_by: Optional[UserId] = None
    max_uses: int = Field(default=1, ge=1)
    used_count: int = Field(default=0, ge=0)
    expires_at: Optional[datetime] = None
    is_active: bool = True
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class InviteUsage(DomainModel):
    """Provenance record of one invite code consumption."""

    id: InviteUsageId
    code_id: InviteCodeId
    user_id: UserId
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    used_at: datetime = Field(default_factory=datetime.now)
