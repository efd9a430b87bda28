"""User aggregate root.

Users own a nullable password and zero or more linked social accounts.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from socialauth.domain.model.common import DomainModel
from socialauth.domain.value import InviteCodeId, UserId, Username


class User(DomainModel):
    """First-party account.

    A user with no password must keep at least one social account.
    ``invited_by`` / ``invite_code_used`` record invite provenance and are
    cleared when an exemption window retroactively verifies the user.
    """

    id: UserId
    username: Username
    email: str
    password_hash: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    invite_verified: bool = False
    invited_by: Optional[UserId] = None
    invite_code_used: Optional[str] = None
    invite_code_id: Optional[InviteCodeId] = None
    last_login_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)
