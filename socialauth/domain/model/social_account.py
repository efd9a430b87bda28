"""Social account entity.

Links one external provider identity to one first-party user.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from socialauth.domain.model.common import DomainModel
from socialauth.domain.value import SocialAccountId, UserId


class SocialAccount(DomainModel):
    """External identity linked to a user account.

    ``(provider, provider_id)`` is globally unique. A user may own several
    social accounts, normally at most one per provider.
    """

    id: SocialAccountId
    user_id: UserId
    provider: str
    provider_id: str  # Permanent ID from provider (OIDC sub, numeric GitHub id)
    provider_username: Optional[str] = None
    provider_email: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    last_used_at: Optional[datetime] = None
