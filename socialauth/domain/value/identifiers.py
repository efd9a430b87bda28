"""Entity identifiers.

All are UUIDs generated by the service; NewType keeps a user ID from being
passed where a social account ID is expected.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
SocialAccountId = NewType("SocialAccountId", UUID)
InviteCodeId = NewType("InviteCodeId", UUID)
InviteUsageId = NewType("InviteUsageId", UUID)
