"""Domain value objects for social authentication."""

from socialauth.domain.value.identifiers import (
    InviteCodeId,
    InviteUsageId,
    SocialAccountId,
    UserId,
)
from socialauth.domain.value.invite import (
    InviteExemptionWindow,
    InvitePolicy,
    InviteValidation,
    parse_config_datetime,
)
from socialauth.domain.value.types import (
    AuthErrorCode,
    AuthProvider,
    Failure,
    LinkOutcome,
    NormalizedIdentity,
    OAuthTokens,
    RevokeOutcome,
    SocialCredentials,
    StateMetadata,
    Username,
)

__all__ = [
    # Identifiers
    "UserId",
    "SocialAccountId",
    "InviteCodeId",
    "InviteUsageId",
    # Types
    "AuthErrorCode",
    "AuthProvider",
    "Failure",
    "LinkOutcome",
    "NormalizedIdentity",
    "OAuthTokens",
    "RevokeOutcome",
    "SocialCredentials",
    "StateMetadata",
    "Username",
    # Invites
    "InviteExemptionWindow",
    "InvitePolicy",
    "InviteValidation",
    "parse_config_datetime",
]
