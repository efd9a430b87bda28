"""Domain value objects for social authentication.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from socialauth.domain.value.common import RootValueObject, ValueObject


class AuthProvider(str, Enum):
    """Built-in identity providers.

    Provider names are open-ended: any adapter registered under a name can be
    used, these are only the ones shipped with the service.
    """

    GOOGLE = "google"
    GITHUB = "github"


class AuthErrorCode(str, Enum):
    """Expected, caller-recoverable failure outcomes."""

    PROVIDER_UNSUPPORTED = "PROVIDER_UNSUPPORTED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    TOKEN_VERIFICATION_FAILED = "TOKEN_VERIFICATION_FAILED"
    NO_VERIFIED_EMAIL = "NO_VERIFIED_EMAIL"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_STATE = "INVALID_STATE"
    STATE_EXPIRED = "STATE_EXPIRED"
    STATE_PROVIDER_MISMATCH = "STATE_PROVIDER_MISMATCH"
    STATE_METADATA_MISMATCH = "STATE_METADATA_MISMATCH"
    EMAIL_EXISTS_DIFFERENT_PROVIDER = "EMAIL_EXISTS_DIFFERENT_PROVIDER"
    INVITE_REQUIRED = "INVITE_REQUIRED"
    INVITE_INVALID = "INVITE_INVALID"
    LINK_CONFLICT = "LINK_CONFLICT"
    LAST_AUTH_METHOD = "LAST_AUTH_METHOD"
    SOCIAL_ACCOUNT_NOT_FOUND = "SOCIAL_ACCOUNT_NOT_FOUND"


class RevokeOutcome(str, Enum):
    """Result of a best-effort token revocation."""

    REVOKED = "revoked"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


class Username(RootValueObject[str]):
    """First-party username.

    Lowercase letters, digits and underscores, optionally followed by a
    numeric disambiguation suffix. 1-30 characters.
    """

    @field_validator("root")
    @classmethod
    def validate_username_format(cls, v: str) -> str:
        """Validate username character set and length."""
        if not re.match(r"^[a-z0-9_]{1,30}$", v):
            raise ValueError(
                "Username must be 1-30 characters of lowercase letters, digits or underscores"
            )
        return v


class Failure(ValueObject):
    """Tagged failure returned instead of raising for expected outcomes.

    ``detail`` carries structured remediation data for the client, e.g. the
    conflicting account summary for EMAIL_EXISTS_DIFFERENT_PROVIDER.
    """

    code: AuthErrorCode
    message: str
    detail: dict[str, Any] | None = None


class NormalizedIdentity(ValueObject):
    """Provider-agnostic identity produced by a provider adapter.

    ``provider_id`` is unique within ``provider``; the pair is the join key
    to a persisted SocialAccount.
    """

    provider: str
    provider_id: str
    email: str | None = None
    email_verified: bool = False
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    profile_url: str | None = None
    raw_payload: dict[str, Any] = Field(default_factory=dict, repr=False)


class OAuthTokens(ValueObject):
    """Tokens returned by an authorization code exchange."""

    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
    token_type: str | None = None
    scope: str | None = None


class StateMetadata(ValueObject):
    """Request origin recorded with a CSRF state token."""

    origin_ip: str | None = None
    user_agent: str | None = None


class SocialCredentials(ValueObject):
    """Credentials a client presents after the provider consent flow.

    Exactly one of the three is used, in the order id_token, code,
    access_token.
    """

    id_token: str | None = None
    code: str | None = None
    access_token: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.id_token or self.code or self.access_token)


class LinkOutcome(str, Enum):
    """Successful outcomes of linking a provider identity."""

    LINKED = "linked"
    ALREADY_LINKED = "already_linked"
