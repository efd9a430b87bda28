"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from socialauth.domain.model import InviteCode, InviteUsage, SocialAccount, User
from socialauth.domain.value import (
    InviteCodeId,
    InviteUsageId,
    SocialAccountId,
    UserId,
    Username,
)


def _uuid(value: Any) -> UUID | None:
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    invited_by = _uuid(row.get("invited_by"))
    invite_code_id = _uuid(row.get("invite_code_id"))
    return User(
        id=UserId(_uuid(row["id"])),
        username=Username(row["username"]),
        email=row["email"],
        password_hash=row.get("password_hash"),
        display_name=row.get("display_name"),
        avatar_url=row.get("avatar_url"),
        invite_verified=row["invite_verified"],
        invited_by=UserId(invited_by) if invited_by else None,
        invite_code_used=row.get("invite_code_used"),
        invite_code_id=InviteCodeId(invite_code_id) if invite_code_id else None,
        last_login_at=row.get("last_login_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = user.model_dump()
    data["username"] = user.username.root
    return data


def row_to_social_account(row: Dict[str, Any]) -> SocialAccount:
    """Convert database row to SocialAccount domain model."""
    return SocialAccount(
        id=SocialAccountId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=row["provider"],
        provider_id=row["provider_id"],
        provider_username=row.get("provider_username"),
        provider_email=row.get("provider_email"),
        display_name=row.get("display_name"),
        avatar_url=row.get("avatar_url"),
        profile_url=row.get("profile_url"),
        created_at=row["created_at"],
        last_used_at=row.get("last_used_at"),
    )


def social_account_to_dict(account: SocialAccount) -> Dict[str, Any]:
    return account.model_dump()


def row_to_invite_code(row: Dict[str, Any]) -> InviteCode:
    """Convert database row to InviteCode domain model.

    Args:
        row: Database row as dict

    Returns:
        InviteCode domain model
    """
    created_by = _uuid(row.get("created_by"))
    return InviteCode(
        id=InviteCodeId(_uuid(row["id"])),
        code=row["code"],
        created_by=UserId(created_by) if created_by else None,
        max_uses=row["max_uses"],
        used_count=row["used_count"],
        expires_at=row.get("expires_at"),
        is_active=row["is_active"],
        description=row.get("description"),
        created_at=row["created_at"],
    )


def invite_code_to_dict(invite_code: InviteCode) -> Dict[str, Any]:
    return invite_code.model_dump()


def row_to_invite_usage(row: Dict[str, Any]) -> InviteUsage:
    """Convert database row to InviteUsage domain model."""
    return InviteUsage(
        id=InviteUsageId(_uuid(row["id"])),
        code_id=InviteCodeId(_uuid(row["code_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        ip_address=row.get("ip_address"),
        user_agent=row.get("user_agent"),
        used_at=row["used_at"],
    )


def invite_usage_to_dict(usage: InviteUsage) -> Dict[str, Any]:
    return usage.model_dump()
