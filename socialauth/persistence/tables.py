"""SQLAlchemy table definitions for social auth.

These table definitions are used with SQLAlchemy Core queries.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("username", String(30), nullable=False, unique=True),
    Column("email", String(255), nullable=False),
    Column("password_hash", Text, nullable=True),  # Null for social-only users
    Column("display_name", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column("invite_verified", Boolean, nullable=False, server_default="false"),
    Column(
        "invited_by", UUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    ),
    Column("invite_code_used", String(64), nullable=True),
    Column(
        "invite_code_id",
        UUID,
        ForeignKey("invite_codes.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# Email lookups are case-insensitive
Index("idx_users_email_lower", func.lower(users_table.c.email), unique=True)

# ============================================================================
# SOCIAL ACCOUNTS TABLE
# ============================================================================
social_accounts_table = Table(
    "social_accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("provider", String(50), nullable=False),  # 'google', 'github', ...
    Column("provider_id", String(255), nullable=False),  # OIDC sub, GitHub id, ...
    Column("provider_username", String(255), nullable=True),
    Column("provider_email", String(255), nullable=True),
    Column("display_name", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column("profile_url", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("last_used_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint("provider", "provider_id", name="uq_social_provider_identity"),
)

Index("idx_social_accounts_user_id", social_accounts_table.c.user_id)

# ============================================================================
# INVITE CODES TABLE
# ============================================================================
invite_codes_table = Table(
    "invite_codes",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("code", String(64), nullable=False, unique=True),
    Column(
        "created_by", UUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    ),
    Column("max_uses", Integer, nullable=False, server_default="1"),
    Column("used_count", Integer, nullable=False, server_default="0"),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column("description", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("max_uses >= 1", name="ck_invite_codes_max_uses"),
    CheckConstraint("used_count <= max_uses", name="ck_invite_codes_used_count"),
)

# ============================================================================
# INVITE USAGES TABLE
# ============================================================================
invite_usages_table = Table(
    "invite_usages",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "code_id",
        UUID,
        ForeignKey("invite_codes.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("ip_address", String(64), nullable=True),
    Column("user_agent", Text, nullable=True),
    Column("used_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"),
    UniqueConstraint("code_id", "user_id", name="uq_invite_usage_code_user"),
)

Index("idx_invite_usages_code_id", invite_usages_table.c.code_id)
