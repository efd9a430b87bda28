"""Invite gating value objects."""

from datetime import datetime, timezone

from socialauth.domain.value.common import ValueObject
from socialauth.domain.value.identifiers import InviteCodeId, UserId


def parse_config_datetime(value: str | None) -> datetime | None:
    """Parse a configured instant.

    Accepts ISO-8601 with either ``T`` or a space between date and time.
    Values without an offset are taken as UTC.

    Args:
        value: Raw configuration value

    Returns:
        Timezone-aware datetime, or None if missing or unparseable
    """
    if not value or not isinstance(value, str):
        return None

    normalized = value.strip()
    if "T" not in normalized:
        normalized = normalized.replace(" ", "T", 1)
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class InviteExemptionWindow(ValueObject):
    """Time range during which invite codes are not enforced."""

    start: datetime
    end: datetime

    @classmethod
    def from_config(
        cls, start: str | None, end: str | None
    ) -> "InviteExemptionWindow | None":
        """Build a window from configuration strings.

        Returns:
            The window if both bounds parse and start <= end, otherwise None
        """
        start_at = parse_config_datetime(start)
        end_at = parse_config_datetime(end)
        if start_at is None or end_at is None or start_at > end_at:
            return None
        return cls(start=start_at, end=end_at)

    def is_active(self, now: datetime) -> bool:
        """Inclusive containment check."""
        return self.start <= now <= self.end


class InvitePolicy(ValueObject):
    """Invite requirement in effect at one instant."""

    required: bool
    exemption_active: bool = False


class InviteValidation(ValueObject):
    """Answer from the invite oracle for one code."""

    valid: bool
    error: str | None = None
    message: str | None = None
    invite_code_id: InviteCodeId | None = None
    inviter_id: UserId | None = None
    code: str | None = None
