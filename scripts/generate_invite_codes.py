#!/usr/bin/env python3
"""Generate system invite codes for an invite-only launch."""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta, timezone

import logfire

from socialauth.config import Settings
from socialauth.domain.service import InviteCodeService
from socialauth.util.di.container import create_container
from socialauth.util.observability import configure_logfire


async def generate(count: int, max_uses: int, expires_in_days: int | None) -> list[str]:
    """Create ``count`` codes in one request scope (one transaction)."""
    container = create_container(for_app=False)
    expires_at = (
        datetime.now(timezone.utc) + timedelta(days=expires_in_days)
        if expires_in_days
        else None
    )
    try:
        async with container() as request_container:
            invite_service = await request_container.get(InviteCodeService)
            codes = []
            for _ in range(count):
                invite_code = await invite_service.create_invite_code(
                    max_uses=max_uses,
                    expires_at=expires_at,
                    description="System generated",
                )
                codes.append(invite_code.code)
            return codes
    finally:
        await container.close()


def main() -> int:
    """Generate invite codes and print them, one per line."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=10)
    parser.add_argument("--max-uses", type=int, default=1)
    parser.add_argument("--expires-in-days", type=int, default=None)
    args = parser.parse_args()

    configure_logfire(Settings())

    with logfire.span("generate_invite_codes", count=args.count):
        codes = asyncio.run(generate(args.count, args.max_uses, args.expires_in_days))

    for code in codes:
        print(code)
    return 0


if __name__ == "__main__":
    sys.exit(main())
