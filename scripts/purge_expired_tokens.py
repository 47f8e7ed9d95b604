"""Delete used and expired approval and password reset tokens.

Usage:
    uv run python -m scripts.purge_expired_tokens
Safe to run from cron; tokens are useless once used or past expiry.
"""

import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.infrastructure.persistence.database import DataAccessLayer
from app.infrastructure.persistence.repositories import (
    ApprovalTokenStore,
    PasswordResetTokenStore,
)
from app.shared.utils.datetime import utc_now


async def main() -> None:
    settings = get_settings()
    if not settings.database_configured:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)
    data_access = DataAccessLayer.from_settings(settings)
    await data_access.init()
    now = utc_now()

    async def _purge(session: AsyncSession) -> tuple[int, int]:
        approvals = await ApprovalTokenStore(session).purge(now)
        resets = await PasswordResetTokenStore(session).purge(now)
        return approvals, resets

    try:
        approvals, resets = await data_access.run_in_transaction(_purge)
    finally:
        await data_access.close()
    print(f"Purged {approvals} approval token(s) and {resets} password reset token(s)")


if __name__ == "__main__":
    asyncio.run(main())
