"""Create or repair the super-tenant (the platform operator admin that approves signups).

Usage:
    uv run python -m scripts.seed_super_tenant <email> <username> <company_name> <password>
When a super-tenant already exists it is left as is, except that a pending
one is approved. Requires DATABASE_URL.
"""

import asyncio
import sys

from app.application.dtos.account import AccountCreate, AccountResult
from app.application.interfaces.repositories import Repositories
from app.application.services.account_validation import (
    normalize_email,
    normalize_username,
    require_text,
    validate_password,
)
from app.core.config import get_settings
from app.domain.enums import AccountRole
from app.domain.exceptions import AtsException
from app.infrastructure.persistence.database import DataAccessLayer
from app.infrastructure.persistence.unit_of_work import SqlUnitOfWork
from app.infrastructure.security.password import get_password_hash
from app.shared.utils.datetime import utc_now


async def main() -> None:
    """Insert (or approve) the approved, parentless admin account."""
    if len(sys.argv) < 5:
        print(
            "Usage: uv run python -m scripts.seed_super_tenant "
            "<email> <username> <company_name> <password>",
            file=sys.stderr,
        )
        sys.exit(1)
    settings = get_settings()
    if not settings.database_configured:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)

    try:
        email = normalize_email(sys.argv[1])
        username = normalize_username(sys.argv[2])
        company_name = require_text(sys.argv[3], "company_name")
        validate_password(sys.argv[4], settings.min_password_length)
    except AtsException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    hashed = await asyncio.to_thread(get_password_hash, sys.argv[4])

    async def _work(repos: Repositories) -> tuple[AccountResult, str]:
        existing = await repos.accounts.get_super_tenant()
        if existing is not None:
            if existing.is_approved:
                return existing, "exists"
            approved = await repos.accounts.approve(existing.id, existing.id, utc_now())
            return approved or existing, "approved"
        created = await repos.accounts.create(
            AccountCreate(
                company_name=company_name,
                email=email,
                username=username,
                hashed_password=hashed,
                role=AccountRole.ADMIN,
                parent_account_id=None,
                is_approved=False,
            )
        )
        approved = await repos.accounts.approve(created.id, created.id, utc_now())
        return approved or created, "created"

    data_access = DataAccessLayer.from_settings(settings)
    await data_access.init()
    try:
        account, outcome = await SqlUnitOfWork(data_access, settings).run(_work)
    except AtsException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    finally:
        await data_access.close()
    print(f"Super-tenant {outcome}: {account.id} ({account.email})")


if __name__ == "__main__":
    asyncio.run(main())
