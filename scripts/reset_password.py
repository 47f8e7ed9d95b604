"""Reset an account's password.

Usage:
    uv run python -m scripts.reset_password <account_id|email|username> <new_password>
All imports use app.*.
"""

import asyncio
import sys

from app.application.interfaces.repositories import Repositories
from app.application.services.account_validation import validate_password
from app.core.config import get_settings
from app.domain.exceptions import AtsException
from app.infrastructure.persistence.database import DataAccessLayer
from app.infrastructure.persistence.unit_of_work import SqlUnitOfWork
from app.infrastructure.security.password import get_password_hash


async def main() -> None:
    """Reset password for the account matching the identifier."""
    if len(sys.argv) < 3:
        print(
            "Usage: uv run python -m scripts.reset_password <account_id|email|username> <new_password>",
            file=sys.stderr,
        )
        sys.exit(1)
    identifier = sys.argv[1].strip().lower()
    new_password = sys.argv[2]

    settings = get_settings()
    if not settings.database_configured:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)
    try:
        validate_password(new_password, settings.min_password_length)
    except AtsException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    hashed = await asyncio.to_thread(get_password_hash, new_password)

    data_access = DataAccessLayer.from_settings(settings)
    await data_access.init()
    try:

        async def _work(repos: Repositories):
            account = await repos.accounts.get_by_id(sys.argv[1].strip())
            if account is None:
                account = await repos.accounts.get_by_identifier(identifier)
            if account is None:
                return None
            await repos.accounts.update_password_hash(account.id, hashed)
            return account

        account = await SqlUnitOfWork(data_access, settings).run(_work)
    finally:
        await data_access.close()
    if account is None:
        print(f"Account not found: {identifier}", file=sys.stderr)
        sys.exit(1)
    print(f"Password reset for account {account.id} ({account.username})")


if __name__ == "__main__":
    asyncio.run(main())
