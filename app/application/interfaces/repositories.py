"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from app.application.dtos.account import AccountCreate, AccountResult
    from app.domain.enums import AccountRole

T = TypeVar("T")


class IAccountRepository(Protocol):
    """Protocol for account repository (DIP). Email and username are compared lower-cased."""

    async def get_by_id(self, account_id: str) -> AccountResult | None:
        """Return account by ID."""

    async def get_by_email(self, email: str) -> AccountResult | None:
        """Return account by email."""

    async def get_by_identifier(self, identifier: str) -> AccountResult | None:
        """Return account by email (identifier contains '@') or username."""

    async def get_password_hash(self, account_id: str) -> str | None:
        """Return the stored bcrypt hash for the account."""

    async def find_conflict(
        self, email: str | None, username: str | None, exclude_id: str | None = None
    ) -> str | None:
        """Return 'email' or 'username' when taken by another account, else None."""

    async def get_super_tenant(self) -> AccountResult | None:
        """Return the admin with no parent, if one exists."""

    async def create(self, data: AccountCreate) -> AccountResult:
        """Insert account; raise AccountAlreadyExistsException on unique violation."""

    async def approve(
        self, account_id: str, approved_by: str | None, approved_at: datetime
    ) -> AccountResult | None:
        """Approve only if still pending; None when absent or already approved."""

    async def delete_pending(self, account_id: str) -> bool:
        """Delete only if still pending; True when a row was deleted."""

    async def update_password_hash(self, account_id: str, hashed_password: str) -> bool:
        """Replace the stored hash; True when the account exists."""

    async def update_profile(
        self, account_id: str, company_name: str, username: str
    ) -> AccountResult | None:
        """Update company name and username; raise AccountAlreadyExistsException on conflict."""

    async def list_pending(self) -> list[AccountResult]:
        """Return accounts awaiting approval, newest first."""

    async def list_staff(
        self, tenant_id: str, role: AccountRole | None = None
    ) -> list[AccountResult]:
        """Return staff whose parent is tenant_id, optionally filtered by role."""


class IApprovalTokenStore(Protocol):
    """Protocol for approval token persistence (single-use, hashed)."""

    async def issue(self, account_id: str, target_email: str) -> str:
        """Persist a new token for the account; return the raw token."""

    async def redeem(self, token: str) -> str:
        """Atomically mark the token used and return its account_id.

        Raises InvalidOrExpiredTokenException when absent, used or expired.
        """


class IPasswordResetTokenStore(Protocol):
    """Protocol for password reset token persistence (single-use, hashed)."""

    async def issue(self, account_id: str, email: str) -> str:
        """Persist a new token for the account; return the raw token."""

    async def redeem(self, token: str, email: str) -> str:
        """Atomically mark the token used and return its account_id.

        Raises TokenAlreadyUsedException, TokenExpiredException or
        InvalidOrExpiredTokenException.
        """


@dataclass(frozen=True)
class Repositories:
    """Repositories bound to one transaction."""

    accounts: IAccountRepository
    approval_tokens: IApprovalTokenStore
    reset_tokens: IPasswordResetTokenStore


class IUnitOfWork(Protocol):
    """Runs a unit of work atomically against one transaction."""

    async def run(self, work: Callable[[Repositories], Awaitable[T]]) -> T:
        """Run work; commit on success, roll back on error."""
