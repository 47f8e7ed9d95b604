"""Account repository. Interface methods return application DTOs."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.account import AccountCreate, AccountResult
from app.domain.enums import AccountRole
from app.domain.exceptions import AccountAlreadyExistsException
from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.repositories.base import BaseRepository


def _account_to_result(a: Account) -> AccountResult:
    """Map ORM Account to application AccountResult (no password)."""
    return AccountResult(
        id=a.id,
        company_name=a.company_name,
        email=a.email,
        username=a.username,
        role=AccountRole(a.role),
        parent_account_id=a.parent_account_id,
        is_approved=a.is_approved,
        created_by=a.created_by,
        approved_by=a.approved_by,
        created_at=a.created_at,
        updated_at=a.updated_at,
        approved_at=a.approved_at,
    )


class AccountRepository(BaseRepository[Account]):
    """Account lookups, conditional approve/reject writes, and staff listings."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Account)

    async def _get_model_by_id(self, account_id: str) -> Account | None:
        return await super().get_by_id(account_id)

    async def get_by_id(self, account_id: str) -> AccountResult | None:  # type: ignore[override]
        account = await self._get_model_by_id(account_id)
        return _account_to_result(account) if account else None

    async def get_by_email(self, email: str) -> AccountResult | None:
        result = await self.db.execute(
            select(Account).where(Account.email == email.strip().lower())
        )
        account = result.scalar_one_or_none()
        return _account_to_result(account) if account else None

    async def get_by_username(self, username: str) -> AccountResult | None:
        result = await self.db.execute(
            select(Account).where(Account.username == username.strip().lower())
        )
        account = result.scalar_one_or_none()
        return _account_to_result(account) if account else None

    async def get_by_identifier(self, identifier: str) -> AccountResult | None:
        if "@" in identifier:
            return await self.get_by_email(identifier)
        return await self.get_by_username(identifier)

    async def get_password_hash(self, account_id: str) -> str | None:
        result = await self.db.execute(
            select(Account.hashed_password).where(Account.id == account_id)
        )
        return result.scalar_one_or_none()

    async def find_conflict(
        self, email: str | None, username: str | None, exclude_id: str | None = None
    ) -> str | None:
        conditions = []
        if email:
            conditions.append(Account.email == email)
        if username:
            conditions.append(Account.username == username)
        if not conditions:
            return None
        stmt = select(Account.email, Account.username).where(or_(*conditions))
        if exclude_id:
            stmt = stmt.where(Account.id != exclude_id)
        rows = (await self.db.execute(stmt)).all()
        for row in rows:
            if email and row.email == email:
                return "email"
        return "username" if rows else None

    async def get_super_tenant(self) -> AccountResult | None:
        result = await self.db.execute(
            select(Account).where(
                Account.role == AccountRole.ADMIN.value,
                Account.parent_account_id.is_(None),
            )
        )
        account = result.scalar_one_or_none()
        return _account_to_result(account) if account else None

    async def create(self, data: AccountCreate) -> AccountResult:  # type: ignore[override]
        """Create account; raise AccountAlreadyExistsException on unique constraint violation."""
        account = Account(
            company_name=data.company_name,
            email=data.email,
            username=data.username,
            hashed_password=data.hashed_password,
            role=AccountRole(data.role).value,
            parent_account_id=data.parent_account_id,
            is_approved=data.is_approved,
            created_by=data.created_by,
        )
        try:
            created = await super().create(account)
        except IntegrityError:
            raise AccountAlreadyExistsException() from None
        return _account_to_result(created)

    async def approve(
        self, account_id: str, approved_by: str | None, approved_at: datetime
    ) -> AccountResult | None:
        """Approve only while pending; the WHERE clause settles concurrent approvals."""
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id, Account.is_approved.is_(False))
            .values(is_approved=True, approved_at=approved_at, approved_by=approved_by)
            .returning(Account)
        )
        account = result.scalar_one_or_none()
        return _account_to_result(account) if account else None

    async def delete_pending(self, account_id: str) -> bool:
        result = await self.db.execute(
            delete(Account).where(
                Account.id == account_id, Account.is_approved.is_(False)
            )
        )
        return result.rowcount > 0

    async def update_password_hash(self, account_id: str, hashed_password: str) -> bool:
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(hashed_password=hashed_password)
        )
        return result.rowcount > 0

    async def update_profile(
        self, account_id: str, company_name: str, username: str
    ) -> AccountResult | None:
        """Update profile; raise AccountAlreadyExistsException on unique constraint (username)."""
        try:
            result = await self.db.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(company_name=company_name, username=username)
                .returning(Account)
            )
        except IntegrityError:
            raise AccountAlreadyExistsException("username") from None
        account = result.scalar_one_or_none()
        return _account_to_result(account) if account else None

    async def list_pending(self) -> list[AccountResult]:
        result = await self.db.execute(
            select(Account)
            .where(Account.is_approved.is_(False))
            .order_by(Account.created_at.desc())
        )
        return [_account_to_result(a) for a in result.scalars().all()]

    async def list_staff(
        self, tenant_id: str, role: AccountRole | None = None
    ) -> list[AccountResult]:
        stmt = select(Account).where(Account.parent_account_id == tenant_id)
        if role is not None:
            stmt = stmt.where(Account.role == AccountRole(role).value)
        else:
            stmt = stmt.where(
                Account.role.in_([r.value for r in AccountRole.staff_roles()])
            )
        result = await self.db.execute(stmt.order_by(Account.created_at.desc()))
        return [_account_to_result(a) for a in result.scalars().all()]
