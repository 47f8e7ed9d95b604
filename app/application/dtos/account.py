"""DTOs for account use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import AccountRole


@dataclass(frozen=True)
class AccountResult:
    """Account read-model (result of get_by_id, create, approve, etc.). No password."""

    id: str
    company_name: str
    email: str
    username: str
    role: AccountRole
    parent_account_id: str | None
    is_approved: bool
    created_by: str | None = None
    approved_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    approved_at: datetime | None = None


@dataclass(frozen=True)
class AccountCreate:
    """Fields for a new account row; the password is already hashed."""

    company_name: str
    email: str
    username: str
    hashed_password: str
    role: AccountRole
    parent_account_id: str | None
    is_approved: bool
    created_by: str | None = None


@dataclass(frozen=True)
class SessionClaims:
    """Verified session credential contents. tenant_id is derived, never trusted from input."""

    account_id: str
    email: str
    role: AccountRole
    parent_account_id: str | None
    tenant_id: str

    # Lets tenancy helpers accept claims where they accept accounts.
    @property
    def id(self) -> str:
        return self.account_id


@dataclass(frozen=True)
class LoginResult:
    """Issued session credential plus the authenticated account."""

    access_token: str
    account: AccountResult
    token_type: str = "bearer"


@dataclass(frozen=True)
class SignupResult:
    """Newly registered tenant, pending approval."""

    account: AccountResult
    message: str


@dataclass(frozen=True)
class AccountPolicy:
    """Configuration the account services need (built from Settings by the composition root)."""

    min_password_length: int = 8
    staff_requires_approval: bool = False
    approval_notification_email: str | None = None
    api_public_url: str = "http://localhost:8000/api/v1"
    frontend_url: str = "http://localhost:3000"
    approval_token_ttl_minutes: int = 60
    password_reset_token_ttl_minutes: int = 60
