"""Tenant and role resolution.

A tenant is identified by the id of its owning admin account. Staff
(recruiters, partners) inherit the tenant of their parent admin; tenants are
at most one level deep. The super-tenant is the single admin with no parent.
"""

from dataclasses import dataclass
from typing import Protocol

from app.domain.enums import AccountRole
from app.domain.exceptions import InvalidStateException


class TenantScoped(Protocol):
    """Anything carrying the three fields tenant resolution depends on."""

    id: str
    role: AccountRole | str
    parent_account_id: str | None


@dataclass(frozen=True)
class RoleCapabilities:
    """What a role may do, in one place instead of scattered role checks."""

    can_manage_staff: bool
    can_edit_company: bool
    owns_tenant: bool


_CAPABILITIES: dict[AccountRole, RoleCapabilities] = {
    AccountRole.ADMIN: RoleCapabilities(
        can_manage_staff=True, can_edit_company=True, owns_tenant=True
    ),
    AccountRole.RECRUITER: RoleCapabilities(
        can_manage_staff=False, can_edit_company=False, owns_tenant=False
    ),
    AccountRole.PARTNER: RoleCapabilities(
        can_manage_staff=False, can_edit_company=False, owns_tenant=False
    ),
}


def capabilities(role: AccountRole | str) -> RoleCapabilities:
    """Return the capability set for a role.

    Raises:
        InvalidStateException: If the role is not one of the known roles.
    """
    try:
        return _CAPABILITIES[AccountRole(role)]
    except ValueError:
        raise InvalidStateException("Unknown account role", role=str(role)) from None


def resolve_tenant(account: TenantScoped) -> str:
    """Return the tenant id whose data the account may see.

    Admins own their tenant; staff resolve to their parent admin.

    Raises:
        InvalidStateException: Staff account without a parent. Never falls
            back to the account's own id.
    """
    if capabilities(account.role).owns_tenant:
        return account.id
    if not account.parent_account_id:
        raise InvalidStateException(
            "Staff account has no parent tenant", account_id=account.id
        )
    return account.parent_account_id


def is_super_tenant(account: TenantScoped) -> bool:
    """True only for the admin with no parent (the approving operator)."""
    return AccountRole(account.role) == AccountRole.ADMIN and account.parent_account_id is None
