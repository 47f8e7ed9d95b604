"""Account lifecycle: signup, approval by operator or link, rejection, and staff creation.

A new tenant is created pending; the super-tenant approves it (directly or via
the emailed single-use link) or rejects it, which deletes the pending row.
Emails are sent after the transaction commits; a failed send never undoes
the state change.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.application.dtos.account import (
    AccountCreate,
    AccountPolicy,
    AccountResult,
    SignupResult,
)
from app.application.interfaces.repositories import IUnitOfWork, Repositories
from app.application.interfaces.services import (
    EmailTemplate,
    IAuthSecurity,
    IEmailDispatcher,
)
from app.application.services.account_validation import (
    is_well_formed_token,
    normalize_email,
    normalize_username,
    parse_staff_role,
    require_text,
    validate_password,
)
from app.domain.enums import AccountRole
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AlreadyApprovedException,
    AuthorizationException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.tenancy import (
    TenantScoped,
    capabilities,
    is_super_tenant,
    resolve_tenant,
)
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SIGNUP_PENDING_MESSAGE = (
    "Account created and pending approval. You will be notified by email once approved."
)


class AccountLifecycleService:
    """Creates, approves, rejects and lists accounts."""

    def __init__(
        self,
        uow: IUnitOfWork,
        auth_security: IAuthSecurity,
        email_dispatcher: IEmailDispatcher,
        policy: AccountPolicy | None = None,
    ) -> None:
        self._uow = uow
        self._auth_security = auth_security
        self._email = email_dispatcher
        self.policy = policy or AccountPolicy()

    async def signup(
        self, company_name: str, email: str, username: str, password: str
    ) -> SignupResult:
        """Register a new tenant admin under the super-tenant, pending approval.

        Raises:
            ValidationException: Blank field or short password.
            AccountAlreadyExistsException: Email or username taken.
            InvalidStateException: No super-tenant exists yet to approve signups.
        """
        company_name = require_text(company_name, "company_name")
        email = normalize_email(email)
        username = normalize_username(username)
        validate_password(password, self.policy.min_password_length)
        hashed = await asyncio.to_thread(self._auth_security.hash_password, password)

        async def _work(repos: Repositories) -> tuple[AccountResult, str, str]:
            conflict = await repos.accounts.find_conflict(email, username)
            if conflict:
                raise AccountAlreadyExistsException(conflict)
            super_tenant = await repos.accounts.get_super_tenant()
            if super_tenant is None:
                raise InvalidStateException(
                    "Signups are unavailable until the platform operator account exists"
                )
            account = await repos.accounts.create(
                AccountCreate(
                    company_name=company_name,
                    email=email,
                    username=username,
                    hashed_password=hashed,
                    role=AccountRole.ADMIN,
                    parent_account_id=super_tenant.id,
                    is_approved=False,
                )
            )
            approver = self.policy.approval_notification_email or super_tenant.email
            token = await repos.approval_tokens.issue(account.id, approver)
            return account, approver, token

        account, approver, token = await self._uow.run(_work)
        logger.info("Signup pending approval (account_id=%s)", account.id)
        await self._send_approval_request(account, approver, token)
        return SignupResult(account=account, message=SIGNUP_PENDING_MESSAGE)

    async def create_staff(
        self,
        acting: TenantScoped,
        email: str,
        username: str,
        password: str,
        role: AccountRole | str,
    ) -> AccountResult:
        """Create a recruiter or partner inside the acting admin's tenant.

        Staff inherit the admin's company name. Whether they start approved is
        the staff_requires_approval policy.
        """
        if not capabilities(acting.role).can_manage_staff:
            raise AuthorizationException("staff", "create")
        staff_role = parse_staff_role(role)
        email = normalize_email(email)
        username = normalize_username(username)
        validate_password(password, self.policy.min_password_length)
        tenant_id = resolve_tenant(acting)
        requires_approval = self.policy.staff_requires_approval
        hashed = await asyncio.to_thread(self._auth_security.hash_password, password)

        async def _work(
            repos: Repositories,
        ) -> tuple[AccountResult, str | None, str | None]:
            owner = await repos.accounts.get_by_id(tenant_id)
            if owner is None:
                raise ResourceNotFoundException("account", tenant_id)
            conflict = await repos.accounts.find_conflict(email, username)
            if conflict:
                raise AccountAlreadyExistsException(conflict)
            account = await repos.accounts.create(
                AccountCreate(
                    company_name=owner.company_name,
                    email=email,
                    username=username,
                    hashed_password=hashed,
                    role=staff_role,
                    parent_account_id=tenant_id,
                    is_approved=not requires_approval,
                    created_by=acting.id,
                )
            )
            if not requires_approval:
                return account, None, None
            approver = await self._approver_email(repos)
            token = await repos.approval_tokens.issue(account.id, approver)
            return account, approver, token

        account, approver, token = await self._uow.run(_work)
        logger.info(
            "Staff account created (account_id=%s, role=%s, tenant_id=%s, approved=%s)",
            account.id,
            staff_role.value,
            tenant_id,
            account.is_approved,
        )
        if approver and token:
            await self._send_approval_request(account, approver, token)
        return account

    async def approve(self, acting: TenantScoped, target_id: str) -> AccountResult:
        """Approve a pending account. Super-tenant only."""
        self._require_super_tenant(acting, "approve")

        async def _work(repos: Repositories) -> AccountResult:
            target = await repos.accounts.get_by_id(target_id)
            if target is None:
                raise ResourceNotFoundException("account", target_id)
            if target.is_approved:
                raise AlreadyApprovedException(target_id)
            approved = await repos.accounts.approve(target_id, acting.id, utc_now())
            if approved is None:
                raise AlreadyApprovedException(target_id)
            return approved

        account = await self._uow.run(_work)
        logger.info("Account approved (account_id=%s, by=%s)", account.id, acting.id)
        await self._send_approved(account)
        return account

    async def reject(self, acting: TenantScoped, target_id: str) -> None:
        """Delete a pending account. Super-tenant only; approved accounts are never deleted."""
        self._require_super_tenant(acting, "reject")

        async def _work(repos: Repositories) -> None:
            target = await repos.accounts.get_by_id(target_id)
            if target is None:
                raise ResourceNotFoundException("account", target_id)
            if target.is_approved:
                raise InvalidStateException(
                    "Cannot reject an approved account", account_id=target_id
                )
            if not await repos.accounts.delete_pending(target_id):
                raise InvalidStateException(
                    "Account was approved before it could be rejected",
                    account_id=target_id,
                )

        await self._uow.run(_work)
        logger.info("Account rejected (account_id=%s, by=%s)", target_id, acting.id)

    async def approve_via_token(self, token: str | None) -> AccountResult:
        """Redeem an approval link and approve its account in one transaction.

        Raises:
            ValidationException: Token missing or malformed.
            InvalidOrExpiredTokenException: Token unknown, used, or expired.
            ResourceNotFoundException: Account no longer exists.
            AlreadyApprovedException: Account was approved by other means.
        """
        if token is None or not is_well_formed_token(token):
            raise ValidationException("Invalid approval token", "token")

        async def _work(repos: Repositories) -> AccountResult:
            account_id = await repos.approval_tokens.redeem(token)
            target = await repos.accounts.get_by_id(account_id)
            if target is None:
                raise ResourceNotFoundException("account", account_id)
            if target.is_approved:
                raise AlreadyApprovedException(account_id)
            super_tenant = await repos.accounts.get_super_tenant()
            approved = await repos.accounts.approve(
                account_id, super_tenant.id if super_tenant else None, utc_now()
            )
            if approved is None:
                raise AlreadyApprovedException(account_id)
            return approved

        account = await self._uow.run(_work)
        logger.info("Account approved via link (account_id=%s)", account.id)
        await self._send_approved(account)
        return account

    async def list_pending(self, acting: TenantScoped) -> list[AccountResult]:
        """Accounts awaiting approval, newest first. Super-tenant only."""
        self._require_super_tenant(acting, "list_pending")

        async def _work(repos: Repositories) -> list[AccountResult]:
            return await repos.accounts.list_pending()

        return await self._uow.run(_work)

    async def list_staff(
        self, acting: TenantScoped, role: AccountRole | str | None = None
    ) -> list[AccountResult]:
        """Staff of the acting admin's tenant, optionally one role only."""
        if not capabilities(acting.role).can_manage_staff:
            raise AuthorizationException("staff", "list")
        staff_role = parse_staff_role(role) if role is not None else None
        tenant_id = resolve_tenant(acting)

        async def _work(repos: Repositories) -> list[AccountResult]:
            return await repos.accounts.list_staff(tenant_id, staff_role)

        return await self._uow.run(_work)

    @staticmethod
    def _require_super_tenant(acting: TenantScoped, action: str) -> None:
        if not is_super_tenant(acting):
            raise AuthorizationException("account", action)

    async def _approver_email(self, repos: Repositories) -> str:
        if self.policy.approval_notification_email:
            return self.policy.approval_notification_email
        super_tenant = await repos.accounts.get_super_tenant()
        if super_tenant is None:
            raise InvalidStateException("No platform operator account to approve staff")
        return super_tenant.email

    async def _send_approval_request(
        self, account: AccountResult, approver: str, token: str
    ) -> None:
        approve_url = (
            f"{self.policy.api_public_url.rstrip('/')}/auth/approve-by-token?token={token}"
        )
        await self._notify(
            approver,
            EmailTemplate.APPROVAL_REQUEST,
            {
                "company_name": account.company_name,
                "email": account.email,
                "username": account.username,
                "role": AccountRole(account.role).value,
                "approve_url": approve_url,
                "expires_minutes": self.policy.approval_token_ttl_minutes,
            },
        )

    async def _send_approved(self, account: AccountResult) -> None:
        await self._notify(
            account.email,
            EmailTemplate.ACCOUNT_APPROVED,
            {
                "company_name": account.company_name,
                "login_url": f"{self.policy.frontend_url.rstrip('/')}/login",
            },
        )

    async def _notify(
        self, recipient: str, template: EmailTemplate, data: dict[str, Any]
    ) -> None:
        try:
            sent = await self._email.dispatch(recipient, template, data)
        except Exception:
            logger.exception("Email dispatch raised (template=%s)", template.value)
            return
        if not sent:
            logger.warning("Email not delivered (template=%s)", template.value)
