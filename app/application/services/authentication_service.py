"""Authentication and self-service: login, current account, profile and password changes."""

from __future__ import annotations

import asyncio
import logging

from app.application.dtos.account import AccountPolicy, AccountResult, LoginResult
from app.application.interfaces.repositories import IUnitOfWork, Repositories
from app.application.interfaces.services import IAuthSecurity
from app.application.services.account_validation import (
    normalize_username,
    require_text,
    validate_password,
)
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AccountNotApprovedException,
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.tenancy import TenantScoped, capabilities, resolve_tenant

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"

# Lazy dummy hash for constant-time comparison when the account is not found
# (timing-attack mitigation). Computed on first use in a thread.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash(auth_security: IAuthSecurity) -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            auth_security.hash_password, "not-a-real-password"
        )
    return _dummy_hash_cache


class AuthenticationService:
    """Login plus the operations an authenticated account performs on itself."""

    def __init__(
        self,
        uow: IUnitOfWork,
        auth_security: IAuthSecurity,
        policy: AccountPolicy | None = None,
    ) -> None:
        self._uow = uow
        self._auth_security = auth_security
        self.policy = policy or AccountPolicy()

    async def login(self, identifier: str, password: str) -> LoginResult:
        """Authenticate by email or username and issue a session credential.

        Raises:
            ValidationException: Missing identifier or password.
            AuthenticationException: Unknown account or wrong password (same message).
            AccountNotApprovedException: Correct credentials, account still pending.
        """
        identifier = require_text(identifier, "identifier").lower()
        if not password:
            raise ValidationException("password is required", "password")

        async def _work(repos: Repositories) -> tuple[AccountResult | None, str | None]:
            account = await repos.accounts.get_by_identifier(identifier)
            if account is None:
                return None, None
            return account, await repos.accounts.get_password_hash(account.id)

        account, hashed = await self._uow.run(_work)
        if account is None or not hashed:
            dummy_hash = await _get_dummy_hash(self._auth_security)
            await asyncio.to_thread(self._auth_security.verify_password, password, dummy_hash)
            raise AuthenticationException(INVALID_CREDENTIALS_MESSAGE)
        if not await asyncio.to_thread(
            self._auth_security.verify_password, password, hashed
        ):
            raise AuthenticationException(INVALID_CREDENTIALS_MESSAGE)
        if not account.is_approved:
            raise AccountNotApprovedException()
        access_token = self._auth_security.create_session_credential(account)
        logger.info("Login succeeded (account_id=%s)", account.id)
        return LoginResult(access_token=access_token, account=account)

    async def me(self, claims: TenantScoped) -> AccountResult:
        """Return the account behind a verified session credential."""

        async def _work(repos: Repositories) -> AccountResult | None:
            return await repos.accounts.get_by_id(claims.id)

        account = await self._uow.run(_work)
        if account is None:
            raise ResourceNotFoundException("account", claims.id)
        return account

    async def update_profile(
        self, claims: TenantScoped, username: str, company_name: str | None = None
    ) -> AccountResult:
        """Change username and, for roles that may, the company name.

        Staff keep their tenant's company name whatever they send.
        """
        username = normalize_username(username)
        can_edit_company = capabilities(claims.role).can_edit_company
        if can_edit_company:
            company_name = require_text(company_name, "company_name")

        async def _work(repos: Repositories) -> AccountResult | None:
            current = await repos.accounts.get_by_id(claims.id)
            if current is None:
                return None
            if await repos.accounts.find_conflict(None, username, exclude_id=claims.id):
                raise AccountAlreadyExistsException("username")
            next_company = company_name if can_edit_company else current.company_name
            return await repos.accounts.update_profile(
                claims.id, next_company or current.company_name, username
            )

        account = await self._uow.run(_work)
        if account is None:
            raise ResourceNotFoundException("account", claims.id)
        return account

    async def change_password(
        self, claims: TenantScoped, current_password: str, new_password: str
    ) -> None:
        """Replace the password after verifying the current one."""
        if not current_password:
            raise ValidationException("current_password is required", "current_password")
        validate_password(new_password, self.policy.min_password_length, "new_password")

        async def _load(repos: Repositories) -> str | None:
            return await repos.accounts.get_password_hash(claims.id)

        hashed = await self._uow.run(_load)
        if hashed is None:
            raise ResourceNotFoundException("account", claims.id)
        if not await asyncio.to_thread(
            self._auth_security.verify_password, current_password, hashed
        ):
            raise AuthenticationException("Current password is incorrect")
        new_hash = await asyncio.to_thread(self._auth_security.hash_password, new_password)

        async def _store(repos: Repositories) -> bool:
            return await repos.accounts.update_password_hash(claims.id, new_hash)

        if not await self._uow.run(_store):
            raise ResourceNotFoundException("account", claims.id)
        logger.info("Password changed (account_id=%s)", claims.id)

    async def reset_staff_password(
        self, acting: TenantScoped, staff_id: str, new_password: str
    ) -> None:
        """Admin sets a new password for a staff account of its own tenant.

        Staff of other tenants are reported as not found.
        """
        if not capabilities(acting.role).can_manage_staff:
            raise AuthorizationException("staff", "reset_password")
        validate_password(new_password, self.policy.min_password_length, "new_password")
        tenant_id = resolve_tenant(acting)
        new_hash = await asyncio.to_thread(self._auth_security.hash_password, new_password)

        async def _work(repos: Repositories) -> bool:
            target = await repos.accounts.get_by_id(staff_id)
            if (
                target is None
                or not target.role.is_staff
                or target.parent_account_id != tenant_id
            ):
                return False
            return await repos.accounts.update_password_hash(staff_id, new_hash)

        if not await self._uow.run(_work):
            raise ResourceNotFoundException("account", staff_id)
        logger.info(
            "Staff password reset (account_id=%s, by=%s)", staff_id, acting.id
        )
