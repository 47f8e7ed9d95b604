"""Forgot-password flow: request a reset link, then redeem it with a new password."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from app.application.dtos.account import AccountPolicy, AccountResult
from app.application.interfaces.repositories import IUnitOfWork, Repositories
from app.application.interfaces.services import (
    EmailTemplate,
    IAuthSecurity,
    IEmailDispatcher,
)
from app.application.services.account_validation import (
    is_well_formed_token,
    normalize_email,
    validate_password,
)
from app.domain.exceptions import InvalidOrExpiredTokenException

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = (
    "If an account exists with that email, a password reset link has been sent."
)
RESET_COMPLETED_MESSAGE = "Password has been reset successfully."


class PasswordResetService:
    """Issues reset links and applies new passwords."""

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

    async def request_reset(
        self, email: str, defer: Callable[..., Any] | None = None
    ) -> str:
        """Send a reset link when the email belongs to an account.

        The returned message is the same whether or not the account exists;
        unknown emails create no token and send nothing. With ``defer`` (e.g.
        BackgroundTasks.add_task) the email is sent after the response, so
        known and unknown addresses answer in the same time.
        """
        email = normalize_email(email)

        async def _work(repos: Repositories) -> tuple[AccountResult, str] | None:
            account = await repos.accounts.get_by_email(email)
            if account is None:
                return None
            token = await repos.reset_tokens.issue(account.id, account.email)
            return account, token

        issued = await self._uow.run(_work)
        if issued is None:
            logger.info("Password reset requested for unknown email")
            return RESET_REQUESTED_MESSAGE
        account, token = issued
        if defer is None:
            await self.send_reset_link(account, token)
        else:
            defer(self.send_reset_link, account, token)
        return RESET_REQUESTED_MESSAGE

    async def send_reset_link(self, account: AccountResult, token: str) -> None:
        """Email the reset link; failures are logged, never raised."""
        reset_url = (
            f"{self.policy.frontend_url.rstrip('/')}/reset-password"
            f"?token={quote(token)}&email={quote(account.email)}"
        )
        try:
            sent = await self._email.dispatch(
                account.email,
                EmailTemplate.PASSWORD_RESET,
                {
                    "reset_url": reset_url,
                    "expires_minutes": self.policy.password_reset_token_ttl_minutes,
                },
            )
        except Exception:
            logger.exception("Email dispatch raised (template=password_reset)")
            sent = False
        logger.info(
            "Password reset issued (account_id=%s, email_sent=%s)", account.id, sent
        )

    async def reset_password(self, token: str, email: str, new_password: str) -> str:
        """Redeem the token and store the new password in one transaction.

        Raises:
            ValidationException: Missing email or short password.
            InvalidOrExpiredTokenException: Token unknown, used, expired, or for another email.
        """
        email = normalize_email(email)
        validate_password(new_password, self.policy.min_password_length, "new_password")
        if not is_well_formed_token(token):
            raise InvalidOrExpiredTokenException()
        new_hash = await asyncio.to_thread(self._auth_security.hash_password, new_password)

        async def _work(repos: Repositories) -> str:
            account_id = await repos.reset_tokens.redeem(token, email)
            if not await repos.accounts.update_password_hash(account_id, new_hash):
                raise InvalidOrExpiredTokenException()
            return account_id

        account_id = await self._uow.run(_work)
        logger.info("Password reset completed (account_id=%s)", account_id)
        return RESET_COMPLETED_MESSAGE
