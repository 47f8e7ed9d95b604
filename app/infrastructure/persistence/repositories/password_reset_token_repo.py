"""Password reset token store (Postgres)."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import (
    InvalidOrExpiredTokenException,
    TokenAlreadyUsedException,
    TokenExpiredException,
)
from app.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from app.infrastructure.security.tokens import generate_token, hash_token
from app.shared.utils.datetime import ensure_utc, minutes_from_now, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_MINUTES = 60


class PasswordResetTokenStore:
    """Issue and redeem password reset tokens, keyed by (token hash, email)."""

    def __init__(
        self,
        session: AsyncSession,
        ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
        *,
        supersede_prior: bool = True,
    ) -> None:
        self._session = session
        self._ttl_minutes = ttl_minutes
        self._supersede_prior = supersede_prior

    async def issue(self, account_id: str, email: str) -> str:
        """Create a reset token; return the raw token."""
        now = utc_now()
        if self._supersede_prior:
            await self._session.execute(
                update(PasswordResetToken)
                .where(
                    PasswordResetToken.account_id == account_id,
                    PasswordResetToken.used.is_(False),
                )
                .values(used=True, used_at=now)
            )
        raw = generate_token()
        self._session.add(
            PasswordResetToken(
                account_id=account_id,
                token_hash=hash_token(raw),
                email=email,
                expires_at=minutes_from_now(self._ttl_minutes, now),
                used=False,
            )
        )
        await self._session.flush()
        return raw

    async def redeem(self, token: str, email: str) -> str:
        """Mark the token used and return its account_id.

        Failure reasons are told apart for logs only; every failure shares
        one error code and message.
        """
        now = utc_now()
        token_hash = hash_token(token)
        result = await self._session.execute(
            update(PasswordResetToken)
            .where(
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.email == email,
                PasswordResetToken.used.is_(False),
                PasswordResetToken.expires_at > now,
            )
            .values(used=True, used_at=now)
            .returning(PasswordResetToken.account_id)
        )
        account_id = result.scalar_one_or_none()
        if account_id is not None:
            return account_id
        exc = await self._classify_failure(token_hash, email, now)
        logger.info("Password reset token rejected (reason=%s)", exc.reason)
        raise exc

    async def _classify_failure(
        self, token_hash: str, email: str, now: datetime
    ) -> InvalidOrExpiredTokenException:
        result = await self._session.execute(
            select(PasswordResetToken.used, PasswordResetToken.expires_at).where(
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.email == email,
            )
        )
        row = result.one_or_none()
        if row is None:
            return InvalidOrExpiredTokenException()
        if row.used:
            return TokenAlreadyUsedException()
        expires_at = ensure_utc(row.expires_at)
        if expires_at is not None and expires_at <= now:
            return TokenExpiredException()
        return InvalidOrExpiredTokenException()

    async def purge(self, now: datetime | None = None) -> int:
        """Delete used and expired tokens; return the number removed."""
        result = await self._session.execute(
            delete(PasswordResetToken).where(
                or_(
                    PasswordResetToken.used.is_(True),
                    PasswordResetToken.expires_at <= (now or utc_now()),
                )
            )
        )
        return result.rowcount
