"""Approval token store (Postgres). Single-use links that approve a pending account."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import InvalidOrExpiredTokenException
from app.infrastructure.persistence.models.approval_token import ApprovalToken
from app.infrastructure.security.tokens import generate_token, hash_token
from app.shared.utils.datetime import minutes_from_now, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_MINUTES = 60


class ApprovalTokenStore:
    """Issue and redeem approval tokens. Only the SHA-256 hash is stored."""

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

    async def issue(self, account_id: str, target_email: str) -> str:
        """Create a token for the account; return the raw token.

        When superseding is on, earlier unused tokens for the account are
        marked used first so only the newest link works.
        """
        now = utc_now()
        if self._supersede_prior:
            await self._session.execute(
                update(ApprovalToken)
                .where(
                    ApprovalToken.account_id == account_id,
                    ApprovalToken.used.is_(False),
                )
                .values(used=True, used_at=now)
            )
        raw = generate_token()
        self._session.add(
            ApprovalToken(
                account_id=account_id,
                token_hash=hash_token(raw),
                target_email=target_email,
                expires_at=minutes_from_now(self._ttl_minutes, now),
                used=False,
            )
        )
        await self._session.flush()
        return raw

    async def redeem(self, token: str) -> str:
        """Mark the token used and return its account_id.

        One conditional UPDATE ... RETURNING, so of two concurrent
        redemptions exactly one gets the row.
        """
        now = utc_now()
        result = await self._session.execute(
            update(ApprovalToken)
            .where(
                ApprovalToken.token_hash == hash_token(token),
                ApprovalToken.used.is_(False),
                ApprovalToken.expires_at > now,
            )
            .values(used=True, used_at=now)
            .returning(ApprovalToken.account_id)
        )
        account_id = result.scalar_one_or_none()
        if account_id is None:
            logger.info("Approval token rejected: not found, used, or expired")
            raise InvalidOrExpiredTokenException()
        return account_id

    async def purge(self, now: datetime | None = None) -> int:
        """Delete used and expired tokens; return the number removed."""
        result = await self._session.execute(
            delete(ApprovalToken).where(
                or_(ApprovalToken.used.is_(True), ApprovalToken.expires_at <= (now or utc_now()))
            )
        )
        return result.rowcount
