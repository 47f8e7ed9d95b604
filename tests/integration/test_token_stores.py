"""Single-use token stores and account repository against PostgreSQL."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import update

from app.application.dtos.account import AccountCreate
from app.domain.enums import AccountRole
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    InvalidOrExpiredTokenException,
    TokenAlreadyUsedException,
    TokenExpiredException,
)
from app.infrastructure.persistence.models import ApprovalToken
from app.infrastructure.persistence.repositories.approval_token_repo import (
    ApprovalTokenStore,
)
from app.shared.utils.datetime import utc_now

pytestmark = pytest.mark.requires_db


def _admin(email: str, username: str, parent: str | None = None, approved: bool = False):
    return AccountCreate(
        company_name="Acme",
        email=email,
        username=username,
        hashed_password="x",
        role=AccountRole.ADMIN,
        parent_account_id=parent,
        is_approved=approved,
    )


async def _pending_with_token(sql_uow) -> tuple[str, str]:
    async def _work(repos):
        operator = await repos.accounts.create(
            _admin("ops@platform.test", "ops", approved=True)
        )
        pending = await repos.accounts.create(
            _admin("hr@globex.test", "globex", parent=operator.id)
        )
        token = await repos.approval_tokens.issue(pending.id, operator.email)
        return pending.id, token

    return await sql_uow.run(_work)


async def test_concurrent_redemption_has_one_winner(sql_uow) -> None:
    account_id, token = await _pending_with_token(sql_uow)

    async def _redeem(repos):
        return await repos.approval_tokens.redeem(token)

    results = await asyncio.gather(
        *(sql_uow.run(_redeem) for _ in range(5)), return_exceptions=True
    )
    winners = [r for r in results if r == account_id]
    losers = [r for r in results if isinstance(r, InvalidOrExpiredTokenException)]
    assert len(winners) == 1
    assert len(losers) == 4


async def test_new_token_supersedes_previous(sql_uow) -> None:
    account_id, first = await _pending_with_token(sql_uow)

    async def _reissue(repos):
        return await repos.approval_tokens.issue(account_id, "ops@platform.test")

    second = await sql_uow.run(_reissue)

    async def _redeem_first(repos):
        return await repos.approval_tokens.redeem(first)

    with pytest.raises(InvalidOrExpiredTokenException):
        await sql_uow.run(_redeem_first)

    async def _redeem_second(repos):
        return await repos.approval_tokens.redeem(second)

    assert await sql_uow.run(_redeem_second) == account_id


async def test_expired_approval_token_is_rejected(sql_uow, data_access) -> None:
    _, token = await _pending_with_token(sql_uow)
    await data_access.execute(
        update(ApprovalToken).values(expires_at=utc_now() - timedelta(minutes=1))
    )

    async def _redeem(repos):
        return await repos.approval_tokens.redeem(token)

    with pytest.raises(InvalidOrExpiredTokenException):
        await sql_uow.run(_redeem)

    purged = await data_access.run_in_transaction(
        lambda session: ApprovalTokenStore(session).purge(utc_now())
    )
    assert purged == 1


async def test_reset_token_failures_are_classified(sql_uow) -> None:
    account_id, _ = await _pending_with_token(sql_uow)

    async def _issue(repos):
        return await repos.reset_tokens.issue(account_id, "hr@globex.test")

    token = await sql_uow.run(_issue)

    async def _redeem(repos):
        return await repos.reset_tokens.redeem(token, "hr@globex.test")

    assert await sql_uow.run(_redeem) == account_id
    with pytest.raises(TokenAlreadyUsedException):
        await sql_uow.run(_redeem)

    async def _other_email(repos):
        return await repos.reset_tokens.redeem(token, "someone@else.test")

    with pytest.raises(InvalidOrExpiredTokenException) as excinfo:
        await sql_uow.run(_other_email)
    assert not isinstance(excinfo.value, TokenExpiredException)


async def test_duplicate_email_maps_to_domain_error(sql_uow) -> None:
    await _pending_with_token(sql_uow)

    async def _duplicate(repos):
        return await repos.accounts.create(_admin("hr@globex.test", "other"))

    with pytest.raises(AccountAlreadyExistsException):
        await sql_uow.run(_duplicate)


async def test_approve_is_conditional_on_pending(sql_uow) -> None:
    account_id, _ = await _pending_with_token(sql_uow)

    async def _approve(repos):
        return await repos.accounts.approve(account_id, None, utc_now())

    first = await sql_uow.run(_approve)
    assert first is not None and first.is_approved
    assert await sql_uow.run(_approve) is None
