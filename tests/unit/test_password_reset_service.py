"""Unit tests for the forgot/reset password flow."""

from urllib.parse import parse_qs, urlparse

import pytest

from app.application.dtos.account import AccountPolicy
from app.application.interfaces.services import EmailTemplate
from app.application.services.password_reset_service import (
    RESET_COMPLETED_MESSAGE,
    RESET_REQUESTED_MESSAGE,
    PasswordResetService,
)
from app.domain.exceptions import (
    InvalidOrExpiredTokenException,
    TokenAlreadyUsedException,
    TokenExpiredException,
    ValidationException,
)
from tests.fakes import (
    FakeAuthSecurity,
    FakeUnitOfWork,
    FrozenClock,
    InMemoryStore,
    RecordingEmailDispatcher,
)

HASH = "hashed::password123"


def _service(uow, emails) -> PasswordResetService:
    return PasswordResetService(
        uow,
        FakeAuthSecurity(),
        emails,
        AccountPolicy(frontend_url="https://app.example.test/"),
    )


@pytest.fixture
def service(uow, emails) -> PasswordResetService:
    return _service(uow, emails)


@pytest.fixture
def account(store):
    return store.add_account(email="jane@acme.test", username="jane", hashed_password=HASH)


def _link_params(emails: RecordingEmailDispatcher) -> dict[str, str]:
    url = emails.of(EmailTemplate.PASSWORD_RESET)[-1].data["reset_url"]
    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
        "https://app.example.test/reset-password"
    )
    return {k: v[0] for k, v in parse_qs(parsed.query).items()}


async def test_request_for_known_email_sends_link(service, store, emails, account) -> None:
    message = await service.request_reset(" Jane@Acme.test ")
    assert message == RESET_REQUESTED_MESSAGE
    [email] = emails.sent
    assert email.recipient == "jane@acme.test"
    assert email.data["expires_minutes"] == 60
    params = _link_params(emails)
    assert params["email"] == "jane@acme.test"
    assert len(store.tokens_for(account.id, "reset")) == 1


async def test_request_for_unknown_email_is_indistinguishable(
    service, store, emails, account
) -> None:
    message = await service.request_reset("ghost@acme.test")
    assert message == RESET_REQUESTED_MESSAGE
    assert emails.sent == []
    assert store.reset_tokens == {}


async def test_deferred_request_sends_only_when_task_runs(
    service, store, emails, account
) -> None:
    tasks: list = []

    def defer(func, *args) -> None:
        tasks.append((func, args))

    known = await service.request_reset("jane@acme.test", defer=defer)
    unknown = await service.request_reset("ghost@acme.test", defer=defer)
    assert known == unknown == RESET_REQUESTED_MESSAGE
    assert emails.sent == []
    assert len(tasks) == 1
    assert len(store.tokens_for(account.id, "reset")) == 1

    func, args = tasks[0]
    await func(*args)
    assert [e.recipient for e in emails.sent] == ["jane@acme.test"]
    assert "token" in _link_params(emails)


async def test_request_survives_email_failure(uow, store, account) -> None:
    failing = RecordingEmailDispatcher(raises=True)
    message = await _service(uow, failing).request_reset("jane@acme.test")
    assert message == RESET_REQUESTED_MESSAGE
    assert len(store.tokens_for(account.id, "reset")) == 1


async def test_reset_updates_password_once(service, store, emails, account) -> None:
    await service.request_reset("jane@acme.test")
    token = _link_params(emails)["token"]
    assert await service.reset_password(token, "jane@acme.test", "new-password-1") == (
        RESET_COMPLETED_MESSAGE
    )
    assert store.accounts[account.id]["hashed_password"] == "hashed::new-password-1"

    with pytest.raises(TokenAlreadyUsedException):
        await service.reset_password(token, "jane@acme.test", "new-password-2")
    assert store.accounts[account.id]["hashed_password"] == "hashed::new-password-1"


async def test_reset_with_other_email_fails(service, store, emails, account) -> None:
    store.add_account(email="mallory@acme.test", username="mallory", hashed_password=HASH)
    await service.request_reset("jane@acme.test")
    token = _link_params(emails)["token"]
    with pytest.raises(InvalidOrExpiredTokenException):
        await service.reset_password(token, "mallory@acme.test", "new-password-1")
    assert store.accounts[account.id]["hashed_password"] == HASH


async def test_expired_token_fails(emails) -> None:
    clock = FrozenClock()
    store = InMemoryStore(clock=clock)
    account = store.add_account(email="jane@acme.test", username="jane", hashed_password=HASH)
    service = _service(FakeUnitOfWork(store, reset_ttl_minutes=60), emails)
    await service.request_reset("jane@acme.test")
    token = _link_params(emails)["token"]
    clock.advance(minutes=60)
    with pytest.raises(TokenExpiredException):
        await service.reset_password(token, "jane@acme.test", "new-password-1")
    assert store.accounts[account.id]["hashed_password"] == HASH


async def test_new_request_supersedes_earlier_link(service, emails, account) -> None:
    await service.request_reset("jane@acme.test")
    first = _link_params(emails)["token"]
    await service.request_reset("jane@acme.test")
    second = _link_params(emails)["token"]
    with pytest.raises(InvalidOrExpiredTokenException):
        await service.reset_password(first, "jane@acme.test", "new-password-1")
    await service.reset_password(second, "jane@acme.test", "new-password-1")


async def test_short_password_rejected_before_token_is_spent(
    service, store, emails, account
) -> None:
    await service.request_reset("jane@acme.test")
    token = _link_params(emails)["token"]
    with pytest.raises(ValidationException):
        await service.reset_password(token, "jane@acme.test", "short")
    assert [t["used"] for t in store.tokens_for(account.id, "reset")] == [False]


@pytest.mark.parametrize("token", ["", "nope", "x" * 300])
async def test_malformed_token_is_invalid(service, account, token: str) -> None:
    with pytest.raises(InvalidOrExpiredTokenException):
        await service.reset_password(token, "jane@acme.test", "new-password-1")
