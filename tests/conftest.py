"""Pytest configuration and fixtures for the ATS backend.

Environment is set before app modules are imported so Settings validation
passes. HTTP tests build an app with create_app() and replace the unit of work
and email dispatcher with the in-memory fakes from tests.fakes; integration
tests (marked requires_db) use TEST_DATABASE_URL and skip without it.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only-0123456789abcdef")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = ""
os.environ["EMAIL_PROVIDER"] = "log"

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies import get_email_dispatcher, get_unit_of_work
from app.application.dtos.account import AccountResult
from app.core.config import get_settings
from app.core.limiter import limiter, reset_auth_rate_counters
from app.domain.enums import AccountRole
from app.infrastructure.security.jwt import create_session_credential
from app.infrastructure.security.password import get_password_hash
from tests.fakes import (
    FakeAuthSecurity,
    FakeUnitOfWork,
    InMemoryStore,
    RecordingEmailDispatcher,
)

get_settings.cache_clear()

DEFAULT_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def _isolated_settings_and_limits():
    """Fresh settings and no rate limiting for every test."""
    get_settings.cache_clear()
    limiter.enabled = False
    reset_auth_rate_counters()
    yield
    limiter.enabled = True
    reset_auth_rate_counters()
    get_settings.cache_clear()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def emails() -> RecordingEmailDispatcher:
    return RecordingEmailDispatcher()


@pytest.fixture
def uow(store: InMemoryStore) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture
def auth_security() -> FakeAuthSecurity:
    return FakeAuthSecurity()


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Real bcrypt hash of DEFAULT_PASSWORD (cost 4) for HTTP login tests."""
    return get_password_hash(DEFAULT_PASSWORD, rounds=4)


@pytest.fixture
def super_tenant(store: InMemoryStore, password_hash: str) -> AccountResult:
    return store.add_account(
        email="ops@platform.test",
        username="ops",
        hashed_password=password_hash,
        company_name="Platform",
    )


@pytest.fixture
def tenant_admin(
    store: InMemoryStore, super_tenant: AccountResult, password_hash: str
) -> AccountResult:
    return store.add_account(
        email="admin@acme.test",
        username="acme-admin",
        hashed_password=password_hash,
        company_name="Acme",
        parent_account_id=super_tenant.id,
    )


@pytest.fixture
def recruiter(
    store: InMemoryStore, tenant_admin: AccountResult, password_hash: str
) -> AccountResult:
    return store.add_account(
        email="rita@acme.test",
        username="rita",
        hashed_password=password_hash,
        company_name="Acme",
        role=AccountRole.RECRUITER,
        parent_account_id=tenant_admin.id,
    )


def bearer(account: AccountResult) -> dict[str, str]:
    """Authorization header carrying a real session credential for account."""
    return {"Authorization": f"Bearer {create_session_credential(account)}"}


@pytest.fixture
def app(store: InMemoryStore, emails: RecordingEmailDispatcher):
    """FastAPI app wired to the in-memory store (no lifespan, no database)."""
    from app.main import create_app

    application = create_app()
    application.dependency_overrides[get_unit_of_work] = lambda: FakeUnitOfWork(store)
    application.dependency_overrides[get_email_dispatcher] = lambda: emails
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
