"""Tests for auth endpoints: signup, login and self-service."""

from httpx import AsyncClient

from app.application.interfaces.services import EmailTemplate
from app.domain.enums import AccountRole
from app.infrastructure.security.jwt import verify_session_credential
from tests.conftest import DEFAULT_PASSWORD, bearer

SIGNUP = {
    "company_name": "Globex",
    "email": "hr@globex.test",
    "username": "globex",
    "password": "password123",
}


async def test_signup_returns_201_pending(
    client: AsyncClient, store, emails, super_tenant
) -> None:
    response = await client.post("/api/v1/auth/signup", json=SIGNUP)
    assert response.status_code == 201
    data = response.json()
    assert "pending approval" in data["message"]
    account = data["account"]
    assert account["is_approved"] is False
    assert account["role"] == "admin"
    assert account["parent_account_id"] == super_tenant.id
    assert "hashed_password" not in account
    assert len(emails.of(EmailTemplate.APPROVAL_REQUEST)) == 1


async def test_signup_duplicate_returns_409(client: AsyncClient, super_tenant) -> None:
    assert (await client.post("/api/v1/auth/signup", json=SIGNUP)).status_code == 201
    response = await client.post(
        "/api/v1/auth/signup", json={**SIGNUP, "username": "someone-else"}
    )
    assert response.status_code == 409
    assert response.json()["error"] == "ACCOUNT_ALREADY_EXISTS"


async def test_signup_validation_returns_400(client: AsyncClient, super_tenant) -> None:
    bad_email = await client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "not-an-email"})
    assert bad_email.status_code == 400
    assert bad_email.json()["error"] == "VALIDATION_ERROR"
    short = await client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "short"})
    assert short.status_code == 400
    assert short.json()["details"]["field"] == "password"
    missing = await client.post("/api/v1/auth/signup", json={})
    assert missing.status_code == 400


async def test_signup_without_super_tenant_returns_409(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/signup", json=SIGNUP)
    assert response.status_code == 409
    assert response.json()["error"] == "INVALID_STATE"


async def test_login_by_email_and_username(client: AsyncClient, tenant_admin) -> None:
    by_email = await client.post(
        "/api/v1/auth/login", json={"email": "Admin@Acme.test", "password": DEFAULT_PASSWORD}
    )
    assert by_email.status_code == 200
    data = by_email.json()
    assert data["token_type"] == "bearer"
    assert data["account"]["id"] == tenant_admin.id
    claims = verify_session_credential(data["access_token"])
    assert claims.tenant_id == tenant_admin.id
    assert claims.role is AccountRole.ADMIN

    by_username = await client.post(
        "/api/v1/auth/login", json={"identifier": "acme-admin", "password": DEFAULT_PASSWORD}
    )
    assert by_username.status_code == 200


async def test_login_invalid_credentials_returns_401(client: AsyncClient, tenant_admin) -> None:
    """Unknown account and wrong password give the same generic 401."""
    wrong = await client.post(
        "/api/v1/auth/login", json={"identifier": "acme-admin", "password": "wrong-password"}
    )
    unknown = await client.post(
        "/api/v1/auth/login", json={"identifier": "nobody", "password": "password123"}
    )
    for response in (wrong, unknown):
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"
        assert response.headers["www-authenticate"] == "Bearer"


async def test_login_pending_account_returns_403(
    client: AsyncClient, store, super_tenant, password_hash
) -> None:
    store.add_account(
        email="new@globex.test",
        username="globex",
        hashed_password=password_hash,
        parent_account_id=super_tenant.id,
        is_approved=False,
    )
    response = await client.post(
        "/api/v1/auth/login", json={"identifier": "globex", "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 403
    assert response.json()["error"] == "ACCOUNT_NOT_APPROVED"


async def test_login_missing_body_returns_400(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/login", json={})
    assert response.status_code == 400


async def test_me_requires_credential(client: AsyncClient) -> None:
    missing = await client.get("/api/v1/auth/me")
    assert missing.status_code == 401
    garbage = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
    assert garbage.status_code == 401


async def test_me_returns_account(client: AsyncClient, recruiter) -> None:
    response = await client.get("/api/v1/auth/me", headers=bearer(recruiter))
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == recruiter.id
    assert data["role"] == "recruiter"


async def test_update_profile(client: AsyncClient, tenant_admin, recruiter) -> None:
    admin = await client.put(
        "/api/v1/auth/profile",
        json={"username": "acme-boss", "company_name": "Acme Holdings"},
        headers=bearer(tenant_admin),
    )
    assert admin.status_code == 200
    assert admin.json()["company_name"] == "Acme Holdings"

    staff = await client.put(
        "/api/v1/auth/profile",
        json={"username": "rita2", "company_name": "Elsewhere"},
        headers=bearer(recruiter),
    )
    assert staff.status_code == 200
    assert staff.json()["username"] == "rita2"
    assert staff.json()["company_name"] == "Acme"

    taken = await client.put(
        "/api/v1/auth/profile", json={"username": "acme-boss"}, headers=bearer(recruiter)
    )
    assert taken.status_code == 409


async def test_change_password(client: AsyncClient, tenant_admin) -> None:
    wrong = await client.put(
        "/api/v1/auth/password",
        json={"current_password": "wrong-one", "new_password": "another-pass"},
        headers=bearer(tenant_admin),
    )
    assert wrong.status_code == 401

    ok = await client.put(
        "/api/v1/auth/password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "another-pass"},
        headers=bearer(tenant_admin),
    )
    assert ok.status_code == 200
    login = await client.post(
        "/api/v1/auth/login", json={"identifier": "acme-admin", "password": "another-pass"}
    )
    assert login.status_code == 200
