"""Tests for staff management endpoints (admin only, tenant scoped)."""

from httpx import AsyncClient

from app.domain.enums import AccountRole
from tests.conftest import DEFAULT_PASSWORD, bearer


async def test_admin_creates_recruiter_by_default(
    client: AsyncClient, tenant_admin
) -> None:
    response = await client.post(
        "/api/v1/auth/recruiters",
        json={"email": "new@acme.test", "username": "newbie", "password": "password123"},
        headers=bearer(tenant_admin),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "recruiter"
    assert data["parent_account_id"] == tenant_admin.id
    assert data["company_name"] == "Acme"
    assert data["is_approved"] is True

    login = await client.post(
        "/api/v1/auth/login", json={"identifier": "newbie", "password": "password123"}
    )
    assert login.status_code == 200


async def test_admin_creates_partner(client: AsyncClient, tenant_admin) -> None:
    response = await client.post(
        "/api/v1/auth/recruiters",
        json={
            "email": "pat@acme.test",
            "username": "pat",
            "password": "password123",
            "role": "partner",
        },
        headers=bearer(tenant_admin),
    )
    assert response.status_code == 201
    assert response.json()["role"] == "partner"


async def test_admin_role_rejected(client: AsyncClient, tenant_admin) -> None:
    response = await client.post(
        "/api/v1/auth/recruiters",
        json={
            "email": "x@acme.test",
            "username": "x",
            "password": "password123",
            "role": "admin",
        },
        headers=bearer(tenant_admin),
    )
    assert response.status_code == 400


async def test_staff_cannot_manage_staff(client: AsyncClient, recruiter) -> None:
    create = await client.post(
        "/api/v1/auth/recruiters",
        json={"email": "x@acme.test", "username": "x", "password": "password123"},
        headers=bearer(recruiter),
    )
    assert create.status_code == 403
    listing = await client.get("/api/v1/auth/recruiters", headers=bearer(recruiter))
    assert listing.status_code == 403


async def test_listings_are_tenant_scoped(
    client: AsyncClient, store, super_tenant, tenant_admin, recruiter
) -> None:
    partner = store.add_account(
        email="pat@acme.test",
        username="pat",
        role=AccountRole.PARTNER,
        parent_account_id=tenant_admin.id,
    )
    other_admin = store.add_account(
        email="boss@other.test", username="boss", parent_account_id=super_tenant.id
    )
    store.add_account(
        email="r@other.test",
        username="r-other",
        role=AccountRole.RECRUITER,
        parent_account_id=other_admin.id,
    )

    recruiters = await client.get("/api/v1/auth/recruiters", headers=bearer(tenant_admin))
    assert recruiters.status_code == 200
    assert [a["id"] for a in recruiters.json()["accounts"]] == [recruiter.id]

    partners = await client.get("/api/v1/auth/partners", headers=bearer(tenant_admin))
    assert [a["id"] for a in partners.json()["accounts"]] == [partner.id]

    other = await client.get("/api/v1/auth/recruiters", headers=bearer(other_admin))
    assert [a["username"] for a in other.json()["accounts"]] == ["r-other"]


async def test_admin_resets_staff_password(
    client: AsyncClient, tenant_admin, recruiter
) -> None:
    response = await client.put(
        f"/api/v1/auth/recruiters/{recruiter.id}/password",
        json={"password": "fresh-password"},
        headers=bearer(tenant_admin),
    )
    assert response.status_code == 200
    old = await client.post(
        "/api/v1/auth/login", json={"identifier": "rita", "password": DEFAULT_PASSWORD}
    )
    assert old.status_code == 401
    new = await client.post(
        "/api/v1/auth/login", json={"identifier": "rita", "password": "fresh-password"}
    )
    assert new.status_code == 200


async def test_reset_password_of_other_tenant_staff_is_404(
    client: AsyncClient, store, super_tenant, recruiter
) -> None:
    other_admin = store.add_account(
        email="boss@other.test", username="boss", parent_account_id=super_tenant.id
    )
    response = await client.put(
        f"/api/v1/auth/recruiters/{recruiter.id}/password",
        json={"new_password": "fresh-password"},
        headers=bearer(other_admin),
    )
    assert response.status_code == 404
