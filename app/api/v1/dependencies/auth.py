"""Auth dependencies: hashing/credential provider and session credential checks (composition root)."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.account import SessionClaims
from app.domain.exceptions import AuthorizationException
from app.domain.tenancy import capabilities, is_super_tenant
from app.infrastructure.security.jwt import (
    create_session_credential,
    verify_session_credential,
)
from app.infrastructure.security.password import get_password_hash, verify_password

_http_bearer = HTTPBearer(auto_error=False)


class AuthSecurity:
    """Session credentials and password hashing provided via DI (no direct infra imports in services)."""

    def create_session_credential(self, account: Any) -> str:
        return create_session_credential(account)

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return verify_password(password, hashed_password)


def get_auth_security() -> AuthSecurity:
    """Session credential creation and password hashing (composition root)."""
    return AuthSecurity()


async def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> SessionClaims:
    """Verified claims from the Bearer credential; 401 when missing or invalid.

    No database read: role, parent and tenant come from the signed claims.
    """
    return verify_session_credential(credentials.credentials if credentials else None)


async def require_admin(
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
) -> SessionClaims:
    """Caller must be a tenant admin (manages staff)."""
    if not capabilities(claims.role).can_manage_staff:
        raise AuthorizationException(message="Admin access required")
    return claims


async def require_super_tenant(
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
) -> SessionClaims:
    """Caller must be the super-tenant (platform operator)."""
    if not is_super_tenant(claims):
        raise AuthorizationException(message="Super admin access required")
    return claims
