"""Session credentials: signed JWTs issued at login and verified per request.

Uses app.core.config for secret, algorithm and lifetime. The tenant is derived
from the embedded role and parent claims on every verification, so no store
read is needed to authorize a request.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.application.dtos.account import AccountResult, SessionClaims
from app.core.config import get_settings
from app.domain.enums import AccountRole
from app.domain.exceptions import (
    AuthenticationException,
    InvalidStateException,
)
from app.domain.tenancy import resolve_tenant


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (e.g. sub, email, role).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta is not None:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode["exp"] = expire
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub. Raises ValueError if the token is
    invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if "sub" not in payload:
        raise ValueError("Token missing required claim: sub")
    return payload


def create_session_credential(
    account: AccountResult, expires_delta: timedelta | None = None
) -> str:
    """Issue a session credential for an authenticated account."""
    return create_access_token(
        {
            "sub": account.id,
            "email": account.email,
            "role": AccountRole(account.role).value,
            "parent_account_id": account.parent_account_id,
        },
        expires_delta=expires_delta,
    )


def verify_session_credential(token: str | None) -> SessionClaims:
    """Verify a session credential and return its claims with the derived tenant.

    Raises:
        AuthenticationException: Missing, malformed, expired, badly signed, or
            with claims that do not describe a valid account.
    """
    if not token:
        raise AuthenticationException("Missing session credential")
    try:
        payload = verify_token(token)
    except ValueError:
        raise AuthenticationException("Invalid or expired session credential") from None
    try:
        role = AccountRole(payload.get("role"))
    except ValueError:
        raise AuthenticationException("Invalid session credential") from None
    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise AuthenticationException("Invalid session credential")
    parent = payload.get("parent_account_id") or None
    claims_without_tenant = SessionClaims(
        account_id=str(payload["sub"]),
        email=email,
        role=role,
        parent_account_id=parent,
        tenant_id="",
    )
    try:
        tenant_id = resolve_tenant(claims_without_tenant)
    except InvalidStateException:
        raise AuthenticationException("Invalid session credential") from None
    return SessionClaims(
        account_id=claims_without_tenant.account_id,
        email=email,
        role=role,
        parent_account_id=parent,
        tenant_id=tenant_id,
    )
