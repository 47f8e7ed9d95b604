"""Auth API: signup, login, and self-service on the current account.

Uses only injected dependencies (services from app.api.v1.dependencies); no
manual repository construction.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_authentication_service,
    get_current_claims,
    get_lifecycle_service,
)
from app.application.dtos.account import SessionClaims
from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.application.services.authentication_service import AuthenticationService
from app.core.limiter import check_auth_rate_per_identifier, limit_auth, limit_writes
from app.schemas.account import (
    AccountResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
)
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SignupResponse,
)

router = APIRouter()


@router.post("/signup", response_model=SignupResponse, status_code=201)
@limit_auth
async def signup(
    request: Request,
    body: SignupRequest,
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """Register a new organization. The account is pending until the operator approves it."""
    result = await service.signup(
        company_name=body.company_name,
        email=body.email,
        username=body.username,
        password=body.password,
    )
    return SignupResponse(
        message=result.message,
        account=AccountResponse.model_validate(result.account),
    )


@router.post("/login", response_model=LoginResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Authenticate with email or username and password; return a session credential.

    403 when the credentials are right but the account is still pending approval.
    """
    check_auth_rate_per_identifier(body.identifier)
    result = await service.login(body.identifier, body.password)
    return LoginResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        account=AccountResponse.model_validate(result.account),
    )


@router.get("/me", response_model=AccountResponse)
async def get_me(
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Return the currently authenticated account.

    Requires Authorization: Bearer <token>.
    """
    account = await service.me(claims)
    return AccountResponse.model_validate(account)


@router.put("/profile", response_model=AccountResponse)
@limit_writes
async def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Update username and (admins only) company name."""
    account = await service.update_profile(
        claims, username=body.username, company_name=body.company_name
    )
    return AccountResponse.model_validate(account)


@router.put("/password", response_model=MessageResponse)
@limit_writes
async def change_password(
    request: Request,
    body: PasswordChangeRequest,
    claims: Annotated[SessionClaims, Depends(get_current_claims)],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Change the caller's password; the current password must match."""
    await service.change_password(claims, body.current_password, body.new_password)
    return MessageResponse(message="Password updated successfully")
