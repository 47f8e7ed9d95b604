"""Staff API: tenant admins create, list and reset passwords of recruiters and partners."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_authentication_service,
    get_lifecycle_service,
    require_admin,
)
from app.application.dtos.account import SessionClaims
from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.application.services.authentication_service import AuthenticationService
from app.core.limiter import limit_writes
from app.domain.enums import AccountRole
from app.schemas.account import (
    AccountListResponse,
    AccountResponse,
    StaffCreateRequest,
    StaffPasswordResetRequest,
)
from app.schemas.auth import MessageResponse

router = APIRouter()


@router.post("/recruiters", response_model=AccountResponse, status_code=201)
@limit_writes
async def create_staff(
    request: Request,
    body: StaffCreateRequest,
    claims: Annotated[SessionClaims, Depends(require_admin)],
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """Create a recruiter or partner under the caller's tenant."""
    account = await service.create_staff(
        claims,
        email=body.email,
        username=body.username,
        password=body.password,
        role=body.role,
    )
    return AccountResponse.model_validate(account)


@router.get("/recruiters", response_model=AccountListResponse)
async def list_recruiters(
    claims: Annotated[SessionClaims, Depends(require_admin)],
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """Recruiters of the caller's tenant, newest first."""
    accounts = await service.list_staff(claims, AccountRole.RECRUITER)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts]
    )


@router.get("/partners", response_model=AccountListResponse)
async def list_partners(
    claims: Annotated[SessionClaims, Depends(require_admin)],
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """Partners of the caller's tenant, newest first."""
    accounts = await service.list_staff(claims, AccountRole.PARTNER)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts]
    )


@router.put("/recruiters/{account_id}/password", response_model=MessageResponse)
@limit_writes
async def reset_staff_password(
    request: Request,
    account_id: str,
    body: StaffPasswordResetRequest,
    claims: Annotated[SessionClaims, Depends(require_admin)],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Set a new password for a staff account of the caller's tenant."""
    await service.reset_staff_password(claims, account_id, body.new_password)
    return MessageResponse(message="Password reset successfully")
