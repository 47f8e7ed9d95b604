"""Approval API: operator review of pending accounts and the emailed approval link."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from app.api.v1.dependencies import get_lifecycle_service, require_super_tenant
from app.application.dtos.account import SessionClaims
from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.core.exception_handlers import status_for
from app.core.limiter import limit_auth, limit_writes
from app.domain.exceptions import AtsException, InvalidOrExpiredTokenException
from app.pages import render_approval_page
from app.schemas.account import AccountListResponse, AccountResponse
from app.schemas.auth import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_LINK_FAILURES: dict[int, tuple[str, str]] = {
    400: ("Invalid link", "This approval link is malformed. Use the link from the email."),
    404: ("Account not found", "The account for this link no longer exists."),
    409: ("Already approved", "This account has already been approved."),
    410: ("Link expired", "This approval link is invalid, expired, or has already been used."),
    503: ("Try again later", "The service is temporarily unavailable. Please retry shortly."),
}


@router.get("/approve-by-token", response_class=HTMLResponse)
@limit_auth
async def approve_by_token(
    request: Request,
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
    token: Annotated[str | None, Query()] = None,
):
    """Approve the account behind an emailed link and show the outcome as a page.

    400 malformed, 404 account gone, 409 already approved, 410 invalid/expired/used.
    """
    try:
        account = await service.approve_via_token(token)
    except AtsException as exc:
        status = 410 if isinstance(exc, InvalidOrExpiredTokenException) else status_for(exc)
        title, message = _LINK_FAILURES.get(
            status, ("Approval failed", "The account could not be approved.")
        )
        return HTMLResponse(
            render_approval_page(title, message, success=False),
            status_code=status,
            headers={"Retry-After": "5"} if status == 503 else None,
        )
    return HTMLResponse(
        render_approval_page(
            "Account approved",
            f"{account.company_name} ({account.email}) can now sign in.",
            success=True,
        )
    )


@router.get("/pending-approvals", response_model=AccountListResponse)
async def pending_approvals(
    claims: Annotated[SessionClaims, Depends(require_super_tenant)],
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """List accounts awaiting approval, newest first. Super admin only."""
    accounts = await service.list_pending(claims)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts]
    )


@router.post("/approve-account/{account_id}", response_model=AccountResponse)
@limit_writes
async def approve_account(
    request: Request,
    account_id: str,
    claims: Annotated[SessionClaims, Depends(require_super_tenant)],
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """Approve a pending account. Super admin only."""
    account = await service.approve(claims, account_id)
    return AccountResponse.model_validate(account)


@router.post("/reject-account/{account_id}", response_model=MessageResponse)
@limit_writes
async def reject_account(
    request: Request,
    account_id: str,
    claims: Annotated[SessionClaims, Depends(require_super_tenant)],
    service: Annotated[AccountLifecycleService, Depends(get_lifecycle_service)],
):
    """Reject (delete) a pending account. Approved accounts cannot be rejected."""
    await service.reject(claims, account_id)
    return MessageResponse(message="Account rejected")
