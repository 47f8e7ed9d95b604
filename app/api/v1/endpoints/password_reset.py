"""Forgot/reset password API (unauthenticated)."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.api.v1.dependencies import get_password_reset_service
from app.application.services.password_reset_service import PasswordResetService
from app.core.limiter import check_auth_rate_per_identifier, limit_auth
from app.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
)

router = APIRouter()


@router.post("/forgot-password", response_model=MessageResponse)
@limit_auth
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Email a reset link when the address is registered. Same response either way."""
    check_auth_rate_per_identifier(body.email)
    message = await service.request_reset(body.email, defer=background_tasks.add_task)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=MessageResponse)
@limit_auth
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Set a new password with the emailed token. 401 when the token is invalid, used or expired."""
    check_auth_rate_per_identifier(body.email)
    message = await service.reset_password(body.token, body.email, body.new_password)
    return MessageResponse(message=message)
