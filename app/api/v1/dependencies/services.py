"""Application service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.application.dtos.account import AccountPolicy
from app.application.interfaces.repositories import IUnitOfWork
from app.application.interfaces.services import IEmailDispatcher
from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.application.services.authentication_service import AuthenticationService
from app.application.services.password_reset_service import PasswordResetService
from app.core.config import get_settings
from app.infrastructure.external.email.dispatcher import build_email_dispatcher

from .auth import AuthSecurity, get_auth_security
from .db import get_unit_of_work


def get_account_policy() -> AccountPolicy:
    """Account rules from settings."""
    settings = get_settings()
    return AccountPolicy(
        min_password_length=settings.min_password_length,
        staff_requires_approval=settings.staff_requires_approval,
        approval_notification_email=settings.approval_notification_email,
        api_public_url=settings.api_public_url,
        frontend_url=settings.frontend_url,
        approval_token_ttl_minutes=settings.approval_token_ttl_minutes,
        password_reset_token_ttl_minutes=settings.password_reset_token_ttl_minutes,
    )


def get_email_dispatcher(request: Request) -> IEmailDispatcher:
    """Dispatcher built by the lifespan (built from settings when absent, e.g. without lifespan)."""
    dispatcher = getattr(request.app.state, "email_dispatcher", None)
    if dispatcher is None:
        dispatcher = build_email_dispatcher(get_settings())
        request.app.state.email_dispatcher = dispatcher
    return dispatcher


def get_lifecycle_service(
    uow: Annotated[IUnitOfWork, Depends(get_unit_of_work)],
    auth_security: Annotated[AuthSecurity, Depends(get_auth_security)],
    email_dispatcher: Annotated[IEmailDispatcher, Depends(get_email_dispatcher)],
    policy: Annotated[AccountPolicy, Depends(get_account_policy)],
) -> AccountLifecycleService:
    return AccountLifecycleService(uow, auth_security, email_dispatcher, policy)


def get_authentication_service(
    uow: Annotated[IUnitOfWork, Depends(get_unit_of_work)],
    auth_security: Annotated[AuthSecurity, Depends(get_auth_security)],
    policy: Annotated[AccountPolicy, Depends(get_account_policy)],
) -> AuthenticationService:
    return AuthenticationService(uow, auth_security, policy)


def get_password_reset_service(
    uow: Annotated[IUnitOfWork, Depends(get_unit_of_work)],
    auth_security: Annotated[AuthSecurity, Depends(get_auth_security)],
    email_dispatcher: Annotated[IEmailDispatcher, Depends(get_email_dispatcher)],
    policy: Annotated[AccountPolicy, Depends(get_account_policy)],
) -> PasswordResetService:
    return PasswordResetService(uow, auth_security, email_dispatcher, policy)
