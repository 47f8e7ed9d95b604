"""Application services: account lifecycle, authentication, password reset."""

from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.application.services.authentication_service import AuthenticationService
from app.application.services.password_reset_service import PasswordResetService

__all__ = [
    "AccountLifecycleService",
    "AuthenticationService",
    "PasswordResetService",
]
