"""API request/response schemas (Pydantic)."""

from app.schemas.account import (
    AccountListResponse,
    AccountResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    StaffCreateRequest,
    StaffPasswordResetRequest,
)
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
)
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

__all__ = [
    "AccountListResponse",
    "AccountResponse",
    "ForgotPasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PasswordChangeRequest",
    "ProfileUpdateRequest",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "ResetPasswordRequest",
    "SignupRequest",
    "SignupResponse",
    "StaffCreateRequest",
    "StaffPasswordResetRequest",
]
