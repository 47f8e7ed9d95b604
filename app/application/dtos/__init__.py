"""Application DTOs (no ORM dependency)."""

from app.application.dtos.account import (
    AccountCreate,
    AccountPolicy,
    AccountResult,
    LoginResult,
    SessionClaims,
    SignupResult,
)

__all__ = [
    "AccountPolicy",
    "AccountCreate",
    "AccountResult",
    "LoginResult",
    "SessionClaims",
    "SignupResult",
]
