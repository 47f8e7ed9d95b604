"""Input normalization and checks shared by the account services."""

import re

from app.domain.enums import AccountRole
from app.domain.exceptions import ValidationException

# Matches secrets.token_urlsafe output with some slack on length.
_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{16,128}$")


def require_text(value: str | None, field: str) -> str:
    """Return value stripped; ValidationException when blank."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationException(f"{field} is required", field)
    return cleaned


def normalize_email(value: str | None) -> str:
    email = require_text(value, "email").lower()
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise ValidationException("email is not a valid address", "email")
    return email


def normalize_username(value: str | None) -> str:
    username = require_text(value, "username").lower()
    if "@" in username:
        raise ValidationException("username must not contain '@'", "username")
    return username


def validate_password(password: str | None, min_length: int, field: str = "password") -> str:
    if not password:
        raise ValidationException(f"{field} is required", field)
    if len(password) < min_length:
        raise ValidationException(
            f"{field} must be at least {min_length} characters", field
        )
    return password


def parse_staff_role(value: AccountRole | str | None) -> AccountRole:
    """Return the role when it is a staff role (recruiter or partner)."""
    try:
        role = AccountRole(value)
    except ValueError:
        raise ValidationException("role must be recruiter or partner", "role") from None
    if not role.is_staff:
        raise ValidationException("role must be recruiter or partner", "role")
    return role


def is_well_formed_token(token: str | None) -> bool:
    """True when token has the shape of an issued link token."""
    return bool(token) and _TOKEN_RE.fullmatch(token) is not None
