"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services and outbound
collaborators (DIP).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol


class EmailTemplate(str, Enum):
    """Outbound email kinds the account lifecycle sends."""

    APPROVAL_REQUEST = "approval_request"
    ACCOUNT_APPROVED = "account_approved"
    PASSWORD_RESET = "password_reset"


class IEmailDispatcher(Protocol):
    """Protocol for outbound email. Returns False on failure; never raises."""

    async def dispatch(
        self, recipient: str, template: EmailTemplate, data: dict[str, Any]
    ) -> bool:
        """Render template with data and send it to recipient."""


class IAuthSecurity(Protocol):
    """Password hashing and session credential issuing (CPU-bound hashing is sync)."""

    def hash_password(self, password: str) -> str:
        """Return a bcrypt hash."""

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Return True when password matches."""

    def create_session_credential(self, account: Any) -> str:
        """Issue a signed session credential for the account."""
