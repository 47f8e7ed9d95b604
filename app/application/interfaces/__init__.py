"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IAccountRepository,
    IApprovalTokenStore,
    IPasswordResetTokenStore,
    IUnitOfWork,
    Repositories,
)
from app.application.interfaces.services import (
    EmailTemplate,
    IAuthSecurity,
    IEmailDispatcher,
)

__all__ = [
    "EmailTemplate",
    "IAccountRepository",
    "IApprovalTokenStore",
    "IAuthSecurity",
    "IEmailDispatcher",
    "IPasswordResetTokenStore",
    "IUnitOfWork",
    "Repositories",
]
