"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, token stores, email).
"""

from app.application.interfaces import (
    EmailTemplate,
    IAccountRepository,
    IApprovalTokenStore,
    IAuthSecurity,
    IEmailDispatcher,
    IPasswordResetTokenStore,
    IUnitOfWork,
    Repositories,
)
from app.application.services import (
    AccountLifecycleService,
    AuthenticationService,
    PasswordResetService,
)

__all__ = [
    "AccountLifecycleService",
    "AuthenticationService",
    "EmailTemplate",
    "IAccountRepository",
    "IApprovalTokenStore",
    "IAuthSecurity",
    "IEmailDispatcher",
    "IPasswordResetTokenStore",
    "IUnitOfWork",
    "PasswordResetService",
    "Repositories",
]
