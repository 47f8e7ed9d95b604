"""Domain layer: enums, tenancy rules, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import AccountRole
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AccountNotApprovedException,
    AlreadyApprovedException,
    AtsException,
    AuthenticationException,
    AuthorizationException,
    DatabaseUnreachableException,
    InvalidOrExpiredTokenException,
    InvalidStateException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    TokenAlreadyUsedException,
    TokenExpiredException,
    TransientStorageFailureException,
    ValidationException,
)
from app.domain.tenancy import (
    RoleCapabilities,
    capabilities,
    is_super_tenant,
    resolve_tenant,
)

__all__ = [
    # Enums
    "AccountRole",
    # Exceptions
    "AccountAlreadyExistsException",
    "AccountNotApprovedException",
    "AlreadyApprovedException",
    "AtsException",
    "AuthenticationException",
    "AuthorizationException",
    "DatabaseUnreachableException",
    "InvalidOrExpiredTokenException",
    "InvalidStateException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "TokenAlreadyUsedException",
    "TokenExpiredException",
    "TransientStorageFailureException",
    "ValidationException",
    # Tenancy
    "RoleCapabilities",
    "capabilities",
    "is_super_tenant",
    "resolve_tenant",
]
