"""FastAPI dependencies (composition root). Routes import from here."""

from app.api.v1.dependencies.auth import (
    AuthSecurity,
    get_auth_security,
    get_current_claims,
    require_admin,
    require_super_tenant,
)
from app.api.v1.dependencies.db import get_data_access, get_unit_of_work
from app.api.v1.dependencies.services import (
    get_account_policy,
    get_authentication_service,
    get_email_dispatcher,
    get_lifecycle_service,
    get_password_reset_service,
)

__all__ = [
    "AuthSecurity",
    "get_account_policy",
    "get_auth_security",
    "get_authentication_service",
    "get_current_claims",
    "get_data_access",
    "get_email_dispatcher",
    "get_lifecycle_service",
    "get_password_reset_service",
    "get_unit_of_work",
    "require_admin",
    "require_super_tenant",
]
