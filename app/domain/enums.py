"""Domain enumerations for the ATS backend.

Enums represent fixed sets of domain values (e.g. account role).
"""

from enum import Enum


class AccountRole(str, Enum):
    """Account role in the fixed three-role hierarchy.

    Admins own a tenant; recruiters and partners are staff scoped to the
    tenant of their parent admin.
    """

    ADMIN = "admin"
    RECRUITER = "recruiter"
    PARTNER = "partner"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [role.value for role in cls]

    @classmethod
    def staff_roles(cls) -> tuple["AccountRole", ...]:
        """Roles an admin may create under its tenant."""
        return (cls.RECRUITER, cls.PARTNER)

    @property
    def is_staff(self) -> bool:
        return self in (AccountRole.RECRUITER, AccountRole.PARTNER)
