"""Account API schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from app.domain.enums import AccountRole


class AccountResponse(BaseModel):
    """Account response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    company_name: str
    email: str
    username: str
    role: AccountRole
    parent_account_id: str | None = None
    is_approved: bool
    created_at: datetime | None = None
    approved_at: datetime | None = None


class StaffCreateRequest(BaseModel):
    """Request body for POST /auth/recruiters (recruiter or partner in the caller's tenant)."""

    email: EmailStr
    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1)
    role: AccountRole = AccountRole.RECRUITER


class ProfileUpdateRequest(BaseModel):
    """Request body for PUT /auth/profile. company_name is ignored for staff."""

    username: str = Field(..., min_length=1, max_length=128)
    company_name: str | None = Field(default=None, max_length=200)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class StaffPasswordResetRequest(BaseModel):
    new_password: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("new_password", "password"),
    )


class AccountListResponse(BaseModel):
    accounts: list[AccountResponse]
