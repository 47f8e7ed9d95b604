"""Auth API schemas."""

from pydantic import AliasChoices, BaseModel, EmailStr, Field

from app.schemas.account import AccountResponse


class SignupRequest(BaseModel):
    """Request body for tenant signup. The account starts pending approval."""

    company_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1, description="Password (policy minimum applies)")


class SignupResponse(BaseModel):
    message: str
    account: AccountResponse


class LoginRequest(BaseModel):
    """Request body for login. identifier is an email (contains '@') or a username."""

    identifier: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("identifier", "email", "username"),
        description="Email or username",
    )
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Session credential response."""

    access_token: str
    token_type: str = "bearer"
    account: AccountResponse


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request body for POST /auth/reset-password (token from the emailed link)."""

    email: EmailStr
    token: str = Field(..., min_length=1, max_length=256)
    new_password: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("new_password", "password"),
    )


class MessageResponse(BaseModel):
    message: str
