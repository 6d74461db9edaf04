"""Request/response schemas for auth and account endpoints."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from coopqueue.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)

# Requester id used when no valid session is present.
ANONYMOUS_ID = 0


class Role(str, Enum):
    """Closed set of account roles."""

    STANDARD = "standard"
    ADMINISTRATOR = "administrator"


class RegisterRequest(BaseModel):
    """Registration form; invite_code is checked only when REGISTRATION_KEY is configured."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username (3-20 characters)",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password (at least 6 characters)",
    )
    confirm_password: str = Field(..., description="Must equal password")
    invite_code: str = Field(default="", max_length=255, description="Invite code")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        # Length limits apply to the stored (trimmed) name.
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class LoginResponse(BaseModel):
    """Session issued after a successful login."""

    username: str
    role: Role
    token: str = Field(..., description="Signed JWT session token")
    token_type: str = Field(default="bearer", description="Token type")


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="New password (at least 6 characters)",
    )
    confirm_new_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Passwords do not match.")
        return self


class ResetPasswordRequest(BaseModel):
    """Administrative password reset body."""

    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class SessionClaims(BaseModel):
    """Decoded, verified session token claims."""

    subject_id: int
    subject_name: str
    role: Role
    issued_at: datetime
    expires_at: datetime


class CurrentUser(BaseModel):
    """Requester identity (id, username, role) passed into every core call."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role = Role.STANDARD

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    @property
    def is_anonymous(self) -> bool:
        return self.id == ANONYMOUS_ID

    @classmethod
    def anonymous(cls) -> "CurrentUser":
        return cls(id=ANONYMOUS_ID, username="Unknown", role=Role.STANDARD)

    @classmethod
    def from_account(cls, account) -> "CurrentUser":
        """Build from a stored account row; the row, not the token, is authoritative for name and role."""
        return cls(id=account.id, username=account.username, role=Role(account.role))


class AccountListItem(BaseModel):
    """Account entry for the user list (no password material)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    created_at: datetime | None = None
