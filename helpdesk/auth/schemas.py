# helpdesk/auth/schemas.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from helpdesk.auth.models import UserRole


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    role: UserRole = UserRole.CUSTOMER
    verification_code: str | None = None
    company_name: str | None = None
    company_id: int | None = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name must not be blank")
        return value

    @field_validator("company_name", "verification_code")
    @classmethod
    def strip_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ProfileUpdate(BaseModel):
    full_name: str = Field(..., min_length=1)


class ProfileOut(BaseModel):
    id: int
    email: str
    full_name: str | None = None
    role: UserRole
    company_id: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileSummary(BaseModel):
    id: int
    full_name: str | None = None
    email: str
    role: UserRole

    model_config = {"from_attributes": True}


class VerificationCodeCreate(BaseModel):
    role: UserRole

    @field_validator("role")
    @classmethod
    def staff_only(cls, value: UserRole) -> UserRole:
        if value == UserRole.CUSTOMER:
            raise ValueError("Verification codes are only issued for agents and admins")
        return value


class VerificationCodeOut(BaseModel):
    code: str
    role: UserRole
    company_id: int | None = None
    used: bool

    model_config = {"from_attributes": True}
