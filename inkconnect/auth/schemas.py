"""
inkconnect/auth/schemas.py

Authentication Schemas
- Signup (public self-registration, always a client account)
- Login (JSON) and login response
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from inkconnect.core.validators import password_validator
from inkconnect.profile.schemas import ProfileRead


class SignupRequest(BaseModel):
    email: EmailStr = Field(..., description="Login email address")
    password: str = Field(..., description="Account password")
    full_name: str = Field(..., min_length=1, max_length=200)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return password_validator(value)

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name cannot be blank.")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Token is also set as the HttpOnly `access_token` cookie."""

    access_token: str
    token_type: str = "bearer"
    profile: ProfileRead
