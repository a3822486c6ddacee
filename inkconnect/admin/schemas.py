"""
inkconnect/admin/schemas.py

Admin Schemas
- Privileged account creation and role assignment
- Account activation status changes
- Studio dashboard totals
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from inkconnect.core.validators import password_validator, required_text
from inkconnect.database.enums import UserRole
from inkconnect.profile.schemas import ProfileRead


class AdminCreateUser(BaseModel):
    email: EmailStr
    password: str
    full_name: str = Field(..., max_length=200)
    role: UserRole

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return password_validator(value)

    @field_validator("full_name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return required_text(value, "Full name")


class AdminCreateUserResponse(BaseModel):
    success: bool = True
    user: ProfileRead


class RoleAssignment(BaseModel):
    role: UserRole


class ActiveStatusUpdate(BaseModel):
    is_active: bool


class ActiveStatusResponse(BaseModel):
    profile_id: UUID
    is_active: bool
    success: bool = True


class DashboardStats(BaseModel):
    total_artists: int
    total_clients: int
    upcoming_appointments: int = Field(
        ..., description="Pending or confirmed appointments in the next 30 days"
    )
    unread_messages: int
