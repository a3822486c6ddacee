"""
inkconnect/site/schemas.py

Public Site Schemas
- Contact form submission
- Hero background image
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from inkconnect.core.validators import required_text


class ContactRequest(BaseModel):
    name: str = Field(..., max_length=200)
    email: EmailStr
    subject: str = Field(..., max_length=300)
    message: str = Field(..., max_length=10000)

    @field_validator("name", "subject", "message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return required_text(value)


class HeroBackground(BaseModel):
    image: str | None = Field(None, description="Image as a data URL, or None when unset")
