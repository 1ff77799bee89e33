"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional
from backend.app.schemas.common import CamelModel
from backend.app.schemas.dealer import Location, LocationUpdate


class DealerRegister(CamelModel):
    """
    Schema for dealer registration.

    Used by POST /auth/register endpoint.
    """
    name: str = Field(..., min_length=1, max_length=200, description="Dealer name")
    email: EmailStr = Field(..., description="Dealer email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    phone: str = Field(..., min_length=1, max_length=50)
    whatsapp: str = Field(..., min_length=1, max_length=50)
    location: Location
    profile_image: Optional[str] = Field(None, max_length=1000, description="Profile image URL")

    @field_validator("name", "phone", "whatsapp")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class DealerLogin(CamelModel):
    """
    Schema for dealer login.

    Used by POST /auth/login endpoint.
    """
    email: EmailStr = Field(..., description="Dealer email address")
    password: str = Field(..., min_length=1, description="Password")


class AuthResponse(CamelModel):
    """
    Dealer profile plus session token.

    Returned by successful login/register operations.
    """
    id: str
    name: str
    email: str
    phone: str
    whatsapp: str
    location: Location
    profile_image: Optional[str] = None
    token: str = Field(..., description="JWT bearer token")


class ProfileUpdate(CamelModel):
    """
    Partial dealer profile update.

    Only the listed fields may change; unknown fields are rejected.
    A password supplied here is re-hashed.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    whatsapp: Optional[str] = Field(None, min_length=1, max_length=50)
    location: Optional[LocationUpdate] = None
    profile_image: Optional[str] = Field(None, max_length=1000)
    password: Optional[str] = Field(None, min_length=6)

    @model_validator(mode="after")
    def reject_nulls(self):
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class PasswordChange(CamelModel):
    """Schema for PUT /auth/change-password."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, description="New password (min 6 characters)")
