"""Pydantic schemas for user data validation."""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class UserBase(BaseModel):
    """Base user schema."""
    email: str = Field(..., min_length=3, max_length=255)
    full_name: str = ""
    phone: Optional[str] = None


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    """Schema for profile update. Omitted fields are left unchanged."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class User(UserBase):
    """Schema for user response."""
    id: int
    registration_date: date

    class Config:
        from_attributes = True


class UserWithToken(User):
    """Schema for user response with access token."""
    access_token: str
    token_type: str = "bearer"


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=6)
