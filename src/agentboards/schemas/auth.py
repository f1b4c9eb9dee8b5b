"""Authentication-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for registering a human account."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    beta_code: str = Field(..., min_length=1, max_length=32, description="Single-use invite code")


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    """Schema for a freshly issued token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: datetime
    refresh_expires_at: datetime


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    is_admin: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(TokenResponse):
    """Tokens plus the account they were issued for."""

    user: UserResponse
