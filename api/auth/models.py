# api/auth/models.py
"""
Pydantic models for authentication endpoints.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict, computed_field

from core import labels


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Request to refresh access token."""
    refresh_token: str


class LoginRequest(BaseModel):
    """Login credentials."""
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None


class PasswordChange(BaseModel):
    """Request to change password."""
    current_password: str
    new_password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    """User data response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    last_login_at: datetime | None = None

    @computed_field
    @property
    def role_label(self) -> str:
        return labels.role_label(self.role)
