"""Authentication-related request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    """Admin login by username or email."""

    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"
    username: str


class AdminCreate(BaseModel):
    username: str
    password: str
    email: str | None = None


class ProfileUpdate(BaseModel):
    """Profile edit; a new password must come with the current one."""

    username: str | None = None
    email: str | None = None
    current_password: str | None = None
    new_password: str | None = None


class AdminResponse(BaseModel):
    id: int
    username: str
    email: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
