"""User model definitions."""
from pydantic import BaseModel, EmailStr, Field

from app.models.base import CamelModel, UtcDatetime


class UserCreate(CamelModel):
    """Registration payload."""

    email: EmailStr
    name: str
    password: str = Field(min_length=8)


class LoginRequest(CamelModel):
    """Login payload."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Bearer token returned by login, in the OAuth2 token response shape."""

    access_token: str
    token_type: str = "bearer"


class User(CamelModel):
    """User model without password (for API responses)."""

    id: str = Field(alias="_id", serialization_alias="id")
    email: EmailStr
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
