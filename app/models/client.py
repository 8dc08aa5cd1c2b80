"""Client model definitions."""
from typing import Optional

from pydantic import Field

from app.models.base import CamelModel, UtcDatetime


class ClientCreate(CamelModel):
    """Client creation model."""

    name: str


class ClientUpdate(CamelModel):
    """Client update model."""

    name: Optional[str] = None


class Client(CamelModel):
    """Full client model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
