"""Project model definitions."""
from typing import Optional

from pydantic import Field

from app.models.base import CamelModel, UtcDatetime


class ProjectCreate(CamelModel):
    """Project creation model. The owning client comes from the URL."""

    name: str


class ProjectUpdate(CamelModel):
    """Project update model."""

    name: Optional[str] = None


class Project(CamelModel):
    """Full project model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    client_id: str
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
