"""Task model definitions."""
from typing import Optional

from pydantic import Field

from app.models.base import CamelModel, UtcDatetime


class TaskCreate(CamelModel):
    """Task creation model. The owning project comes from the URL."""

    name: str


class TaskUpdate(CamelModel):
    """Task update model."""

    name: Optional[str] = None


class Task(CamelModel):
    """Full task model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    project_id: str
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
