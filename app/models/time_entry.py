"""Time entry model definitions."""
from typing import Optional

from pydantic import Field

from app.models.base import CamelModel, UtcDatetime


class TimeEntryCreate(CamelModel):
    """
    Manual time entry payload.

    Timestamps arrive as raw strings and are parsed by the service so that
    bad values produce the same error messages as everywhere else.
    """

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    task_id: Optional[str] = None
    description: Optional[str] = None


class TimeEntryUpdate(CamelModel):
    """
    Time entry patch - every field is optional.

    A field that is missing from the payload is left unchanged, while a field
    sent as null is cleared. Use provided() to tell the two apart.
    """

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    task_id: Optional[str] = None
    description: Optional[str] = None

    def provided(self, field: str) -> bool:
        """Whether the field was present in the payload, even if null."""
        return field in self.model_fields_set


class TimerStart(CamelModel):
    """Request model for starting a timer."""

    task_id: Optional[str] = None
    description: Optional[str] = None


class ClientSummary(CamelModel):
    """Client embedded in a time entry response."""

    id: str
    name: str


class ProjectSummary(CamelModel):
    """Project embedded in a time entry response, with its client."""

    id: str
    name: str
    client_id: str
    client: ClientSummary


class TaskSummary(CamelModel):
    """Task embedded in a time entry response, with its project and client."""

    id: str
    name: str
    project_id: str
    project: ProjectSummary


class TimeEntry(CamelModel):
    """Full time entry model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    task_id: Optional[str] = None
    task: Optional[TaskSummary] = None
    description: Optional[str] = None
    start_time: UtcDatetime
    end_time: Optional[UtcDatetime] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @property
    def is_running(self) -> bool:
        return self.end_time is None
