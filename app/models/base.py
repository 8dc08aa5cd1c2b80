"""Shared model configuration."""
from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    """Stored datetimes are naive UTC; mark them so they serialize with a Z."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
