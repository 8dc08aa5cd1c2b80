"""ObjectId helpers."""
from typing import Any, Optional

from bson import ObjectId


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for a 24-char hex string, or None if it is malformed."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
