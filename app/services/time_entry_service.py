"""Time entry service - business logic for listing and editing time entries."""
import logging
from typing import Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from app.services.timer_service import TIMER_RUNNING_MESSAGE, TimerService
from app.utils.errors import TimeEntryNotFoundError, TimerAlreadyRunningError
from app.utils.ids import parse_object_id
from app.utils.timestamps import (
    is_blank,
    parse_filter_timestamp,
    parse_timestamp,
    utcnow,
    validate_order,
)

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Service for handling time entry operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.time_entries = db["time_entries"]
        self.timer = TimerService(db)
        self.ownership = self.timer.ownership

    async def _find_owned(self, user_id: str, entry_id: str) -> dict:
        """Fetch an entry by ID scoped to its owner, or raise not found."""
        object_id = parse_object_id(entry_id)
        existing = None
        if object_id is not None:
            existing = await self.time_entries.find_one({
                "_id": object_id,
                "user_id": user_id,
            })

        if not existing:
            raise TimeEntryNotFoundError("Time entry not found")

        return existing

    async def list_entries(
        self,
        user_id: str,
        from_: Optional[str] = None,
        to: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> list[TimeEntry]:
        """
        List time entries for a user with optional filtering.

        Date bounds are inclusive and compare against start_time. Bounds that
        do not parse are ignored rather than rejected.

        Args:
            user_id: User ID
            from_: Optional lower bound on start_time
            to: Optional upper bound on start_time
            task_id: Optional task filter

        Returns:
            Time entries, most recent first
        """
        query = {"user_id": user_id}

        if task_id:
            query["task_id"] = task_id

        start_bound = parse_filter_timestamp(from_)
        end_bound = parse_filter_timestamp(to)
        if start_bound or end_bound:
            query["start_time"] = {}
            if start_bound:
                query["start_time"]["$gte"] = start_bound
            if end_bound:
                query["start_time"]["$lte"] = end_bound

        cursor = self.time_entries.find(query).sort("start_time", -1)
        entry_docs = await cursor.to_list(length=None)

        return await self.timer.to_entries(user_id, entry_docs)

    async def get_entry(self, user_id: str, entry_id: str) -> TimeEntry:
        """
        Get a single time entry.

        Raises:
            TimeEntryNotFoundError: If the entry is missing or not owned
        """
        return await self.timer.to_entry(user_id, await self._find_owned(user_id, entry_id))

    async def get_running_timer(self, user_id: str) -> Optional[TimeEntry]:
        """Get the running entry for the user, or None."""
        return await self.timer.get_running_timer(user_id)

    async def create_entry(
        self,
        user_id: str,
        entry_create: TimeEntryCreate,
    ) -> TimeEntry:
        """
        Create a manual time entry.

        Leaving out the end time creates a running entry, which is subject
        to the same one-running-timer rule as starting a timer.

        Args:
            user_id: User ID
            entry_create: Time entry creation data

        Returns:
            Created time entry

        Raises:
            InvalidTimestampError: If a timestamp cannot be parsed
            InvalidRangeError: If start time is not before end time
            TaskNotFoundError: If the task is missing or not owned
            TimerAlreadyRunningError: If no end time is given while a timer runs
        """
        start_time = parse_timestamp(entry_create.start_time, "start time")
        end_time = None
        if entry_create.end_time and not is_blank(entry_create.end_time):
            end_time = parse_timestamp(entry_create.end_time, "end time")

        validate_order(start_time, end_time)

        task_id = entry_create.task_id or None
        if task_id:
            await self.ownership.require_task(user_id, task_id)

        if end_time is None:
            await self.timer.ensure_no_running_timer(user_id)

        now = utcnow()
        entry_doc = {
            "user_id": user_id,
            "task_id": task_id,
            "description": entry_create.description,
            "start_time": start_time,
            "end_time": end_time,
            "is_running": end_time is None,
            "created_at": now,
            "updated_at": now,
        }

        entry = await self.timer.insert_entry(entry_doc)
        logger.info("Created time entry %s for user %s", entry.id, user_id)
        return entry

    async def update_entry(
        self,
        user_id: str,
        entry_id: str,
        entry_update: TimeEntryUpdate,
    ) -> TimeEntry:
        """
        Update a time entry.

        Only fields present in the payload change. Start and end are
        validated against each other using the stored value for whichever
        one is not being changed. Sending a null end time reopens the entry;
        blank timestamp strings are treated as absent.

        Args:
            user_id: User ID
            entry_id: Time entry ID
            entry_update: Update data

        Returns:
            Updated time entry

        Raises:
            TimeEntryNotFoundError: If the entry is missing or not owned
            InvalidTimestampError: If a timestamp cannot be parsed
            InvalidRangeError: If the resulting start is not before the end
            TaskNotFoundError: If a new task is missing or not owned
            TimerAlreadyRunningError: If reopening while another timer runs
        """
        existing = await self._find_owned(user_id, entry_id)
        changes = {}

        if entry_update.provided("start_time") and not is_blank(entry_update.start_time):
            changes["start_time"] = parse_timestamp(entry_update.start_time, "start time")

        if entry_update.provided("end_time") and not is_blank(entry_update.end_time):
            changes["end_time"] = (
                None
                if entry_update.end_time is None
                else parse_timestamp(entry_update.end_time, "end time")
            )

        start_time = changes.get("start_time", existing["start_time"])
        end_time = changes["end_time"] if "end_time" in changes else existing.get("end_time")
        validate_order(start_time, end_time)

        if entry_update.provided("task_id"):
            if entry_update.task_id:
                await self.ownership.require_task(user_id, entry_update.task_id)
                changes["task_id"] = entry_update.task_id
            else:
                changes["task_id"] = None

        if entry_update.provided("description"):
            changes["description"] = entry_update.description

        if "end_time" in changes:
            reopening = changes["end_time"] is None and existing.get("end_time") is not None
            if reopening:
                await self.timer.ensure_no_running_timer(user_id, exclude_id=existing["_id"])
            changes["is_running"] = changes["end_time"] is None

        changes["updated_at"] = utcnow()

        try:
            updated_doc = await self.time_entries.find_one_and_update(
                {"_id": existing["_id"], "user_id": user_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.warning("Rejected concurrent reopen of entry %s", existing["_id"])
            raise TimerAlreadyRunningError(TIMER_RUNNING_MESSAGE) from None

        if not updated_doc:
            raise TimeEntryNotFoundError("Time entry not found")

        return await self.timer.to_entry(user_id, updated_doc)

    async def delete_entry(
        self,
        user_id: str,
        entry_id: str,
    ) -> dict:
        """
        Delete a time entry.

        Args:
            user_id: User ID
            entry_id: Time entry ID

        Returns:
            {"success": True}

        Raises:
            TimeEntryNotFoundError: If the entry is missing or not owned
        """
        object_id = parse_object_id(entry_id)
        if object_id is None:
            raise TimeEntryNotFoundError("Time entry not found")

        result = await self.time_entries.delete_one({
            "_id": object_id,
            "user_id": user_id,
        })

        if result.deleted_count == 0:
            raise TimeEntryNotFoundError("Time entry not found")

        logger.info("Deleted time entry %s for user %s", entry_id, user_id)
        return {"success": True}
