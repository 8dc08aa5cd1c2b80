"""Timer service - start/stop protocol and the single running timer rule."""
import logging
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.models.time_entry import ClientSummary, ProjectSummary, TaskSummary, TimeEntry
from app.services.ownership_service import OwnershipService
from app.utils.errors import NoRunningTimerError, TimerAlreadyRunningError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

TIMER_RUNNING_MESSAGE = (
    "You already have a timer running. Please stop it before starting a new one."
)


def task_summary_from_doc(doc: dict) -> TaskSummary:
    """Convert a task joined with its project and client into the embedded shape."""
    project = doc["project"]
    client = doc["client"]
    return TaskSummary(
        id=str(doc["_id"]),
        name=doc["name"],
        project_id=str(project["_id"]),
        project=ProjectSummary(
            id=str(project["_id"]),
            name=project["name"],
            client_id=str(client["_id"]),
            client=ClientSummary(id=str(client["_id"]), name=client["name"]),
        ),
    )


def entry_from_doc(doc: dict, task_doc: Optional[dict] = None) -> TimeEntry:
    """Convert database document to TimeEntry model."""
    return TimeEntry(
        _id=str(doc["_id"]),
        user_id=doc["user_id"],
        task_id=doc.get("task_id"),
        task=task_summary_from_doc(task_doc) if task_doc else None,
        description=doc.get("description"),
        start_time=doc["start_time"],
        end_time=doc.get("end_time"),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


class TimerService:
    """
    Service for the per-user timer state machine.

    A user is either idle (no entry without an end time) or running (exactly
    one such entry). The is_running flag stored on each entry mirrors
    end_time being null and is covered by a partial unique index, so two
    racing writes cannot both leave the user with a running entry.
    """

    def __init__(self, db, ownership: Optional[OwnershipService] = None):
        """Initialize service with database connection."""
        self.db = db
        self.time_entries = db["time_entries"]
        self.ownership = ownership or OwnershipService(db)

    async def to_entries(self, user_id: str, docs: list[dict]) -> list[TimeEntry]:
        """
        Convert entry documents to models with their task, project and client embedded.

        All referenced tasks are loaded in a single aggregation.
        """
        task_ids = {doc["task_id"] for doc in docs if doc.get("task_id")}
        tasks = await self.ownership.load_tasks(user_id, task_ids) if task_ids else {}
        return [entry_from_doc(doc, tasks.get(doc.get("task_id"))) for doc in docs]

    async def to_entry(self, user_id: str, doc: dict) -> TimeEntry:
        return (await self.to_entries(user_id, [doc]))[0]

    async def get_running_timer(self, user_id: str) -> Optional[TimeEntry]:
        """
        Get the currently running timer, if any.

        Args:
            user_id: User ID

        Returns:
            Running time entry, or None when the user is idle
        """
        running = await self.time_entries.find_one({
            "user_id": user_id,
            "end_time": None,
        })

        if not running:
            return None

        return await self.to_entry(user_id, running)

    async def ensure_no_running_timer(
        self,
        user_id: str,
        exclude_id: Optional[ObjectId] = None,
    ) -> None:
        """
        Fail if the user already has a running entry.

        Args:
            user_id: User ID
            exclude_id: Entry to ignore (the one being reopened)

        Raises:
            TimerAlreadyRunningError: If another entry is running
        """
        query = {"user_id": user_id, "end_time": None}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}

        if await self.time_entries.find_one(query):
            raise TimerAlreadyRunningError(TIMER_RUNNING_MESSAGE)

    async def insert_entry(self, entry_doc: dict) -> TimeEntry:
        """
        Insert a time entry document.

        Raises:
            TimerAlreadyRunningError: If the unique running-timer index
                rejected the write
        """
        try:
            result = await self.time_entries.insert_one(entry_doc)
        except DuplicateKeyError:
            logger.warning(
                "Rejected concurrent running entry for user %s", entry_doc["user_id"]
            )
            raise TimerAlreadyRunningError(TIMER_RUNNING_MESSAGE) from None

        entry_doc["_id"] = result.inserted_id
        return await self.to_entry(entry_doc["user_id"], entry_doc)

    async def start_timer(
        self,
        user_id: str,
        task_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        """
        Start a new timer at the current time.

        Args:
            user_id: User ID
            task_id: Optional task to log against
            description: Optional description

        Returns:
            Created time entry with no end time

        Raises:
            TimerAlreadyRunningError: If a timer is already running
            TaskNotFoundError: If the task is missing or not owned by the user
        """
        await self.ensure_no_running_timer(user_id)

        if task_id:
            await self.ownership.require_task(user_id, task_id)

        now = utcnow()
        entry_doc = {
            "user_id": user_id,
            "task_id": task_id or None,
            "description": description,
            "start_time": now,
            "end_time": None,
            "is_running": True,
            "created_at": now,
            "updated_at": now,
        }

        entry = await self.insert_entry(entry_doc)
        logger.info("Started timer %s for user %s", entry.id, user_id)
        return entry

    async def stop_timer(self, user_id: str) -> TimeEntry:
        """
        Stop the currently running timer.

        Lookup and update happen in a single find-and-modify. The end time
        is the current time, or one millisecond past the start when the
        entry was entered manually with a future start, so a stopped entry
        always satisfies start < end.

        Args:
            user_id: User ID

        Returns:
            Stopped time entry

        Raises:
            NoRunningTimerError: If no timer is running
        """
        now = utcnow()

        stopped = await self.time_entries.find_one_and_update(
            {"user_id": user_id, "end_time": None},
            [{
                "$set": {
                    "end_time": {"$max": [{"$add": ["$start_time", 1]}, now]},
                    "is_running": False,
                    "updated_at": now,
                }
            }],
            return_document=ReturnDocument.AFTER,
        )

        if not stopped:
            raise NoRunningTimerError("No running timer found")

        logger.info("Stopped timer %s for user %s", stopped["_id"], user_id)
        return await self.to_entry(user_id, stopped)
