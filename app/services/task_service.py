"""Task service - business logic for task management."""
import logging

from pymongo import ReturnDocument

from app.models.task import Task, TaskCreate, TaskUpdate
from app.services.ownership_service import OwnershipService
from app.utils.errors import InvalidInputError, TaskNotFoundError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def task_from_doc(doc: dict) -> Task:
    """Convert database document to Task model."""
    return Task(
        _id=str(doc["_id"]),
        project_id=str(doc["project_id"]),
        name=doc["name"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def _require_name(name) -> str:
    if not name or not name.strip():
        raise InvalidInputError("Task name is required")
    return name.strip()


class TaskService:
    """Service for handling task operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.tasks = db["tasks"]
        self.time_entries = db["time_entries"]
        self.ownership = OwnershipService(db)

    async def list_tasks(self, user_id: str, project_id: str) -> list[Task]:
        """
        List tasks of a project, ordered by name.

        Raises:
            ProjectNotFoundError: If the project is missing or not owned
        """
        project = await self.ownership.require_project(user_id, project_id)

        cursor = self.tasks.find({"project_id": project["_id"]}).sort("name", 1)
        task_docs = await cursor.to_list(length=None)

        return [task_from_doc(doc) for doc in task_docs]

    async def get_task(self, user_id: str, task_id: str) -> Task:
        """
        Get a task by ID.

        Raises:
            TaskNotFoundError: If the task is missing or not owned
        """
        return task_from_doc(await self.ownership.require_task(user_id, task_id))

    async def create_task(
        self,
        user_id: str,
        project_id: str,
        task_create: TaskCreate,
    ) -> Task:
        """
        Create a task under a project.

        Raises:
            ProjectNotFoundError: If the project is missing or not owned
            InvalidInputError: If the name is blank
        """
        project = await self.ownership.require_project(user_id, project_id)
        name = _require_name(task_create.name)

        now = utcnow()
        task_doc = {
            "project_id": project["_id"],
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.tasks.insert_one(task_doc)
        task_doc["_id"] = result.inserted_id

        return task_from_doc(task_doc)

    async def update_task(
        self,
        user_id: str,
        task_id: str,
        task_update: TaskUpdate,
    ) -> Task:
        """
        Rename a task.

        Raises:
            TaskNotFoundError: If the task is missing or not owned
            InvalidInputError: If the name is blank
        """
        existing = await self.ownership.require_task(user_id, task_id)
        name = _require_name(task_update.name)

        updated_doc = await self.tasks.find_one_and_update(
            {"_id": existing["_id"]},
            {"$set": {"name": name, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

        if not updated_doc:
            raise TaskNotFoundError("Task not found")

        return task_from_doc(updated_doc)

    async def delete_task(self, user_id: str, task_id: str) -> dict:
        """
        Delete a task. Time entries logged against it are kept but detached.

        Raises:
            TaskNotFoundError: If the task is missing or not owned
        """
        existing = await self.ownership.require_task(user_id, task_id)

        await self.purge_tasks(user_id, {"_id": existing["_id"]})

        return {"success": True}

    async def purge_tasks(self, user_id: str, task_filter: dict) -> int:
        """
        Delete tasks matching a filter and detach the user's time entries from them.

        Returns:
            Number of tasks deleted
        """
        task_docs = await self.tasks.find(task_filter, {"_id": 1}).to_list(length=None)
        if not task_docs:
            return 0

        object_ids = [doc["_id"] for doc in task_docs]
        await self.time_entries.update_many(
            {"user_id": user_id, "task_id": {"$in": [str(oid) for oid in object_ids]}},
            {"$set": {"task_id": None, "updated_at": utcnow()}},
        )
        result = await self.tasks.delete_many({"_id": {"$in": object_ids}})

        logger.info("Deleted %d task(s) for user %s", result.deleted_count, user_id)
        return result.deleted_count
