"""Project service - business logic for project management."""
import logging

from pymongo import ReturnDocument

from app.models.project import Project, ProjectCreate, ProjectUpdate
from app.services.ownership_service import OwnershipService
from app.services.task_service import TaskService
from app.utils.errors import InvalidInputError, ProjectNotFoundError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def project_from_doc(doc: dict) -> Project:
    """Convert database document to Project model."""
    return Project(
        _id=str(doc["_id"]),
        client_id=str(doc["client_id"]),
        name=doc["name"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def _require_name(name) -> str:
    if not name or not name.strip():
        raise InvalidInputError("Project name is required")
    return name.strip()


class ProjectService:
    """Service for handling project operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.projects = db["projects"]
        self.ownership = OwnershipService(db)
        self.task_service = TaskService(db)

    async def list_projects(self, user_id: str, client_id: str) -> list[Project]:
        """
        List projects of a client, ordered by name.

        Args:
            user_id: User ID
            client_id: Client ID

        Returns:
            List of projects

        Raises:
            ClientNotFoundError: If the client is missing or not owned
        """
        client = await self.ownership.require_client(user_id, client_id)

        cursor = self.projects.find({"client_id": client["_id"]}).sort("name", 1)
        project_docs = await cursor.to_list(length=None)

        return [project_from_doc(doc) for doc in project_docs]

    async def get_project(self, user_id: str, project_id: str) -> Project:
        """
        Get a project by ID.

        Raises:
            ProjectNotFoundError: If the project is missing or not owned
        """
        return project_from_doc(await self.ownership.require_project(user_id, project_id))

    async def create_project(
        self,
        user_id: str,
        client_id: str,
        project_create: ProjectCreate,
    ) -> Project:
        """
        Create a new project under a client.

        Args:
            user_id: User ID
            client_id: Owning client ID
            project_create: Project creation data

        Returns:
            Created project object

        Raises:
            ClientNotFoundError: If the client is missing or not owned
            InvalidInputError: If the name is blank
        """
        client = await self.ownership.require_client(user_id, client_id)
        name = _require_name(project_create.name)

        now = utcnow()
        project_doc = {
            "client_id": client["_id"],
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.projects.insert_one(project_doc)
        project_doc["_id"] = result.inserted_id

        return project_from_doc(project_doc)

    async def update_project(
        self,
        user_id: str,
        project_id: str,
        project_update: ProjectUpdate,
    ) -> Project:
        """
        Rename a project.

        Raises:
            ProjectNotFoundError: If the project is missing or not owned
            InvalidInputError: If the name is blank
        """
        existing = await self.ownership.require_project(user_id, project_id)
        name = _require_name(project_update.name)

        updated_doc = await self.projects.find_one_and_update(
            {"_id": existing["_id"]},
            {"$set": {"name": name, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

        if not updated_doc:
            raise ProjectNotFoundError("Project not found")

        return project_from_doc(updated_doc)

    async def delete_project(self, user_id: str, project_id: str) -> dict:
        """
        Delete a project together with its tasks.

        Raises:
            ProjectNotFoundError: If the project is missing or not owned
        """
        existing = await self.ownership.require_project(user_id, project_id)

        await self.purge_projects(user_id, {"_id": existing["_id"]})

        return {"success": True}

    async def purge_projects(self, user_id: str, project_filter: dict) -> int:
        """Delete projects matching a filter, cascading to their tasks."""
        project_docs = await self.projects.find(project_filter, {"_id": 1}).to_list(length=None)
        if not project_docs:
            return 0

        object_ids = [doc["_id"] for doc in project_docs]
        await self.task_service.purge_tasks(user_id, {"project_id": {"$in": object_ids}})
        result = await self.projects.delete_many({"_id": {"$in": object_ids}})

        logger.info("Deleted %d project(s) for user %s", result.deleted_count, user_id)
        return result.deleted_count
