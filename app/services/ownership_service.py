"""Ownership resolver - authorizes references along the client -> project -> task chain.

Each resolution is a single query that combines the existence check with the
ownership check. A reference that does not exist and one that belongs to
another user both come back as None, so callers cannot tell them apart.
"""
from typing import Optional

from app.utils.errors import ClientNotFoundError, ProjectNotFoundError, TaskNotFoundError
from app.utils.ids import parse_object_id


def _join(from_collection: str, local_field: str, as_field: str) -> list[dict]:
    """Pipeline stages joining exactly one parent document."""
    return [
        {
            "$lookup": {
                "from": from_collection,
                "localField": local_field,
                "foreignField": "_id",
                "as": as_field,
            }
        },
        {"$unwind": f"${as_field}"},
    ]


class OwnershipService:
    """Read-only lookups that verify a principal owns a chain reference."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.clients = db["clients"]
        self.projects = db["projects"]
        self.tasks = db["tasks"]

    async def resolve_client(self, user_id: str, client_id: str) -> Optional[dict]:
        """Return the client document if it exists and is owned by the user."""
        object_id = parse_object_id(client_id)
        if object_id is None:
            return None

        return await self.clients.find_one({"_id": object_id, "user_id": user_id})

    async def resolve_project(self, user_id: str, project_id: str) -> Optional[dict]:
        """Return the project document if its client is owned by the user."""
        object_id = parse_object_id(project_id)
        if object_id is None:
            return None

        pipeline = [
            {"$match": {"_id": object_id}},
            *_join("clients", "client_id", "client"),
            {"$match": {"client.user_id": user_id}},
            {"$limit": 1},
        ]
        docs = await self.projects.aggregate(pipeline).to_list(length=1)
        return docs[0] if docs else None

    async def resolve_task(self, user_id: str, task_id: str) -> Optional[dict]:
        """
        Return the task document if task -> project -> client is owned by the user.

        Args:
            user_id: Authenticated user ID
            task_id: Task ID supplied by the caller

        Returns:
            Task document with the joined project and client, or None
        """
        object_id = parse_object_id(task_id)
        if object_id is None:
            return None

        pipeline = [
            {"$match": {"_id": object_id}},
            *_join("projects", "project_id", "project"),
            *_join("clients", "project.client_id", "client"),
            {"$match": {"client.user_id": user_id}},
            {"$limit": 1},
        ]
        docs = await self.tasks.aggregate(pipeline).to_list(length=1)
        return docs[0] if docs else None

    async def load_tasks(self, user_id: str, task_ids) -> dict[str, dict]:
        """
        Fetch several owned tasks with their project and client in one query.

        Args:
            user_id: Authenticated user ID
            task_ids: Task IDs referenced by time entries

        Returns:
            Joined task documents keyed by task ID string
        """
        object_ids = [oid for oid in map(parse_object_id, task_ids) if oid is not None]
        if not object_ids:
            return {}

        pipeline = [
            {"$match": {"_id": {"$in": object_ids}}},
            *_join("projects", "project_id", "project"),
            *_join("clients", "project.client_id", "client"),
            {"$match": {"client.user_id": user_id}},
        ]
        docs = await self.tasks.aggregate(pipeline).to_list(length=None)
        return {str(doc["_id"]): doc for doc in docs}

    async def require_client(self, user_id: str, client_id: str) -> dict:
        client = await self.resolve_client(user_id, client_id)
        if not client:
            raise ClientNotFoundError("Client not found")
        return client

    async def require_project(self, user_id: str, project_id: str) -> dict:
        project = await self.resolve_project(user_id, project_id)
        if not project:
            raise ProjectNotFoundError("Project not found")
        return project

    async def require_task(self, user_id: str, task_id: str) -> dict:
        task = await self.resolve_task(user_id, task_id)
        if not task:
            raise TaskNotFoundError("Task not found")
        return task
