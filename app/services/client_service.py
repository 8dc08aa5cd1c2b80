"""Client service - business logic for client management."""
import logging

from pymongo import ReturnDocument

from app.models.client import Client, ClientCreate, ClientUpdate
from app.services.ownership_service import OwnershipService
from app.services.project_service import ProjectService
from app.utils.errors import ClientNotFoundError, InvalidInputError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def client_from_doc(doc: dict) -> Client:
    """Convert database document to Client model."""
    return Client(
        _id=str(doc["_id"]),
        user_id=doc["user_id"],
        name=doc["name"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def _require_name(name) -> str:
    if not name or not name.strip():
        raise InvalidInputError("Client name is required")
    return name.strip()


class ClientService:
    """Service for handling client operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.clients = db["clients"]
        self.ownership = OwnershipService(db)
        self.project_service = ProjectService(db)

    async def list_clients(self, user_id: str) -> list[Client]:
        """List the user's clients, ordered by name."""
        cursor = self.clients.find({"user_id": user_id}).sort("name", 1)
        client_docs = await cursor.to_list(length=None)

        return [client_from_doc(doc) for doc in client_docs]

    async def get_client(self, user_id: str, client_id: str) -> Client:
        """
        Get a client by ID.

        Raises:
            ClientNotFoundError: If the client is missing or not owned
        """
        return client_from_doc(await self.ownership.require_client(user_id, client_id))

    async def create_client(self, user_id: str, client_create: ClientCreate) -> Client:
        """
        Create a new client.

        Raises:
            InvalidInputError: If the name is blank
        """
        name = _require_name(client_create.name)

        now = utcnow()
        client_doc = {
            "user_id": user_id,
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.clients.insert_one(client_doc)
        client_doc["_id"] = result.inserted_id

        logger.info("Created client %s for user %s", client_doc["_id"], user_id)
        return client_from_doc(client_doc)

    async def update_client(
        self,
        user_id: str,
        client_id: str,
        client_update: ClientUpdate,
    ) -> Client:
        """
        Rename a client.

        Raises:
            ClientNotFoundError: If the client is missing or not owned
            InvalidInputError: If the name is blank
        """
        existing = await self.ownership.require_client(user_id, client_id)
        name = _require_name(client_update.name)

        updated_doc = await self.clients.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": {"name": name, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

        if not updated_doc:
            raise ClientNotFoundError("Client not found")

        return client_from_doc(updated_doc)

    async def delete_client(self, user_id: str, client_id: str) -> dict:
        """
        Delete a client with all of its projects and tasks.

        Raises:
            ClientNotFoundError: If the client is missing or not owned
        """
        existing = await self.ownership.require_client(user_id, client_id)

        await self.project_service.purge_projects(user_id, {"client_id": existing["_id"]})
        await self.clients.delete_one({"_id": existing["_id"], "user_id": user_id})

        logger.info("Deleted client %s for user %s", existing["_id"], user_id)
        return {"success": True}
