"""MongoDB database connection using Motor (async driver)."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.config import settings

logger = logging.getLogger(__name__)

# Partial unique index: at most one entry per user with is_running = true
RUNNING_TIMER_INDEX = "one_running_timer_per_user"


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure the indexes exist."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        await ensure_indexes(self.db)
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db[name]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the services rely on.

    The partial unique index on time_entries is what keeps a user from
    having two running timers when start requests race each other.
    """
    await db["users"].create_index("email", unique=True)
    await db["clients"].create_index([("user_id", ASCENDING), ("name", ASCENDING)])
    await db["projects"].create_index([("client_id", ASCENDING), ("name", ASCENDING)])
    await db["tasks"].create_index([("project_id", ASCENDING), ("name", ASCENDING)])
    await db["time_entries"].create_index(
        [("user_id", ASCENDING), ("start_time", DESCENDING)]
    )
    await db["time_entries"].create_index(
        "user_id",
        name=RUNNING_TIMER_INDEX,
        unique=True,
        partialFilterExpression={"is_running": True},
    )


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
