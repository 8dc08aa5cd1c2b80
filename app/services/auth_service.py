"""Authentication service - issues the principal every other service is scoped by."""
import logging

from pymongo.errors import DuplicateKeyError

from app.models.user import User
from app.utils.auth import create_access_token, hash_password, verify_password
from app.utils.errors import AuthenticationError, InvalidInputError, UserNotFoundError
from app.utils.ids import parse_object_id
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def user_from_doc(doc: dict) -> User:
    """Convert database document to User model, leaving out the password hash."""
    return User(
        _id=str(doc["_id"]),
        email=doc["email"],
        name=doc["name"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    async def register_user(self, email: str, password: str, name: str) -> User:
        """
        Register a new user.

        Args:
            email: User email address (stored lowercased)
            password: Plain text password
            name: User's name

        Returns:
            User object (without password)

        Raises:
            InvalidInputError: If email is already registered
        """
        email = email.lower()

        if await self.users.find_one({"email": email}):
            raise InvalidInputError("Email already registered")

        now = utcnow()
        user_doc = {
            "email": email,
            "hashed_password": hash_password(password),
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = await self.users.insert_one(user_doc)
        except DuplicateKeyError:
            raise InvalidInputError("Email already registered") from None

        user_doc["_id"] = result.inserted_id
        logger.info("Registered user %s", user_doc["_id"])
        return user_from_doc(user_doc)

    async def login(self, email: str, password: str) -> str:
        """
        Check credentials and return a JWT.

        Raises:
            AuthenticationError: If credentials are invalid
        """
        user_doc = await self.users.find_one({"email": email.lower()})

        if not user_doc or not verify_password(password, user_doc["hashed_password"]):
            raise AuthenticationError("Invalid email or password")

        return create_access_token(user_id=str(user_doc["_id"]))

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Raises:
            UserNotFoundError: If user not found
        """
        object_id = parse_object_id(user_id)
        user_doc = None
        if object_id is not None:
            user_doc = await self.users.find_one({"_id": object_id})

        if not user_doc:
            raise UserNotFoundError("User not found")

        return user_from_doc(user_doc)
