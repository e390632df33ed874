"""
User repository for database operations.

Provides async operations for user accounts using motor with MongoDB.
Usernames are unique; the index is created by ``ensure_indexes`` during
application startup.
"""

import structlog
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from server.src.errors import ValidationError
from server.src.repositories.base import parse_object_id, serialize_document
from server.src.repositories.blog_repo import BlogRepository

logger = structlog.get_logger(__name__)


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, database: AsyncIOMotorDatabase):
        """
        Initialize user repository.

        Args:
            database: motor database handle
        """
        self.collection = database["users"]
        self.blogs = BlogRepository(database)

    async def ensure_indexes(self) -> None:
        """Create the unique username index."""
        await self.collection.create_index([("username", ASCENDING)], unique=True)

    async def create_user(
        self,
        username: str,
        name: Optional[str],
        password_hash: str
    ) -> Dict[str, Any]:
        """
        Create a new user.

        Args:
            username: Username
            name: Display name
            password_hash: Hashed password

        Returns:
            Created user (including ``password_hash``)

        Raises:
            ValidationError: If username already exists
        """
        document = {
            "username": username,
            "name": name,
            "password_hash": password_hash,
        }

        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning("username_already_exists", username=username)
            raise ValidationError("expected `username` to be unique")
        except Exception as e:
            logger.error("user_create_failed", error=str(e), username=username)
            raise

        document["_id"] = result.inserted_id
        logger.info("user_created", user_id=str(result.inserted_id), username=username)
        return serialize_document(document)

    async def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None if not found
        """
        document = await self.collection.find_one({"_id": parse_object_id(user_id)})

        if not document:
            logger.debug("user_not_found", user_id=user_id)
            return None

        return serialize_document(document)

    async def get_user_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        """
        Get user by username.

        Args:
            username: Username

        Returns:
            User or None if not found
        """
        document = await self.collection.find_one({"username": username})

        if not document:
            logger.debug("user_not_found", username=username)
            return None

        return serialize_document(document)

    async def list_users(self) -> List[Dict[str, Any]]:
        """
        List users with the blogs they own.

        Password hashes are stripped from the result.

        Returns:
            List of users, each with a ``blogs`` list
        """
        documents = await self.collection.find({}).to_list(length=None)
        owned = await self.blogs.list_blogs_by_owners(doc["_id"] for doc in documents)

        blogs_by_owner: Dict[str, List[Dict[str, Any]]] = {}
        for blog in owned:
            blogs_by_owner.setdefault(str(blog.pop("user")), []).append(blog)

        users = []
        for doc in documents:
            user = serialize_document(doc)
            user.pop("password_hash", None)
            user["blogs"] = blogs_by_owner.get(user["id"], [])
            users.append(user)
        return users

    async def count_users(self) -> int:
        """Count stored users."""
        return await self.collection.count_documents({})

    async def delete_all(self) -> int:
        """Remove every user. Returns the number removed."""
        result = await self.collection.delete_many({})
        return result.deleted_count
