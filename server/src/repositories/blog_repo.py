"""
Blog repository for database operations.

Provides async CRUD operations for blogs using motor with MongoDB.
Owners are stored as ObjectId references to the users collection and
populated as ``{id, username, name}`` on the way out.
"""

import structlog
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from server.src.errors import NotFoundError
from server.src.repositories.base import parse_object_id, serialize_document

logger = structlog.get_logger(__name__)


class BlogRepository:
    """Repository for blog database operations."""

    def __init__(self, database: AsyncIOMotorDatabase):
        """
        Initialize blog repository.

        Args:
            database: motor database handle
        """
        self.collection = database["blogs"]
        self.users = database["users"]

    async def _populate(self, documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Replace owner ObjectIds with a summary of the owning user."""
        owner_ids = {doc["user"] for doc in documents if doc.get("user") is not None}
        owners: Dict[ObjectId, Dict[str, Any]] = {}

        if owner_ids:
            cursor = self.users.find({"_id": {"$in": list(owner_ids)}})
            for user in await cursor.to_list(length=None):
                owners[user["_id"]] = {
                    "id": str(user["_id"]),
                    "username": user["username"],
                    "name": user.get("name"),
                }

        blogs = []
        for doc in documents:
            blog = serialize_document(doc)
            blog["user"] = owners.get(doc.get("user"))
            blogs.append(blog)
        return blogs

    async def list_blogs(self) -> List[Dict[str, Any]]:
        """
        List all blogs with their owners populated.

        Returns:
            List of blogs
        """
        documents = await self.collection.find({}).to_list(length=None)
        logger.debug("blogs_listed", count=len(documents))
        return await self._populate(documents)

    async def list_blogs_by_owners(self, owner_ids: Iterable[ObjectId]) -> List[Dict[str, Any]]:
        """List blogs whose owner is one of ``owner_ids`` (owners left unpopulated)."""
        cursor = self.collection.find({"user": {"$in": list(owner_ids)}})
        return [serialize_document(doc) for doc in await cursor.to_list(length=None)]

    async def get_blog(self, blog_id: str) -> Dict[str, Any]:
        """
        Get blog by ID.

        Args:
            blog_id: Blog ID

        Returns:
            Blog with owner populated

        Raises:
            ValidationError: If the id is malformed
            NotFoundError: If no blog has this id
        """
        document = await self.collection.find_one({"_id": parse_object_id(blog_id)})

        if not document:
            logger.debug("blog_not_found", blog_id=blog_id)
            raise NotFoundError(f"blog {blog_id} not found")

        populated = await self._populate([document])
        return populated[0]

    async def get_owner_id(self, blog_id: str) -> Optional[str]:
        """
        Get the id of the user that owns a blog.

        Raises:
            NotFoundError: If no blog has this id
        """
        document = await self.collection.find_one(
            {"_id": parse_object_id(blog_id)},
            {"user": 1}
        )
        if not document:
            raise NotFoundError(f"blog {blog_id} not found")

        owner = document.get("user")
        return str(owner) if owner is not None else None

    async def create_blog(self, fields: Dict[str, Any], owner_id: str) -> Dict[str, Any]:
        """
        Create a new blog owned by ``owner_id``.

        Args:
            fields: Validated blog fields (title, author, url, likes)
            owner_id: ID of the authenticated user

        Returns:
            Created blog with owner populated
        """
        document = {
            "title": fields["title"],
            "author": fields.get("author"),
            "url": fields["url"],
            "likes": fields.get("likes") or 0,
            "user": parse_object_id(owner_id),
        }

        try:
            result = await self.collection.insert_one(document)
        except Exception as e:
            logger.error("blog_create_failed", error=str(e), title=fields.get("title"))
            raise

        document["_id"] = result.inserted_id
        logger.info("blog_created", blog_id=str(result.inserted_id), owner_id=owner_id)

        populated = await self._populate([document])
        return populated[0]

    async def update_blog(self, blog_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace the supplied mutable fields of a blog.

        Args:
            blog_id: Blog ID
            fields: Fields to replace

        Returns:
            Updated blog

        Raises:
            NotFoundError: If no blog has this id
        """
        if not fields:
            return await self.get_blog(blog_id)

        document = await self.collection.find_one_and_update(
            {"_id": parse_object_id(blog_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )

        if not document:
            logger.warning("blog_update_not_found", blog_id=blog_id)
            raise NotFoundError(f"blog {blog_id} not found")

        logger.info("blog_updated", blog_id=blog_id, fields=sorted(fields))
        populated = await self._populate([document])
        return populated[0]

    async def delete_blog(self, blog_id: str) -> None:
        """
        Delete blog.

        Raises:
            NotFoundError: If no blog has this id
        """
        result = await self.collection.delete_one({"_id": parse_object_id(blog_id)})

        if result.deleted_count == 0:
            logger.warning("blog_delete_not_found", blog_id=blog_id)
            raise NotFoundError(f"blog {blog_id} not found")

        logger.info("blog_deleted", blog_id=blog_id)

    async def count_blogs(self) -> int:
        """Count stored blogs."""
        return await self.collection.count_documents({})

    async def delete_all(self) -> int:
        """Remove every blog. Returns the number removed."""
        result = await self.collection.delete_many({})
        return result.deleted_count
