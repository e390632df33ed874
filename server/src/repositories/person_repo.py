"""
Person repository for database operations.

Names are unique; the unique index is created by ``ensure_indexes`` during
application startup, and a collision surfaces as a ValidationError.
"""

import structlog
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from server.src.errors import NotFoundError, ValidationError
from server.src.repositories.base import parse_object_id, serialize_document

logger = structlog.get_logger(__name__)


class PersonRepository:
    """Repository for phonebook person operations."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database["persons"]

    async def ensure_indexes(self) -> None:
        """Create the unique name index."""
        await self.collection.create_index([("name", ASCENDING)], unique=True)

    async def list_persons(self) -> List[Dict[str, Any]]:
        documents = await self.collection.find({}).to_list(length=None)
        return [serialize_document(doc) for doc in documents]

    async def get_person(self, person_id: str) -> Dict[str, Any]:
        document = await self.collection.find_one({"_id": parse_object_id(person_id)})
        if not document:
            raise NotFoundError(f"person {person_id} not found")
        return serialize_document(document)

    async def create_person(self, name: str, number: str) -> Dict[str, Any]:
        """
        Create a new person.

        Raises:
            ValidationError: If the name is already taken
        """
        document = {"name": name, "number": number}

        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning("person_name_already_exists", name=name)
            raise ValidationError("name must be unique")

        document["_id"] = result.inserted_id
        logger.info("person_created", person_id=str(result.inserted_id), name=name)
        return serialize_document(document)

    async def update_person(self, person_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace the supplied fields of a person.

        Raises:
            NotFoundError: If the person was removed in the meantime
            ValidationError: If a rename collides with another person
        """
        if not fields:
            return await self.get_person(person_id)

        try:
            document = await self.collection.find_one_and_update(
                {"_id": parse_object_id(person_id)},
                {"$set": fields},
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            logger.warning("person_rename_collision", person_id=person_id)
            raise ValidationError("name must be unique")

        if not document:
            logger.warning("person_update_not_found", person_id=person_id)
            raise NotFoundError(f"person {person_id} not found")

        logger.info("person_updated", person_id=person_id)
        return serialize_document(document)

    async def delete_person(self, person_id: str) -> None:
        result = await self.collection.delete_one({"_id": parse_object_id(person_id)})
        if result.deleted_count == 0:
            logger.warning("person_delete_not_found", person_id=person_id)
            raise NotFoundError(f"person {person_id} not found")
        logger.info("person_deleted", person_id=person_id)

    async def count_persons(self) -> int:
        return await self.collection.count_documents({})

    async def delete_all(self) -> int:
        result = await self.collection.delete_many({})
        return result.deleted_count
