"""
Shared helpers for the MongoDB repositories.

Documents leave the repositories with ``_id`` replaced by a string ``id``
so ObjectIds never reach the API layer.
"""

from typing import Any, Dict, Mapping

from bson import ObjectId
from bson.errors import InvalidId

from server.src.errors import ValidationError


def parse_object_id(entry_id: str) -> ObjectId:
    """
    Convert an API id into an ObjectId.

    Raises:
        ValidationError: If the id is not a valid ObjectId
    """
    try:
        return ObjectId(entry_id)
    except (InvalidId, TypeError):
        raise ValidationError("malformatted id")


def serialize_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of a stored document with ``_id`` exposed as ``id``."""
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return data
