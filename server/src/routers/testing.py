"""Test-only endpoints. Registered only when the environment is ``test``."""

import structlog
from fastapi import APIRouter, Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from server.src.dependencies import get_database
from server.src.repositories.blog_repo import BlogRepository
from server.src.repositories.person_repo import PersonRepository
from server.src.repositories.user_repo import UserRepository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/testing", tags=["Testing"])


@router.post("/reset", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def reset(database: AsyncIOMotorDatabase = Depends(get_database)) -> Response:
    """Empty every collection."""
    removed = {
        "blogs": await BlogRepository(database).delete_all(),
        "persons": await PersonRepository(database).delete_all(),
        "users": await UserRepository(database).delete_all(),
    }
    logger.info("database_reset", **removed)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
