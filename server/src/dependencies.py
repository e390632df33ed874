"""
FastAPI dependency injection for database, repositories and authentication.

Provides injectable dependencies for:
- The MongoDB database handle created in the application lifespan
- Repository instances
- The authentication service
- The authenticated user (bearer token verification)

All resources live on ``app.state`` so every application instance (and
every test) is isolated from the others.
"""

import structlog
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from server.src.config import Settings
from server.src.middleware.auth import get_token_from_request
from server.src.models.auth import CurrentUser
from server.src.repositories.blog_repo import BlogRepository
from server.src.repositories.person_repo import PersonRepository
from server.src.repositories.user_repo import UserRepository
from server.src.services.auth_service import AuthService

logger = structlog.get_logger(__name__)


# ============================================================================
# SETTINGS AND DATABASE
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> AsyncIOMotorDatabase:
    """
    Get the database handle.

    Raises:
        RuntimeError: If the lifespan has not initialized the database
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        logger.error("database_not_initialized")
        raise RuntimeError("Database not initialized. Is the application lifespan running?")
    return database


# ============================================================================
# REPOSITORIES AND SERVICES
# ============================================================================


def get_blog_repository(database: AsyncIOMotorDatabase = Depends(get_database)) -> BlogRepository:
    return BlogRepository(database)


def get_person_repository(database: AsyncIOMotorDatabase = Depends(get_database)) -> PersonRepository:
    return PersonRepository(database)


def get_user_repository(database: AsyncIOMotorDatabase = Depends(get_database)) -> UserRepository:
    return UserRepository(database)


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings)
) -> AuthService:
    return AuthService(user_repo, settings)


# ============================================================================
# AUTHENTICATION
# ============================================================================


async def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentUser:
    """
    Get current authenticated user from the bearer token.

    Verifies the token and attaches the resolved user to
    ``request.state.user`` for downstream ownership checks.

    Raises:
        AuthError: If the token is missing, invalid or expired

    Example:
        @router.post("/")
        async def create(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    current_user = await auth_service.get_current_user(get_token_from_request(request))
    request.state.user = current_user

    logger.debug(
        "request_authenticated",
        path=request.url.path,
        method=request.method,
        user_id=current_user.id,
        username=current_user.username
    )

    return current_user
