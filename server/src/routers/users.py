"""
User and login routers.

Provides REST API endpoints for:
- User registration and listing
- Login (username + password in exchange for a bearer token)
"""

import structlog
from typing import List
from fastapi import APIRouter, Depends, status

from server.src.dependencies import get_auth_service, get_user_repository
from server.src.models.auth import (
    CreateUserRequest, ErrorResponse, LoginRequest, TokenResponse, UserResponse
)
from server.src.repositories.user_repo import UserRepository
from server.src.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

users_router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={400: {"model": ErrorResponse, "description": "Validation Error"}}
)

login_router = APIRouter(
    prefix="/login",
    tags=["Authentication"],
    responses={401: {"model": ErrorResponse, "description": "Unauthorized"}}
)


@users_router.get("", response_model=List[UserResponse], summary="List users")
async def list_users(
    user_repo: UserRepository = Depends(get_user_repository)
) -> List[dict]:
    """Return every user with the blogs they own."""
    return await user_repo.list_users()


@users_router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user"
)
async def create_user(
    request: CreateUserRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """
    Register a user.

    Username and password must both meet the configured minimum length
    and the username must be unique.
    """
    return await auth_service.register_user(request)


@login_router.post("", response_model=TokenResponse, summary="User Login")
async def login(
    login_request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> TokenResponse:
    """Authenticate user and return a JWT bearer token."""
    logger.info("login_attempt", username=login_request.username)
    return await auth_service.login(login_request)
