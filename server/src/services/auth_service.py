"""
Authentication service for user accounts and JWT token management.

Provides:
- bcrypt password hashes via passlib
- JWT token creation and validation (python-jose)
- User registration with length and uniqueness rules
- Login and bearer-token resolution to the current user
"""

import structlog
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PayloadError

from server.src.config import Settings, get_settings
from server.src.errors import AuthError, ValidationError
from server.src.models.auth import (
    CreateUserRequest, CurrentUser, LoginRequest, TokenPayload, TokenResponse
)
from server.src.repositories.user_repo import UserRepository

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository, settings: Optional[Settings] = None):
        """
        Initialize auth service.

        Args:
            user_repo: User repository
            settings: Settings to use (defaults to the cached settings)
        """
        self.user_repo = user_repo
        self.settings = settings or get_settings()

        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self.settings.password_bcrypt_rounds
        )

    def hash_password(self, password: str) -> str:
        """bcrypt hash of ``password`` with the configured number of rounds."""
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """False for a wrong password and for a stored value that is not a bcrypt hash."""
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.warning("password_hash_unreadable", error=str(e))
            return False

    def create_access_token(
        self,
        user_id: str,
        username: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Sign a bearer token for a user.

        The token carries ``sub`` (user id), ``username``, ``iat`` and
        ``exp``; ``expires_delta`` defaults to the configured lifetime and may
        be negative to mint an already expired token.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.jwt_access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        expire = now + expires_delta

        payload = {
            "sub": user_id,
            "username": username,
            "exp": int(expire.timestamp()),
            "iat": int(now.timestamp())
        }

        token = jwt.encode(
            payload,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm
        )

        logger.info(
            "access_token_created",
            user_id=user_id,
            username=username,
            expires_in=expires_delta.total_seconds()
        )

        return token

    def decode_token(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry, then parse the claims.

        Raises:
            AuthError: "token expired", or "token invalid" for anything else
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm]
            )
            return TokenPayload(**payload)

        except ExpiredSignatureError:
            logger.warning("token_expired")
            raise AuthError("token expired")
        except JWTError as e:
            logger.warning("token_rejected", error=str(e))
            raise AuthError("token invalid")
        except PayloadError as e:
            logger.warning("token_claims_invalid", error=str(e))
            raise AuthError("token invalid")

    async def register_user(self, request: CreateUserRequest) -> Dict[str, Any]:
        """
        Create a user account.

        Args:
            request: Registration data

        Returns:
            Created user without the password hash

        Raises:
            ValidationError: If username or password is too short, or the
                username is already taken
        """
        if len(request.username) < self.settings.username_min_length:
            raise ValidationError(
                f"username must be at least {self.settings.username_min_length} characters long"
            )
        if len(request.password) < self.settings.password_min_length:
            raise ValidationError(
                f"password must be at least {self.settings.password_min_length} characters long"
            )

        user = await self.user_repo.create_user(
            username=request.username,
            name=request.name,
            password_hash=self.hash_password(request.password)
        )
        user.pop("password_hash", None)
        user["blogs"] = []
        return user

    async def authenticate_user(self, login_request: LoginRequest) -> Optional[Dict[str, Any]]:
        """The stored user when the credentials match, otherwise None."""
        user = await self.user_repo.get_user_by_username(login_request.username)

        if not user:
            logger.warning("login_rejected", username=login_request.username, reason="unknown_user")
            return None

        if not self.verify_password(login_request.password, user["password_hash"]):
            logger.warning("login_rejected", username=login_request.username, reason="password")
            return None

        logger.info("user_authenticated", user_id=user["id"], username=user["username"])
        return user

    async def login(self, login_request: LoginRequest) -> TokenResponse:
        """
        Exchange a username and password for a bearer token.

        Raises:
            AuthError: "invalid username or password"
        """
        user = await self.authenticate_user(login_request)

        if not user:
            raise AuthError("invalid username or password")

        access_token = self.create_access_token(user_id=user["id"], username=user["username"])

        logger.info("login_success", user_id=user["id"], username=user["username"])

        return TokenResponse(
            token=access_token,
            username=user["username"],
            name=user.get("name")
        )

    async def get_current_user(self, token: Optional[str]) -> CurrentUser:
        """
        Resolve a bearer token to the user it was issued to.

        Args:
            token: JWT token string (None when the header was absent)

        Returns:
            Current user

        Raises:
            AuthError: If the token is missing, invalid, or its user is gone
        """
        if not token:
            raise AuthError("token missing")

        payload = self.decode_token(token)

        try:
            user = await self.user_repo.get_user_by_id(payload.sub)
        except ValidationError:
            logger.warning("token_subject_malformed", user_id=payload.sub)
            raise AuthError("token invalid")

        if not user:
            logger.warning("get_current_user_failed_user_not_found", user_id=payload.sub)
            raise AuthError("token invalid")

        logger.debug("current_user_retrieved", user_id=user["id"], username=user["username"])

        return CurrentUser(
            id=user["id"],
            username=user["username"],
            name=user.get("name")
        )
