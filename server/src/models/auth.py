"""
Authentication and user management models.

Pydantic schemas for:
- User accounts (API requests and responses)
- Login requests and token responses
- JWT payloads and the authenticated user attached to a request
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Request Models
# ============================================================================


class LoginRequest(BaseModel):
    """Login request schema."""
    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "root",
                "password": "sekret"
            }
        }
    }


class CreateUserRequest(BaseModel):
    """
    Create user request schema.

    Length rules depend on settings and are checked by the auth service,
    so only presence is enforced here.
    """
    username: str = Field(..., description="Unique username")
    name: Optional[str] = Field(None, description="Display name")
    password: str = Field(..., description="Plain text password, hashed before storage")

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "mluukkai",
                "name": "Matti Luukkainen",
                "password": "salainen"
            }
        }
    }


# ============================================================================
# Response Models
# ============================================================================


class TokenResponse(BaseModel):
    """Login response carrying the bearer token."""
    token: str = Field(..., description="JWT access token")
    username: str = Field(..., description="Username the token was issued to")
    name: Optional[str] = Field(None, description="Display name")


class UserBlogSummary(BaseModel):
    """Blog as embedded in a user listing."""
    id: str
    title: str
    author: Optional[str] = None
    url: str
    likes: int = 0


class UserResponse(BaseModel):
    """User information response schema. Never includes the password hash."""
    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    name: Optional[str] = Field(None, description="Display name")
    blogs: List[UserBlogSummary] = Field(default_factory=list, description="Blogs owned by the user")


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., min_length=1, description="Error message")


# ============================================================================
# Token Models
# ============================================================================


class TokenPayload(BaseModel):
    """Decoded JWT claims."""
    sub: str = Field(..., description="Subject (user ID)")
    username: str = Field(..., description="Username")
    exp: int = Field(..., description="Expiration time (Unix timestamp)")
    iat: int = Field(..., description="Issued at (Unix timestamp)")


class CurrentUser(BaseModel):
    """Authenticated user resolved from a bearer token."""
    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    name: Optional[str] = Field(None, description="Display name")
