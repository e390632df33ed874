"""
Error taxonomy for the bloglist service.

Every error raised by repositories, services and routers derives from
BloglistError and carries the HTTP status code it is surfaced with.
The exception handlers in main.py turn them into ``{"error": message}``
JSON bodies.
"""

from typing import Dict, Optional

from fastapi import status


class BloglistError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class ValidationError(BloglistError):
    """Invalid request data, including malformed ids and duplicate unique keys."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(BloglistError):
    """Missing or invalid credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "token missing or invalid"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(BloglistError):
    """The requested entry does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
