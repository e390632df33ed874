"""
Bearer token extraction middleware for FastAPI.

Provides:
- Token extraction from the Authorization header onto request state
- An accessor for the extracted token

The middleware never rejects a request: endpoints that need a user
declare the ``get_current_user`` dependency, which verifies the token
and raises AuthError when it is missing or invalid.
"""

import structlog
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = structlog.get_logger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an Authorization header value.

    The scheme is matched case-insensitively, so both ``Bearer`` and
    ``bearer`` are accepted.

    Args:
        authorization: Raw header value

    Returns:
        Token or None if the header is absent or malformed
    """
    if not authorization:
        return None

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("auth_malformed_header")
        return None

    return parts[1]


class TokenExtractorMiddleware(BaseHTTPMiddleware):
    """Store the request's bearer token (or None) on ``request.state.token``."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.token = extract_bearer_token(request.headers.get("Authorization"))
        request.state.user = None
        return await call_next(request)


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Get the bearer token extracted for this request.

    Falls back to parsing the header when the middleware is not installed.
    """
    if hasattr(request.state, "token"):
        return request.state.token
    return extract_bearer_token(request.headers.get("Authorization"))
