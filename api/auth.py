"""
Bearer token authentication for the FastAPI API.

Every protected route shares one configured token. This is a placeholder
mechanism, not per-user credentials.
"""

import secrets
from typing import Optional

import structlog
from fastapi import Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.config import APIConfig
from api.errors import AuthError

logger = structlog.get_logger(__name__)

PROTECTED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
PROTECTED_PREFIX = "/books"

# Security scheme; missing credentials are reported by verify_bearer_token
security = HTTPBearer(auto_error=False)


def requires_auth(method: str, path: str) -> bool:
    """Check whether a request must present the bearer token."""
    return method.upper() in PROTECTED_METHODS and path.startswith(PROTECTED_PREFIX)


def check_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    settings: APIConfig
) -> str:
    """
    Validate bearer credentials against the shared secret.

    Args:
        credentials: Parsed Authorization header, None if absent or not Bearer
        settings: API configuration holding the expected token

    Returns:
        The token if valid

    Raises:
        AuthError: If the token is missing or does not match
    """
    token = credentials.credentials if credentials else None
    if token is None or not secrets.compare_digest(
        token.encode("utf-8"), settings.bearer_token.encode("utf-8")
    ):
        logger.warning("Rejected bearer token", token_present=token is not None)
        raise AuthError(realm=settings.auth_realm)
    return token


async def verify_bearer_token(request: Request) -> str:
    """
    FastAPI dependency guarding the mutating book routes.

    Raises:
        AuthError: If the token is missing or invalid
    """
    credentials = await security(request)
    return check_bearer_token(credentials, request.app.state.config)


def generate_session_id() -> str:
    """Generate a new session identifier (12 random bytes, hex encoded)."""
    return secrets.token_hex(12)
