"""
Exception hierarchy for the book API.

Each exception carries the HTTP status it maps to and a message that is safe
to return to the client. The handler registered in ``api.main`` renders them
as ``{"error": message}``.

    BookServiceError
    ├── ClientInputError  → 400
    ├── AuthError         → 401 (+ WWW-Authenticate)
    ├── NotFoundError     → 404
    └── InternalError     → 500
"""

from typing import Dict, Optional

from fastapi import status


class BookServiceError(Exception):
    """Base exception for all book API errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.headers = headers or {}
        super().__init__(self.message)


class ClientInputError(BookServiceError):
    """Raised when the request body is missing required fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class AuthError(BookServiceError):
    """Raised when the bearer token is missing or does not match."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized - invalid or missing bearer token"

    def __init__(self, realm: str, message: Optional[str] = None):
        super().__init__(
            message,
            headers={"WWW-Authenticate": f'Bearer realm="{realm}"'},
        )
        self.realm = realm


class NotFoundError(BookServiceError):
    """Raised for an unknown book id or an unmatched route."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(BookServiceError):
    """Raised for failures the client cannot fix."""
