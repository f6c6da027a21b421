"""
Response classes shared by the routes and middleware.
"""

from typing import Dict, Optional

from fastapi.responses import JSONResponse

from api.models import ErrorResponse


class UTF8JSONResponse(JSONResponse):
    """JSON response that declares its charset explicitly."""
    media_type = "application/json; charset=utf-8"


def error_response(
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None
) -> UTF8JSONResponse:
    """Build an ``{"error": message}`` response."""
    return UTF8JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers
    )
