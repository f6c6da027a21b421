"""
Response metadata middleware.

Registered in ``api.main.create_app`` so that, from the outside in:

    ResponseTimeMiddleware → CORSHeadersMiddleware → ErrorHandlingMiddleware → routes
"""

import time
from typing import Dict

import structlog
from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from api.errors import InternalError
from api.responses import error_response

logger = structlog.get_logger(__name__)

RESPONSE_TIME_HEADER = "X-Response-Time-ms"


class ResponseTimeMiddleware(BaseHTTPMiddleware):
    """
    Adds the wall-clock handling time, in whole milliseconds, to every response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            elapsed_ms = max(0, int((time.perf_counter() - start_time) * 1000))
            if response is not None:
                response.headers[RESPONSE_TIME_HEADER] = str(elapsed_ms)

        status_code = response.status_code
        log = logger.warning if status_code >= 400 else logger.info
        log(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status=status_code,
            duration_ms=elapsed_ms,
        )
        return response


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Answers every OPTIONS request with 204 and stamps the CORS headers on
    every response, whatever the Origin header says.
    """

    def __init__(self, app: ASGIApp, headers: Dict[str, str]):
        super().__init__(app)
        self.cors_headers = dict(headers)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=status.HTTP_204_NO_CONTENT)
        else:
            response = await call_next(request)

        response.headers.update(self.cors_headers)
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Turns any exception that escapes the routes into a generic 500.
    The detail is logged, never returned to the client.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
                error=str(e)
            )
            return error_response(InternalError.status_code, InternalError.default_message)
