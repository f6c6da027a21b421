"""
FastAPI main application for the Book Resource Service.
"""

from contextlib import asynccontextmanager
from typing import Any, Optional, Tuple

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.auth import generate_session_id, requires_auth, verify_bearer_token
from api.config import APIConfig, config
from api.database import BookStore
from api.errors import BookServiceError, ClientInputError, NotFoundError
from api.middleware import CORSHeadersMiddleware, ErrorHandlingMiddleware, ResponseTimeMiddleware
from api.models import BookDetailResponse, BookListResponse, BookResponse
from api.parsing import parse_int, read_json_body
from api.responses import UTF8JSONResponse, error_response

# Setup logging
logger = structlog.get_logger(__name__)

ENDPOINTS = (
    "GET    /books",
    "GET    /books/:id",
    "POST   /books (requires Authorization: Bearer <token>)",
    "PUT    /books/:id (requires Authorization)",
    "PATCH  /books/:id (requires Authorization)",
    "DELETE /books/:id (requires Authorization)",
)

router = APIRouter()


def get_store(request: Request) -> BookStore:
    """Dependency returning the application's book store."""
    return request.app.state.store


def get_settings(request: Request) -> APIConfig:
    """Dependency returning the application's configuration."""
    return request.app.state.config


def _require_title_and_author(body: Any) -> Tuple[str, str]:
    if not isinstance(body, dict) or not body.get("title") or not body.get("author"):
        raise ClientInputError("Missing title or author in request body")
    return str(body["title"]), str(body["author"])


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


# Books endpoints
@router.get("/books", response_model=BookListResponse, tags=["Books"])
async def list_books(
    request: Request,
    store: BookStore = Depends(get_store),
    settings: APIConfig = Depends(get_settings)
):
    """
    List books with author filtering and pagination.

    - **author**: Case-insensitive substring match on the author
    - **page**: Page number (starts from 1)
    - **limit**: Items per page
    """
    params = request.query_params
    limit = parse_int(params.get("limit"), settings.default_page_limit)
    page = parse_int(params.get("page"), 1)

    total, books = store.list_books(author=params.get("author"), page=page, limit=limit)

    return UTF8JSONResponse(
        content=BookListResponse(page=page, limit=limit, total=total, data=books).model_dump()
    )


@router.get("/books/{book_id:int}", response_model=BookDetailResponse, tags=["Books"])
async def get_book(
    book_id: int,
    request: Request,
    store: BookStore = Depends(get_store),
    settings: APIConfig = Depends(get_settings)
):
    """Get a single book by ID, echoing back the cookies the client sent."""
    book = store.get_book(book_id)
    if book is None:
        raise NotFoundError()

    return UTF8JSONResponse(
        content=BookDetailResponse(data=book, cookies=dict(request.cookies)).model_dump(),
        headers={"X-Server-Note": settings.server_note}
    )


@router.post(
    "/books",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_bearer_token)],
    tags=["Books"]
)
async def create_book(
    request: Request,
    store: BookStore = Depends(get_store),
    settings: APIConfig = Depends(get_settings)
):
    """Create a book and start a new session cookie."""
    title, author = _require_title_and_author(await read_json_body(request))
    book = store.create_book(title, author)

    response = UTF8JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=BookResponse(data=book).model_dump()
    )
    response.set_cookie(
        settings.session_cookie_name,
        generate_session_id(),
        httponly=True,
        path="/"
    )
    return response


@router.put(
    "/books/{book_id:int}",
    response_model=BookResponse,
    dependencies=[Depends(verify_bearer_token)],
    tags=["Books"]
)
async def replace_book(
    book_id: int,
    request: Request,
    store: BookStore = Depends(get_store)
):
    """Replace a book completely. The id is preserved."""
    title, author = _require_title_and_author(await read_json_body(request))
    book = store.replace_book(book_id, title, author)
    if book is None:
        raise NotFoundError()
    return UTF8JSONResponse(content=BookResponse(data=book).model_dump())


@router.patch(
    "/books/{book_id:int}",
    response_model=BookResponse,
    dependencies=[Depends(verify_bearer_token)],
    tags=["Books"]
)
async def update_book(
    book_id: int,
    request: Request,
    store: BookStore = Depends(get_store)
):
    """Update only the fields present in the body."""
    body = await read_json_body(request)
    if not isinstance(body, dict):
        raise ClientInputError("Missing body")

    book = store.update_book(
        book_id,
        title=_optional_str(body.get("title")),
        author=_optional_str(body.get("author"))
    )
    if book is None:
        raise NotFoundError()
    return UTF8JSONResponse(content=BookResponse(data=book).model_dump())


@router.delete(
    "/books/{book_id:int}",
    response_model=BookResponse,
    dependencies=[Depends(verify_bearer_token)],
    tags=["Books"]
)
async def delete_book(book_id: int, store: BookStore = Depends(get_store)):
    """Remove a book and return it."""
    book = store.delete_book(book_id)
    if book is None:
        raise NotFoundError()
    return UTF8JSONResponse(content=BookResponse(data=book).model_dump())


# Registered last so it only sees requests no other route matched
@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False
)
async def route_not_found(request: Request):
    """Reject unmatched routes, checking the token first for protected paths."""
    if requires_auth(request.method, request.url.path):
        await verify_bearer_token(request)
    raise NotFoundError("Route not found")


# Exception handlers
async def book_service_error_handler(request: Request, exc: BookServiceError):
    """Render application errors as ``{"error": message}``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        method=request.method,
        path=request.url.path,
        status=exc.status_code,
        error=exc.message
    )
    return error_response(exc.status_code, exc.message, exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors in the same shape."""
    # Methods no route lists are unmatched routes, not 405s
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return await book_service_error_handler(request, NotFoundError("Route not found"))
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render parameter validation failures as client input errors."""
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request parameters")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = app.state.config
    logger.info(
        "Starting Book Resource Service",
        url=f"http://localhost:{settings.port}",
        books=app.state.store.count(),
        endpoints=list(ENDPOINTS)
    )
    logger.info(
        "Example request",
        curl=(
            f"curl -X POST http://localhost:{settings.port}/books "
            "-H 'Content-Type: application/json' "
            "-H 'Authorization: Bearer <token>' "
            "-d '{\"title\":\"New Book\",\"author\":\"Anon\"}'"
        )
    )

    yield

    logger.info("Shutting down Book Resource Service")


def create_app(
    settings: Optional[APIConfig] = None,
    store: Optional[BookStore] = None
) -> FastAPI:
    """
    Create a configured application with its own book store.

    Args:
        settings: Configuration; defaults to the environment-driven config
        store: Book store; defaults to a freshly seeded one

    Returns:
        FastAPI application
    """
    settings = settings or config

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        default_response_class=UTF8JSONResponse,
        lifespan=lifespan
    )
    app.state.config = settings
    app.state.store = store if store is not None else BookStore()

    app.include_router(router)

    app.add_exception_handler(BookServiceError, book_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Last added runs first
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(CORSHeadersMiddleware, headers=settings.get_cors_headers())
    app.add_middleware(ResponseTimeMiddleware)

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
