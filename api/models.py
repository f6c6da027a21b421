"""
API models and schemas for the FastAPI application.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class Book(BaseModel):
    """Book record held by the in-memory store."""
    id: int = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")


class BookListResponse(BaseModel):
    """Response model for book list with pagination."""
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Number of books per page")
    total: int = Field(..., description="Number of books matching the filter")
    data: List[Book] = Field(..., description="Books on this page")


class BookResponse(BaseModel):
    """Single book envelope."""
    data: Book = Field(..., description="The book")


class BookDetailResponse(BookResponse):
    """Single book envelope that echoes the cookies the client sent."""
    cookies: Dict[str, str] = Field(default_factory=dict, description="Cookies received")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
