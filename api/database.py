"""
In-memory book store for the FastAPI application.

Data is ephemeral: the store is seeded at startup and reset on restart.
"""

import threading
from typing import Iterable, List, Optional, Tuple

import structlog

from api.models import Book

logger = structlog.get_logger(__name__)


SEED_BOOKS = (
    Book(id=1, title="Eloquent JS", author="Marijn Haverbeke"),
    Book(id=2, title="You Don't Know JS", author="Kyle Simpson"),
    Book(id=3, title="Clean Code", author="Robert C. Martin"),
)


class BookStore:
    """
    Ordered in-memory collection of books with an auto-incrementing id.

    Every operation holds the store lock for its whole duration, so callers
    never observe a partially applied mutation. Records handed out are
    copies; mutating them does not touch the store.
    """

    def __init__(self, seed: Optional[Iterable[Book]] = None):
        """
        Initialize the store.

        Args:
            seed: Initial records. Defaults to the three seed books.
        """
        self._lock = threading.Lock()
        self._books: List[Book] = [
            book.model_copy() for book in (SEED_BOOKS if seed is None else seed)
        ]
        self._next_id = max((book.id for book in self._books), default=0) + 1

    def _index_of(self, book_id: int) -> int:
        for idx, book in enumerate(self._books):
            if book.id == book_id:
                return idx
        return -1

    def count(self) -> int:
        """Return the number of stored books."""
        with self._lock:
            return len(self._books)

    def list_books(
        self,
        author: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[int, List[Book]]:
        """
        Get books with author filtering and pagination.

        Args:
            author: Case-insensitive substring the author must contain
            page: Page number (starts from 1)
            limit: Items per page

        Returns:
            Tuple of (filtered total, books on the requested page)
        """
        with self._lock:
            books = self._books
            if author:
                needle = author.lower()
                books = [b for b in books if needle in b.author.lower()]

            total = len(books)
            if page < 1 or limit < 1:
                return total, []

            start = (page - 1) * limit
            return total, [b.model_copy() for b in books[start:start + limit]]

    def get_book(self, book_id: int) -> Optional[Book]:
        """Get a single book by ID, or None if it does not exist."""
        with self._lock:
            idx = self._index_of(book_id)
            return self._books[idx].model_copy() if idx != -1 else None

    def create_book(self, title: str, author: str) -> Book:
        """Append a new book under the next free id."""
        with self._lock:
            book = Book(id=self._next_id, title=title, author=author)
            self._next_id += 1
            self._books.append(book)
            logger.info("Book created", book_id=book.id)
            return book.model_copy()

    def replace_book(self, book_id: int, title: str, author: str) -> Optional[Book]:
        """Replace every field of a book except its id."""
        with self._lock:
            idx = self._index_of(book_id)
            if idx == -1:
                return None
            self._books[idx] = Book(id=book_id, title=title, author=author)
            logger.info("Book replaced", book_id=book_id)
            return self._books[idx].model_copy()

    def update_book(
        self,
        book_id: int,
        title: Optional[str] = None,
        author: Optional[str] = None
    ) -> Optional[Book]:
        """Update only the supplied fields of a book."""
        with self._lock:
            idx = self._index_of(book_id)
            if idx == -1:
                return None
            book = self._books[idx]
            if title is not None:
                book.title = title
            if author is not None:
                book.author = author
            logger.info(
                "Book updated",
                book_id=book_id,
                fields=[name for name, value in (("title", title), ("author", author)) if value is not None]
            )
            return book.model_copy()

    def delete_book(self, book_id: int) -> Optional[Book]:
        """Remove a book and return it, or None if it does not exist."""
        with self._lock:
            idx = self._index_of(book_id)
            if idx == -1:
                return None
            removed = self._books.pop(idx)
            logger.info("Book deleted", book_id=book_id)
            return removed
