"""
Tests for the in-memory book store.
"""

import threading

from api.database import BookStore
from api.models import Book


def test_default_seed(book_store):
    """Test the store starts with the three seed books."""
    total, books = book_store.list_books()
    assert total == 3
    assert [b.title for b in books] == ["Eloquent JS", "You Don't Know JS", "Clean Code"]


def test_custom_seed_sets_next_id():
    """Test the next id follows the highest seeded id."""
    store = BookStore(seed=[Book(id=10, title="T", author="A")])
    assert store.create_book("New", "Author").id == 11


def test_empty_seed():
    """Test an empty store starts numbering at 1."""
    store = BookStore(seed=[])
    assert store.count() == 0
    assert store.create_book("First", "Author").id == 1


def test_stores_do_not_share_state():
    """Test each store owns its own records."""
    first, second = BookStore(), BookStore()
    first.delete_book(1)
    assert second.get_book(1) is not None


def test_list_books_pagination(book_store):
    """Test slicing by page and limit."""
    total, books = book_store.list_books(page=2, limit=2)
    assert total == 3
    assert [b.id for b in books] == [3]


def test_list_books_invalid_paging_is_empty(book_store):
    """Test non-positive page or limit yields no items."""
    assert book_store.list_books(page=0, limit=10) == (3, [])
    assert book_store.list_books(page=1, limit=0) == (3, [])
    assert book_store.list_books(page=1, limit=-1) == (3, [])


def test_list_books_author_filter(book_store):
    """Test the author filter is a case-insensitive substring match."""
    total, books = book_store.list_books(author="MARTIN")
    assert total == 1
    assert books[0].author == "Robert C. Martin"

    assert book_store.list_books(author="nobody") == (0, [])


def test_returned_books_are_copies(book_store):
    """Test mutating a returned record does not change the store."""
    book = book_store.get_book(1)
    book.title = "Tampered"
    assert book_store.get_book(1).title == "Eloquent JS"


def test_replace_book(book_store):
    """Test a full replace keeps the id and position."""
    book = book_store.replace_book(2, "New Title", "New Author")
    assert book == Book(id=2, title="New Title", author="New Author")
    _, books = book_store.list_books()
    assert [b.id for b in books] == [1, 2, 3]


def test_update_book_partial(book_store):
    """Test only supplied fields change."""
    book = book_store.update_book(3, author="Uncle Bob")
    assert book.title == "Clean Code"
    assert book.author == "Uncle Bob"


def test_missing_ids(book_store):
    """Test operations on unknown ids return None."""
    assert book_store.get_book(99) is None
    assert book_store.replace_book(99, "T", "A") is None
    assert book_store.update_book(99, title="T") is None
    assert book_store.delete_book(99) is None
    assert book_store.count() == 3


def test_delete_book(book_store):
    """Test deleting returns the removed record."""
    removed = book_store.delete_book(1)
    assert removed.id == 1
    assert book_store.get_book(1) is None
    assert book_store.count() == 2


def test_concurrent_creates_get_unique_ids():
    """Test parallel writers never hand out the same id."""
    store = BookStore(seed=[])
    ids = []
    ids_lock = threading.Lock()

    def worker():
        for _ in range(50):
            book = store.create_book("T", "A")
            with ids_lock:
                ids.append(book.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(ids) == 400
    assert sorted(ids) == list(range(1, 401))
    assert store.count() == 400
