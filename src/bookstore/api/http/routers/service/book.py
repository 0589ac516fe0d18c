"""Book API router with CRUD operations."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from loguru import logger
from sqlmodel import Session

from src.bookstore.api.http.deps import get_db_session
from src.bookstore.core.errors import BookNotFoundError
from src.bookstore.core.validation import parse_book_create, parse_book_update
from src.bookstore.entities.service.book import Book, BookRepository

router = APIRouter(prefix="/books", tags=["books"])


@router.get("")
def list_books(
    session: Session = Depends(get_db_session),
) -> dict[str, list[Book]]:
    """List all books."""
    repository = BookRepository(session)
    return {"books": repository.list_all()}


@router.get("/{isbn}")
def get_book(
    isbn: str,
    session: Session = Depends(get_db_session),
) -> dict[str, Book]:
    """Get a book by isbn."""
    repository = BookRepository(session)
    book = repository.get_by_isbn(isbn)
    if book is None:
        raise BookNotFoundError(isbn)
    return {"book": book}


@router.post("", status_code=201)
def create_book(
    payload: Any = Body(default=None),
    session: Session = Depends(get_db_session),
) -> dict[str, Book]:
    """Create a new book from a complete payload."""
    data = parse_book_create(payload)

    repository = BookRepository(session)
    created_book = repository.create(Book.model_validate(data.model_dump()))
    session.commit()

    logger.bind(isbn=created_book.isbn).info("Book created")
    return {"book": created_book}


@router.put("/{isbn}")
def update_book(
    isbn: str,
    payload: Any = Body(default=None),
    session: Session = Depends(get_db_session),
) -> dict[str, Book]:
    """Update some or all non-key fields of a book."""
    repository = BookRepository(session)

    # An unknown isbn is reported before the payload is looked at
    if repository.get_by_isbn(isbn) is None:
        raise BookNotFoundError(isbn)

    fields = parse_book_update(payload)
    updated_book = repository.update_by_isbn(isbn, fields)
    session.commit()

    logger.bind(isbn=isbn, fields=sorted(fields)).info("Book updated")
    return {"book": updated_book}


@router.delete("/{isbn}")
def delete_book(
    isbn: str,
    session: Session = Depends(get_db_session),
) -> dict[str, str]:
    """Delete a book."""
    repository = BookRepository(session)
    repository.delete_by_isbn(isbn)
    session.commit()

    logger.bind(isbn=isbn).info("Book deleted")
    return {"message": "Book deleted"}
