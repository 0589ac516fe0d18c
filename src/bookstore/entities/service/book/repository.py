"""Repository: Book data access."""

from typing import Any

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import FlushError
from sqlmodel import Session, select

from src.bookstore.core.errors import BookNotFoundError, DuplicateBookError

from .entity import Book
from .table import BookTable


class BookRepository:
    """Data-access layer for books.

    Every statement goes through SQLModel, so values are always sent as bound
    parameters. The repository flushes but never commits; the caller owns the
    transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> list[Book]:
        statement = select(BookTable).order_by(BookTable.title)
        rows = self._session.exec(statement).all()
        return [Book.model_validate(row) for row in rows]

    def get_by_isbn(self, isbn: str) -> Book | None:
        row = self._session.get(BookTable, isbn)
        if row is None:
            return None
        return Book.model_validate(row)

    def create(self, book: Book) -> Book:
        """Insert a new book; the store enforces isbn uniqueness."""
        row = BookTable.model_validate(book.model_dump())
        self._session.add(row)
        try:
            self._session.flush()
        except (IntegrityError, FlushError) as e:
            self._session.rollback()
            logger.bind(isbn=book.isbn).warning("Duplicate isbn on insert")
            raise DuplicateBookError(book.isbn) from e

        self._session.refresh(row)
        return Book.model_validate(row)

    def update_by_isbn(self, isbn: str, fields: dict[str, Any]) -> Book:
        """Overwrite the given non-key fields of the book identified by ``isbn``."""
        row = self._session.get(BookTable, isbn)
        if row is None:
            raise BookNotFoundError(isbn)

        for name, value in fields.items():
            if name == "isbn":
                continue
            setattr(row, name, value)

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Book.model_validate(row)

    def delete_by_isbn(self, isbn: str) -> None:
        row = self._session.get(BookTable, isbn)
        if row is None:
            raise BookNotFoundError(isbn)

        self._session.delete(row)
        self._session.flush()
