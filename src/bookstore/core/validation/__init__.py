"""Request payload validation for book writes."""

from .book_schema import (
    BookCreate,
    BookUpdate,
    ValidatorMode,
    parse_book_create,
    parse_book_update,
    validate_book,
)

__all__ = [
    "BookCreate",
    "BookUpdate",
    "ValidatorMode",
    "parse_book_create",
    "parse_book_update",
    "validate_book",
]
