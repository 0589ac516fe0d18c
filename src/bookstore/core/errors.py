"""Domain errors surfaced by the validator and the book repository.

The HTTP layer is the only place these are translated into responses; each
error carries the status code it maps to.
"""


class BookstoreError(Exception):
    """Base class for all recoverable bookstore errors."""

    status_code: int = 500

    def __init__(self, message: str | list[str]) -> None:
        super().__init__(message)
        self.message = message


class BookValidationError(BookstoreError):
    """Raised when a request payload does not match the book schema."""

    status_code = 400

    def __init__(self, errors: list[str]) -> None:
        super().__init__(errors)
        self.errors = errors


class BookNotFoundError(BookstoreError):
    """Raised when no book row matches the requested isbn."""

    status_code = 404

    def __init__(self, isbn: str) -> None:
        super().__init__(f"There is no book with an isbn '{isbn}'")
        self.isbn = isbn


class DuplicateBookError(BookstoreError):
    """Raised when inserting a book whose isbn is already stored."""

    status_code = 400

    def __init__(self, isbn: str) -> None:
        super().__init__(f"A book with isbn '{isbn}' already exists")
        self.isbn = isbn
