"""Request-body schemas for book writes.

The two models form the field/type table a payload is checked against:
``BookCreate`` requires every field, ``BookUpdate`` accepts any subset of the
non-key fields. Both reject unknown keys and do not coerce types.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.bookstore.core.errors import BookValidationError

ValidatorMode = Literal["create", "update"]

# Range of the INTEGER columns backing pages and year
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class BookCreate(BaseModel):
    """Payload accepted by ``POST /books``."""

    model_config = ConfigDict(extra="forbid", strict=True)

    isbn: str = Field(min_length=1)
    amazon_url: str
    author: str
    language: str
    pages: int = Field(ge=0, le=INT_MAX)
    publisher: str
    title: str
    year: int = Field(ge=INT_MIN, le=INT_MAX)


class BookUpdate(BaseModel):
    """Payload accepted by ``PUT /books/{isbn}``; the isbn itself is not updatable."""

    model_config = ConfigDict(extra="forbid", strict=True)

    amazon_url: str | None = None
    author: str | None = None
    language: str | None = None
    pages: int | None = Field(default=None, ge=0, le=INT_MAX)
    publisher: str | None = None
    title: str | None = None
    year: int | None = Field(default=None, ge=INT_MIN, le=INT_MAX)


_SCHEMAS: dict[str, type[BaseModel]] = {
    "create": BookCreate,
    "update": BookUpdate,
}


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    if error["type"] == "extra_forbidden":
        return f"{location}: Field is not allowed"
    if not location:
        return error["msg"]
    return f"{location}: {error['msg']}"


def validate_book(payload: Any, mode: ValidatorMode) -> list[str]:
    """Check ``payload`` against the schema for ``mode``.

    Returns a list of field-level error messages; an empty list means the
    payload is valid.
    """
    schema = _SCHEMAS[mode]

    if not isinstance(payload, dict):
        return ["Request body must be a JSON object"]

    try:
        schema.model_validate(payload)
    except ValidationError as e:
        return [_format_error(error) for error in e.errors()]

    # An explicit null is not a value for any column
    return [
        f"{name}: Field may not be null"
        for name, value in payload.items()
        if value is None
    ]


def parse_book_create(payload: Any) -> BookCreate:
    """Validate a create payload, raising ``BookValidationError`` on failure."""
    errors = validate_book(payload, "create")
    if errors:
        raise BookValidationError(errors)
    return BookCreate.model_validate(payload)


def parse_book_update(payload: Any) -> dict[str, Any]:
    """Validate an update payload and return only the fields it sets."""
    errors = validate_book(payload, "update")
    if errors:
        raise BookValidationError(errors)
    return BookUpdate.model_validate(payload).model_dump(exclude_unset=True)
