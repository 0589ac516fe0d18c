"""Entity: Book."""

from pydantic import BaseModel, ConfigDict, Field

from src.bookstore.core.validation.book_schema import INT_MAX, INT_MIN


class Book(BaseModel):
    """Book entity representing a single row of the catalogue.

    This is the domain model handed out by the repository and serialized by
    the API. The isbn is supplied by the caller and never changes.
    """

    model_config = ConfigDict(from_attributes=True)

    isbn: str = Field(min_length=1, description="International Standard Book Number")
    amazon_url: str = Field(description="Product page on Amazon")
    author: str = Field(description="Author")
    language: str = Field(description="Language the book is written in")
    pages: int = Field(ge=0, le=INT_MAX, description="Page count")
    publisher: str = Field(description="Publisher")
    title: str = Field(description="Title")
    year: int = Field(ge=INT_MIN, le=INT_MAX, description="Publication year")
