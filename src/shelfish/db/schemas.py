"""Pydantic schemas for normalized book data.

These schemas define the rows handed to the database for the three
relational tables (books, authors, books_authors), plus the intermediate
normalized record that still carries its author names.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

# Largest value a BIGINT primary key holds
MAX_ISBN13 = 2**63 - 1


# ============================================================================
# Table Rows
# ============================================================================


class BookFields(BaseModel):
    """Book fields common to the normalized record and the table row."""

    title: str = Field("", description="Book title")
    avg_rating: Optional[Decimal] = Field(None, description="Average rating, None if not a number")
    isbn: str = Field("", description="ISBN-10, cleaned of export escaping")
    language: str = ""
    pages: Optional[int] = None
    rating_count: Optional[int] = None
    text_review_count: Optional[int] = None
    published: date
    publisher: str = ""


class BookRow(BookFields):
    """Row for the books table. isbn13 is the natural key."""

    isbn13: int = Field(..., gt=0, le=MAX_ISBN13)


class AuthorRow(BaseModel):
    """Row for the authors table.

    author_id is only unique within one input file.
    """

    author_id: int = Field(..., ge=0)
    name: str


class JunctionRow(BaseModel):
    """Row for the books_authors table.

    book_id is the isbn13 text exactly as it appeared in the source,
    not the integer stored on the book row.
    """

    book_id: str
    author_id: int = Field(..., ge=0)


# ============================================================================
# Intermediate Records
# ============================================================================


class NormalizedBook(BookFields):
    """A source record after field normalization, before decomposition."""

    isbn13: Optional[int] = None
    source_isbn13: str = ""
    authors: list[str] = Field(default_factory=lambda: [""])

    @property
    def has_valid_key(self) -> bool:
        """True when isbn13 parsed to an integer that fits the books key."""
        return self.isbn13 is not None and 0 < self.isbn13 <= MAX_ISBN13

    def to_book_row(self) -> Optional[BookRow]:
        """Strip the author list, or None when the record has no usable key."""
        if not self.has_valid_key:
            return None
        return BookRow(**self.model_dump(exclude={"authors", "source_isbn13"}))


# ============================================================================
# Reports
# ============================================================================


class RecordIssue(BaseModel):
    """A problem found in one source record."""

    row: Optional[int] = None
    field: Optional[str] = None
    value: Optional[str] = None
    issue: str
    action: str
