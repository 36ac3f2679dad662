"""Transform raw CSV records to the NormalizedBook schema.

Fields are mapped by position, cleaned, and coerced to the types of the
books table. Numeric fields that do not parse become None and issue a
NumericCoercionWarning; a malformed publication date raises
DateFormatError.
"""

import re
import warnings
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Optional, Sequence

from ..db.schemas import NormalizedBook


class Column(IntEnum):
    """Fixed column positions of the source export."""

    TITLE = 0
    AUTHORS = 1
    AVG_RATING = 2
    ISBN = 3
    ISBN13 = 4
    LANGUAGE = 5
    PAGES = 6
    RATING_COUNT = 7
    TEXT_REVIEW_COUNT = 8
    PUBLISHED = 9
    PUBLISHER = 10


class DateFormatError(Exception):
    """Raised when a date field is not a valid day/month/year date."""

    def __init__(self, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}: {reason} ({value!r})")


class NumericCoercionWarning(UserWarning):
    """Issued when a numeric field does not parse and becomes None."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}: not a number ({value!r})")


AUTHOR_SEPARATOR = "/"

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_DECIMAL_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def clean_isbn(value: Optional[str]) -> str:
    """Clean ISBN value, handling the spreadsheet ="..." wrapper.

    Drops one leading "=" and every double quote.
    """
    if not value:
        return ""
    if value.startswith("="):
        value = value[1:]
    return value.replace('"', "")


def split_authors(value: Optional[str]) -> list[str]:
    """Split a multi-author field on "/". Tokens are not trimmed."""
    return (value or "").split(AUTHOR_SEPARATOR)


def _not_a_number(field: str, value: Optional[str]) -> None:
    warnings.warn(NumericCoercionWarning(field, value or ""), stacklevel=3)
    return None


def parse_int(value: Optional[str], field: str = "value") -> Optional[int]:
    """Parse the leading integer of a string, None if there is none."""
    match = _INT_PREFIX.match(value or "")
    if match is None:
        return _not_a_number(field, value)
    try:
        return int(match.group(1))
    except ValueError:
        # Digit strings past the interpreter's conversion limit
        return _not_a_number(field, value)


def parse_decimal(value: Optional[str], field: str = "value") -> Optional[Decimal]:
    """Parse the leading decimal number of a string, None if there is none."""
    match = _DECIMAL_PREFIX.match(value or "")
    if match is None:
        return _not_a_number(field, value)
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return _not_a_number(field, value)


def parse_published_date(value: Optional[str], field: str = "published") -> date:
    """Parse a day/month/year date.

    "4/9/2006" is the 4th of September 2006.
    """
    value = value or ""
    parts = [part.strip() for part in value.split("/")]
    if len(parts) != 3:
        raise DateFormatError(field, value, f"expected day/month/year, got {len(parts)} part(s)")
    if not all(part.isdecimal() for part in parts):
        raise DateFormatError(field, value, "non-numeric date component")

    try:
        day, month, year = (int(part) for part in parts)
        if not 1 <= month <= 12:
            raise DateFormatError(field, value, f"month {month} out of range")
        return date(year, month, day)
    except (ValueError, OverflowError) as e:
        raise DateFormatError(field, value, str(e)) from e


def _get(raw: Sequence[str], column: Column) -> str:
    """Field at a position, empty when the record is short."""
    return raw[column] if column < len(raw) else ""


def normalize_record(raw: Sequence[str]) -> NormalizedBook:
    """Transform one raw record to a NormalizedBook.

    Field mappings (by position):
    - 0 title -> title
    - 1 authors -> authors (split on "/")
    - 2 average rating -> avg_rating
    - 3 isbn -> isbn (strip ="" wrapper)
    - 4 isbn13 -> isbn13 (integer) and source_isbn13 (cleaned text)
    - 5 language -> language
    - 6 pages -> pages
    - 7 ratings count -> rating_count
    - 8 text reviews count -> text_review_count
    - 9 publication date (day/month/year) -> published
    - 10 publisher -> publisher

    Raises:
        DateFormatError: if the publication date is malformed
    """
    source_isbn13 = clean_isbn(_get(raw, Column.ISBN13))

    return NormalizedBook(
        title=_get(raw, Column.TITLE),
        authors=split_authors(_get(raw, Column.AUTHORS)),
        avg_rating=parse_decimal(_get(raw, Column.AVG_RATING), "avg_rating"),
        isbn=clean_isbn(_get(raw, Column.ISBN)),
        isbn13=parse_int(source_isbn13, "isbn13"),
        source_isbn13=source_isbn13,
        language=_get(raw, Column.LANGUAGE),
        pages=parse_int(_get(raw, Column.PAGES), "pages"),
        rating_count=parse_int(_get(raw, Column.RATING_COUNT), "rating_count"),
        text_review_count=parse_int(
            _get(raw, Column.TEXT_REVIEW_COUNT), "text_review_count"
        ),
        published=parse_published_date(_get(raw, Column.PUBLISHED)),
        publisher=_get(raw, Column.PUBLISHER),
    )
