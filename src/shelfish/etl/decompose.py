"""Split normalized books into relational rows.

Each NormalizedBook becomes at most one book row, plus one author row and
one junction row per author token. Author ids come from a counter that is
passed in and handed back, so a full pass over a file is a pure function
of the records and the starting id.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..db.schemas import AuthorRow, BookRow, JunctionRow, NormalizedBook


@dataclass
class Decomposition:
    """Rows produced from one normalized book."""

    book: Optional[BookRow]
    authors: list[AuthorRow] = field(default_factory=list)
    junctions: list[JunctionRow] = field(default_factory=list)


@dataclass
class Tables:
    """Rows for the books, authors and books_authors tables."""

    books: list[BookRow] = field(default_factory=list)
    authors: list[AuthorRow] = field(default_factory=list)
    junctions: list[JunctionRow] = field(default_factory=list)

    def extend(self, part: Decomposition) -> None:
        """Append the rows of one decomposed book."""
        if part.book is not None:
            self.books.append(part.book)
        self.authors.extend(part.authors)
        self.junctions.extend(part.junctions)


def decompose_record(
    record: NormalizedBook,
    next_author_id: int,
) -> tuple[Decomposition, int]:
    """Decompose one book.

    Books whose isbn13 is not a positive integer get no book row, but
    their authors and junctions are still produced. Junctions link to the
    isbn13 text as it appeared in the source.

    Args:
        record: Normalized book with its author names
        next_author_id: Id for the first author of this book

    Returns:
        The rows for this book and the id for the next author
    """
    part = Decomposition(book=record.to_book_row())

    for name in record.authors:
        part.authors.append(AuthorRow(author_id=next_author_id, name=name))
        part.junctions.append(
            JunctionRow(book_id=record.source_isbn13, author_id=next_author_id)
        )
        next_author_id += 1

    return part, next_author_id


def decompose_records(
    records: Iterable[NormalizedBook],
    start_author_id: int = 0,
) -> Tables:
    """Decompose a sequence of books with one author-id counter across all."""
    tables = Tables()
    next_author_id = start_author_id
    for record in records:
        part, next_author_id = decompose_record(record, next_author_id)
        tables.extend(part)
    return tables
