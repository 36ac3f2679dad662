"""Load decomposed rows into the database.

All three tables are written in one transaction, in dependency order
(books, authors, books_authors). There are no retries: a failure rolls
the whole load back.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..db.database import Database, get_db
from .decompose import Tables
from .pipeline import PipelineResult, process_file

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """Raised when the database rejects the load."""

    pass


@dataclass
class LoadResult:
    """Counts of rows written by a load."""

    books: int = 0
    authors: int = 0
    junctions: int = 0

    @property
    def total(self) -> int:
        return self.books + self.authors + self.junctions


def load_tables(
    tables: Tables,
    db: Optional[Database] = None,
    fresh: bool = False,
) -> LoadResult:
    """Write books, authors and junctions to the database.

    Args:
        tables: Rows produced by the pipeline
        db: Database instance (uses global if not provided)
        fresh: Drop and recreate the tables first

    Returns:
        LoadResult with row counts

    Raises:
        LoadError: if any insert fails
    """
    if db is None:
        db = get_db()

    if fresh:
        db.drop_schema()
    db.create_schema()

    result = LoadResult()
    try:
        with db.get_session() as session:
            result.books = db.bulk_insert(
                "books", [book.model_dump() for book in tables.books], session=session
            )
            result.authors = db.bulk_insert(
                "authors", [author.model_dump() for author in tables.authors], session=session
            )
            result.junctions = db.bulk_insert(
                "books_authors",
                [junction.model_dump() for junction in tables.junctions],
                session=session,
            )
    except SQLAlchemyError as e:
        logger.error("Load failed, rolled back: %s", e)
        raise LoadError(f"Database rejected the load: {e}") from e

    logger.info("Loaded %d rows", result.total)
    return result


def import_file(
    source: Path | str,
    db: Optional[Database] = None,
    skip_header: bool = False,
    fresh: bool = False,
    dry_run: bool = False,
    show_progress: bool = False,
) -> tuple[PipelineResult, Optional[LoadResult]]:
    """Run the full pipeline on a CSV file and load the result.

    Args:
        source: Path to the CSV export
        db: Database instance (uses global if not provided)
        skip_header: Drop the first row of the file
        fresh: Drop and recreate the tables before loading
        dry_run: Run the pipeline without touching the database
        show_progress: Show tqdm progress bar while reading

    Returns:
        The pipeline result, and the load result unless dry_run
    """
    pipeline_result = process_file(source, skip_header=skip_header, show_progress=show_progress)

    if dry_run:
        return pipeline_result, None

    return pipeline_result, load_tables(pipeline_result, db=db, fresh=fresh)
