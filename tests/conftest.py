"""Pytest configuration and shared fixtures.

This module provides fixtures for testing shelfish, including temporary
databases and sample CSV exports.
"""

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Generator

import pytest

from shelfish.config import reset_config
from shelfish.db.database import Database, reset_db
from shelfish.db.schemas import NormalizedBook


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    # Reset any global state
    reset_db()
    reset_config()

    # Set environment variable for test database
    os.environ["SHELFISH_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_schema()
    yield database

    # Cleanup
    database.engine.dispose()
    reset_db()
    reset_config()
    if "SHELFISH_DB_PATH" in os.environ:
        del os.environ["SHELFISH_DB_PATH"]


# ============================================================================
# Sample Data Fixtures
# ============================================================================


HEADER = (
    "title,authors,average_rating,isbn,isbn13,language_code,num_pages,"
    "ratings_count,text_reviews_count,publication_date,publisher\n"
)

SAMPLE_ROWS = (
    "Harry Potter and the Half-Blood Prince (Harry Potter  #6),"
    "J.K. Rowling/Mary GrandPré,4.57,0439785960,9780439785969,eng,652,"
    "2095690,27591,16/9/2006,Scholastic Inc.\n"
    "The Hunger Games (The Hunger Games  #1),Suzanne Collins,4.33,"
    '="0439023483","9780439023481",eng,374,4899965,93796,14/9/2008,Scholastic Press\n'
    '"Good Omens: The Nice and Accurate Prophecies of Agnes Nutter, Witch",'
    "Terry Pratchett/Neil Gaiman,4.25,0060853980,,eng,430,499236,12817,"
    "28/11/2006,William Morrow\n"
)


@pytest.fixture
def sample_csv_content() -> str:
    """Three books: two authors, one author, two authors with no isbn13."""
    return SAMPLE_ROWS


@pytest.fixture
def books_csv_file(tmp_path) -> Path:
    """Create a sample export without a header row."""
    csv_file = tmp_path / "books.csv"
    csv_file.write_text(SAMPLE_ROWS, encoding="utf-8")
    return csv_file


@pytest.fixture
def books_csv_with_header(tmp_path) -> Path:
    """Create a sample export with a header row."""
    csv_file = tmp_path / "books_header.csv"
    csv_file.write_text(HEADER + SAMPLE_ROWS, encoding="utf-8")
    return csv_file


@pytest.fixture
def bad_date_csv_file(tmp_path) -> Path:
    """Create an export whose second row has a malformed date."""
    content = (
        "Book One,Author A/Author B,4.00,1111111111,9781111111111,eng,100,10,1,1/2/2001,Pub\n"
        "Book Two,Author C,3.00,2222222222,9782222222222,eng,200,20,2,2001-02-01,Pub\n"
        "Book Three,Author D,2.00,3333333333,9783333333333,eng,300,30,3,3/4/2003,Pub\n"
    )
    csv_file = tmp_path / "bad_date.csv"
    csv_file.write_text(content, encoding="utf-8")
    return csv_file


@pytest.fixture
def sample_raw_record() -> tuple[str, ...]:
    """A single well-formed raw record."""
    return (
        "The Hunger Games",
        "Suzanne Collins",
        "4.33",
        '="0439023483"',
        "9780439023481",
        "eng",
        "374",
        "4899965",
        "93796",
        "14/9/2008",
        "Scholastic Press",
    )


@pytest.fixture
def sample_normalized_book() -> NormalizedBook:
    """A normalized book with two authors."""
    return NormalizedBook(
        title="Good Omens",
        authors=["Terry Pratchett", "Neil Gaiman"],
        isbn="0060853980",
        isbn13=9780060853983,
        source_isbn13="9780060853983",
        language="eng",
        pages=430,
        rating_count=499236,
        text_review_count=12817,
        published=date(2006, 11, 28),
        publisher="William Morrow",
    )
