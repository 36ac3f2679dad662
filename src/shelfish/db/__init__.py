"""Database module for the normalized book tables."""

from .models import Author, Book, BookAuthor
from .schemas import AuthorRow, BookRow, JunctionRow, NormalizedBook, RecordIssue
from .database import Database, get_db

__all__ = [
    "Book",
    "Author",
    "BookAuthor",
    "BookRow",
    "AuthorRow",
    "JunctionRow",
    "NormalizedBook",
    "RecordIssue",
    "Database",
    "get_db",
]
