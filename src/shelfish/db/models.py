"""SQLAlchemy ORM models for the normalized book tables.

Tables:
- books: One row per book, keyed by isbn13
- authors: One row per author token in the source file
- books_authors: Junction linking books to authors

Column names are the lowercase forms PostgreSQL gives unquoted
camelCase identifiers (avgRating -> avgrating), so existing tables match.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import BigInteger, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Book(Base):
    """Book model."""

    __tablename__ = "books"

    isbn13: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    avg_rating: Mapped[Optional[Decimal]] = mapped_column("avgrating", Numeric(3, 2))
    isbn: Mapped[Optional[str]] = mapped_column(String(10))
    language: Mapped[Optional[str]] = mapped_column(String(10))
    pages: Mapped[Optional[int]] = mapped_column(Integer)
    rating_count: Mapped[Optional[int]] = mapped_column("ratingcount", Integer)
    text_review_count: Mapped[Optional[int]] = mapped_column("textreviewcount", Integer)
    published: Mapped[date] = mapped_column(Date, nullable=False)
    publisher: Mapped[Optional[str]] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Book(isbn13={self.isbn13}, title='{self.title}')>"


class Author(Base):
    """Author model. Names are not deduplicated across books."""

    __tablename__ = "authors"

    author_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Author(author_id={self.author_id}, name='{self.name}')>"


class BookAuthor(Base):
    """Junction between books and authors."""

    __tablename__ = "books_authors"

    book_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("books.isbn13"), primary_key=True, autoincrement=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("authors.author_id"), primary_key=True, autoincrement=False
    )

    def __repr__(self) -> str:
        return f"<BookAuthor(book_id={self.book_id}, author_id={self.author_id})>"


# Table name -> model, for bulk inserts addressed by name
TABLES: dict[str, type[Base]] = {
    "books": Book,
    "authors": Author,
    "books_authors": BookAuthor,
}
