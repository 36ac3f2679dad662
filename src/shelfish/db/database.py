"""Database operations for the normalized book tables.

Handles connection, session management, schema creation and bulk inserts.
This is the sink the ETL pipeline hands its output to.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterable, Optional

from sqlalchemy import create_engine, func, insert, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import TABLES, Base

logger = logging.getLogger(__name__)


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file, ":memory:", or a full
                     SQLAlchemy URL. If None, uses SHELFISH_DB_PATH env var
                     or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "SHELFISH_DB_PATH",
                str(Path.home() / ".shelfish" / "shelfish.db"),
            )

        db_path = str(db_path)
        self._is_memory = db_path == ":memory:"
        self._is_url = "://" in db_path
        self.db_path = Path(db_path) if not self._is_url else None

        if self._is_memory:
            # StaticPool so every session shares the same in-memory database
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif self._is_url:
            self.engine = create_engine(db_path, echo=False)
        else:
            self._ensure_directory()
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_schema(self) -> None:
        """Create the books, authors and books_authors tables if absent."""
        Base.metadata.create_all(self.engine)
        logger.debug("Schema ready at %s", self.engine.url)

    def drop_schema(self) -> None:
        """Drop all tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)
        logger.info("Dropped tables at %s", self.engine.url)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Row Operations
    # ========================================================================

    def bulk_insert(
        self,
        table: str,
        rows: Iterable[dict[str, Any]],
        session: Optional[Session] = None,
    ) -> int:
        """Insert rows into a table by name.

        Args:
            table: One of "books", "authors", "books_authors"
            rows: Dictionaries keyed by model attribute name
            session: Existing session to join, otherwise a new transaction

        Returns:
            Number of rows inserted
        """
        model = TABLES.get(table)
        if model is None:
            raise ValueError(f"Unknown table: {table}")

        rows = list(rows)

        def _insert(s: Session) -> int:
            if rows:
                s.execute(insert(model), rows)
            logger.debug("Inserted %d rows into %s", len(rows), table)
            return len(rows)

        if session:
            return _insert(session)
        else:
            with self.get_session() as s:
                return _insert(s)

    def count(self, table: str) -> int:
        """Count rows in a table by name."""
        model = TABLES.get(table)
        if model is None:
            raise ValueError(f"Unknown table: {table}")

        with self.get_session() as s:
            return s.execute(select(func.count()).select_from(model)).scalar_one()

    def get_counts(self) -> dict[str, int]:
        """Row counts for every table."""
        return {name: self.count(name) for name in TABLES}


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_schema()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
