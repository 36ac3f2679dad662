"""Command-line interface for shelfish.

Built with Typer for commands and Rich for beautiful output.
"""

import time
import warnings
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import get_config
from .db.database import Database, get_db
from .db.schemas import RecordIssue
from .log import configure_logging

# Create the main app
app = typer.Typer(
    name="shelfish",
    help="Normalize flat book exports into books, authors and junction tables.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def _setup(verbose: bool = False) -> None:
    config = get_config()
    errors = config.validate()
    for error in errors:
        print_error(error)
    if errors:
        raise typer.Exit(1)
    configure_logging("DEBUG" if verbose else config.log_level)


def _open_db(db_path: Optional[Path]) -> Database:
    if db_path is None:
        return get_db(str(get_config().db_path))
    db = Database(str(db_path))
    db.create_schema()
    return db


def format_issue_table(issues: list[RecordIssue], title: str) -> Table:
    """Create a rich table for displaying record issues."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Row", justify="right")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="yellow", max_width=30)
    table.add_column("Issue")

    for issue in issues:
        table.add_row(
            str(issue.row) if issue.row is not None else "-",
            issue.field or "-",
            issue.value or "",
            issue.issue,
        )

    return table


# ============================================================================
# Commands
# ============================================================================


@app.command()
def load(
    file: Path = typer.Argument(..., help="Path to CSV export"),
    skip_header: Optional[bool] = typer.Option(
        None, "--skip-header/--no-skip-header", help="Drop the first row of the file"
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", help="Database file"),
    fresh: bool = typer.Option(False, "--fresh", help="Drop and recreate tables first"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Normalize without loading"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Normalize a CSV export and load it into the database."""
    from .etl import LoadError, SourceReadError, load_tables, process_file

    _setup(verbose)
    config = get_config()
    if skip_header is None:
        skip_header = config.skip_header

    start = time.perf_counter()

    console.print("[dim]Spooling file parser...[/dim]")
    try:
        result = process_file(file, skip_header=skip_header, show_progress=config.show_progress)
    except SourceReadError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(f"\nCount of books read: {len(result.books)}")
    console.print(f"Count of authors named: {len(result.authors)}")
    console.print(f"Count of relations made: {len(result.junctions)}")
    if result.excluded_books:
        print_warning(f"{result.excluded_books} record(s) without a usable isbn13 have no book row")
    if result.warnings:
        print_info(f"{len(result.warnings)} numeric field(s) could not be parsed")

    if dry_run:
        console.print("\n[dim]Dry run - no changes made.[/dim]")
    else:
        db = _open_db(db_path)
        try:
            loaded = load_tables(result, db=db, fresh=fresh)
        except LoadError as e:
            print_error(str(e))
            raise typer.Exit(1)
        print_success(f"Loaded {loaded.total} rows")

    elapsed_ms = (time.perf_counter() - start) * 1000
    console.print(f"\n{elapsed_ms:.0f}ms")

    if result.errors:
        console.print(format_issue_table(result.errors, title="Skipped Records"))
        raise typer.Exit(1)


@app.command()
def preview(
    file: Path = typer.Argument(..., help="Path to CSV export"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max records to show"),
    skip_header: Optional[bool] = typer.Option(
        None, "--skip-header/--no-skip-header", help="Drop the first row of the file"
    ),
) -> None:
    """Show how the first records of a file normalize."""
    from .etl import DateFormatError, NumericCoercionWarning, SourceReadError, read_records
    from .etl.transform import normalize_record

    if skip_header is None:
        skip_header = get_config().skip_header

    try:
        records = read_records(file, skip_header=skip_header)
    except SourceReadError as e:
        print_error(str(e))
        raise typer.Exit(1)

    table = Table(title=f"Preview: {file.name}", show_header=True, header_style="bold magenta")
    table.add_column("ISBN13", style="cyan")
    table.add_column("Title", no_wrap=False, max_width=40)
    table.add_column("Authors", style="green", max_width=30)
    table.add_column("Rating", justify="center")
    table.add_column("Pages", justify="right")
    table.add_column("Published")

    for raw in records[:limit]:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NumericCoercionWarning)
            try:
                book = normalize_record(raw)
            except DateFormatError as e:
                table.add_row("-", raw[0] if raw else "", "-", "-", "-", f"[red]{e.reason}[/red]")
                continue

        table.add_row(
            str(book.isbn13) if book.has_valid_key else f"[red]{book.source_isbn13 or '-'}[/red]",
            book.title,
            ", ".join(book.authors),
            str(book.avg_rating) if book.avg_rating is not None else "-",
            str(book.pages) if book.pages is not None else "-",
            book.published.isoformat(),
        )

    console.print(table)
    print_info(f"Showing {min(limit, len(records))} of {len(records)} records")


@app.command("init-db")
def init_db(
    db_path: Optional[Path] = typer.Option(None, "--db", help="Database file"),
    fresh: bool = typer.Option(False, "--fresh", help="Drop existing tables first"),
) -> None:
    """Create the books, authors and books_authors tables."""
    _setup()
    db = _open_db(db_path)
    if fresh:
        db.drop_schema()
        db.create_schema()
    print_success(f"Database ready: {db.engine.url}")


@app.command()
def stats(
    db_path: Optional[Path] = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Show row counts for each table."""
    _setup()
    db = _open_db(db_path)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in db.get_counts().items():
        table.add_row(name, str(count))

    console.print(Panel(table, title="Database", expand=False))


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"shelfish {__version__}")


if __name__ == "__main__":
    app()
