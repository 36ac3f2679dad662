"""CSV extraction for flat book exports.

The extractor reads comma-delimited, double-quote-escaped text and yields
raw records as tuples of strings, in source order. Columns are positional;
header rows are not detected, the caller decides whether to drop one.
Normalization to typed values happens in transform.py.
"""

import logging
from pathlib import Path
from typing import IO, Iterator, Union

import pandas as pd
from tqdm import tqdm

logger = logging.getLogger(__name__)

RawRecord = tuple[str, ...]
Source = Union[str, Path, IO[str], IO[bytes]]


class SourceReadError(Exception):
    """Raised when the source cannot be opened or is structurally invalid."""

    pass


def _detect_encoding(file_path: Path) -> str:
    """Detect file encoding, defaulting to utf-8."""
    encodings = ["utf-8", "utf-8-sig", "latin-1", "cp1252"]
    for encoding in encodings:
        try:
            with open(file_path, "r", encoding=encoding) as f:
                f.read(1024)
            return encoding
        except UnicodeDecodeError:
            continue
    return "utf-8"


def _read_frame(source: Source) -> pd.DataFrame:
    """Parse the whole source into a frame of strings.

    The first row fixes the column count. Shorter rows are padded with
    empty strings; longer rows are a structural error. A blank line is
    a record of empty strings.
    """
    encoding = "utf-8"
    if isinstance(source, (str, Path)):
        source = Path(source)
        if not source.exists():
            raise SourceReadError(f"File not found: {source}")
        if not source.is_file():
            raise SourceReadError(f"Not a file: {source}")

    try:
        if isinstance(source, Path):
            encoding = _detect_encoding(source)
        # Blank lines count as records
        df = pd.read_csv(
            source,
            header=None,
            dtype=str,
            encoding=encoding,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise SourceReadError(f"Failed to read CSV: {e}") from e

    return df.fillna("")


def iter_records(
    source: Source,
    skip_header: bool = False,
    show_progress: bool = False,
) -> Iterator[RawRecord]:
    """Extract raw records from a delimited-text source.

    Args:
        source: Path to a CSV file, or an open text/binary stream
        skip_header: Drop the first record
        show_progress: Show tqdm progress bar

    Yields:
        One tuple of string fields per source row
    """
    df = _read_frame(source)
    logger.debug("Parsed %d rows x %d columns", len(df), len(df.columns))

    rows = df.itertuples(index=False, name=None)
    iterator = tqdm(rows, total=len(df), desc="Reading records", disable=not show_progress)

    for index, row in enumerate(iterator):
        if skip_header and index == 0:
            continue
        yield tuple(str(value) for value in row)


def read_records(
    source: Source,
    skip_header: bool = False,
    show_progress: bool = False,
) -> list[RawRecord]:
    """Materialized form of iter_records."""
    return list(iter_records(source, skip_header=skip_header, show_progress=show_progress))
