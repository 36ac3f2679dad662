"""Run the extract -> transform -> decompose pipeline over one source.

Records are processed one at a time, in source order. A record whose
publication date is malformed is skipped entirely and reported; numeric
fields that fail to parse are kept as None and reported as warnings.
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import Iterable

from ..db.schemas import RecordIssue
from .decompose import Tables, decompose_record
from .extract import RawRecord, Source, iter_records
from .transform import DateFormatError, NumericCoercionWarning, normalize_record

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult(Tables):
    """Rows for the sink plus a report of what happened to each record."""

    rows_read: int = 0
    excluded_books: int = 0
    errors: list[RecordIssue] = field(default_factory=list)
    warnings: list[RecordIssue] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        """Number of records dropped for a malformed date."""
        return len(self.errors)

    @property
    def summary(self) -> str:
        """Get summary string."""
        return (
            f"Books: {len(self.books)}, "
            f"Authors: {len(self.authors)}, "
            f"Relations: {len(self.junctions)}, "
            f"Skipped: {self.skipped}"
        )


def run_pipeline(
    records: Iterable[RawRecord],
    first_row: int = 1,
    start_author_id: int = 0,
) -> PipelineResult:
    """Normalize and decompose raw records.

    Args:
        records: Raw records in source order
        first_row: Source row number of the first record, for reporting
        start_author_id: Id given to the first author of the pass

    Returns:
        PipelineResult with the three row collections and the report
    """
    result = PipelineResult()
    next_author_id = start_author_id

    for row, raw in enumerate(records, start=first_row):
        result.rows_read += 1

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", NumericCoercionWarning)
            try:
                book = normalize_record(raw)
            except DateFormatError as e:
                logger.warning("Skipping row %d: %s", row, e)
                result.errors.append(
                    RecordIssue(
                        row=row,
                        field=e.field,
                        value=e.value,
                        issue=e.reason,
                        action="skipped_record",
                    )
                )
                continue

        for w in caught:
            if isinstance(w.message, NumericCoercionWarning):
                result.warnings.append(
                    RecordIssue(
                        row=row,
                        field=w.message.field,
                        value=w.message.value,
                        issue="not_a_number",
                        action="set_to_null",
                    )
                )
            else:
                warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

        if not book.has_valid_key:
            logger.debug("Row %d has no usable isbn13 (%r); book row omitted", row, book.source_isbn13)
            result.excluded_books += 1

        part, next_author_id = decompose_record(book, next_author_id)
        result.extend(part)

    logger.info("Count of books read: %d", len(result.books))
    logger.info("Count of authors named: %d", len(result.authors))
    logger.info("Count of relations made: %d", len(result.junctions))
    return result


def process_file(
    source: Source,
    skip_header: bool = False,
    show_progress: bool = False,
) -> PipelineResult:
    """Read a CSV source and run it through the pipeline.

    Row numbers in the report count records from the top of the source,
    header and blank lines included.

    Raises:
        SourceReadError: if the source cannot be read
    """
    records = iter_records(source, skip_header=skip_header, show_progress=show_progress)
    return run_pipeline(records, first_row=2 if skip_header else 1)
