"""ETL module for normalizing flat book exports.

This module handles extraction of raw CSV records, transformation to typed
book records, decomposition into books/authors/junction rows, and loading
into the database.
"""

from .extract import (
    iter_records,
    read_records,
    RawRecord,
    SourceReadError,
)
from .transform import (
    clean_isbn,
    split_authors,
    parse_int,
    parse_decimal,
    parse_published_date,
    normalize_record,
    Column,
    DateFormatError,
    NumericCoercionWarning,
)
from .decompose import (
    decompose_record,
    decompose_records,
    Decomposition,
    Tables,
)
from .pipeline import (
    run_pipeline,
    process_file,
    PipelineResult,
)
from .load import (
    load_tables,
    import_file,
    LoadError,
    LoadResult,
)

__all__ = [
    # Extract
    "iter_records",
    "read_records",
    "RawRecord",
    "SourceReadError",
    # Transform
    "clean_isbn",
    "split_authors",
    "parse_int",
    "parse_decimal",
    "parse_published_date",
    "normalize_record",
    "Column",
    "DateFormatError",
    "NumericCoercionWarning",
    # Decompose
    "decompose_record",
    "decompose_records",
    "Decomposition",
    "Tables",
    # Pipeline
    "run_pipeline",
    "process_file",
    "PipelineResult",
    # Load
    "load_tables",
    "import_file",
    "LoadError",
    "LoadResult",
]
