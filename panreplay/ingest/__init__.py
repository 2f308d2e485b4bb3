"""
Dataset ingestion.

- normalize_rows: de-duplicate, parse and sort raw cycle rows
- read_rows: CSV export -> row mappings
"""

from .normalize import Dataset, REQUIRED_COLUMNS, normalize_rows, parse_timestamp, to_cycle_record
from .csv_source import read_rows

__all__ = [
    "Dataset",
    "REQUIRED_COLUMNS",
    "normalize_rows",
    "parse_timestamp",
    "to_cycle_record",
    "read_rows",
]
