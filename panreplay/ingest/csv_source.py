"""
CSV adapter: reads an export file into the row mappings the normalizer takes.
"""

import csv
from pathlib import Path
from typing import Dict, Iterator, Union


def read_rows(path: Union[str, Path]) -> Iterator[Dict[str, str]]:
    """
    Yield one mapping per CSV data row.

    Trailing empty columns produced by a dangling comma are dropped, and
    header names are stripped of surrounding whitespace.

    Raises:
        FileNotFoundError: If path does not exist
    """
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
        for row in reader:
            row.pop(None, None)
            yield {k: (v if v is not None else "") for k, v in row.items() if k}
