"""
Cycle normalizer: raw CSV rows -> sorted, de-duplicated cycle records.

Rows arrive as mappings from column name to string (CSV parsing happens
upstream). Duplicate detection uses structural equality of the parsed
record, so separators inside field values cannot make two different rows
collide.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Set, Tuple

from ..core.cycles import CycleRecord, TargetZone
from ..core.errors import NoDataError
from ..logging_config import get_logger

REQUIRED_COLUMNS = (
    "location_id",
    "start_timestamp",
    "stop_timestamp",
    "protein_name",
    "protein_pan",
    "duration",
    "is_long_cycle_error",
    "is_short_cycle_error",
    "is_missed_checkout_error",
    "tzi_target_zone",
    "breader_id",
)

_FALLBACK_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
)


@dataclass(frozen=True)
class Dataset:
    """
    Immutable result of one load.

    Fields:
        location_id: Location of the first row
        date: Start timestamp of the first row
        cycles: Cycle records sorted by start_timestamp
        duplicates_dropped: Rows collapsed as exact duplicates
        rows_rejected: Rows that could not be parsed
    """
    location_id: str
    date: datetime
    cycles: Tuple[CycleRecord, ...]
    duplicates_dropped: int = 0
    rows_rejected: int = 0


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp (a few legacy formats are also accepted).

    Aware timestamps are converted to naive UTC so every record compares
    on the same scale.

    Raises:
        ValueError: If the value is not a recognised timestamp
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty timestamp")
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        if parsed is None:
            raise ValueError(f"unrecognised timestamp: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("true", "1")


def parse_int(value: Optional[str]) -> int:
    """
    Parse an integer, truncating float strings ("312.0", "1e2").

    Raises:
        ValueError: If the value is not a finite number
    """
    text = (value or "").strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return int(number)


def parse_target_zone(value: Optional[str]) -> TargetZone:
    try:
        return TargetZone.parse(parse_int(value))
    except ValueError:
        return TargetZone.UNKNOWN


def _field(row: Mapping[str, str], name: str) -> str:
    val = row.get(name)
    return "" if val is None else str(val).strip()


def to_cycle_record(row: Mapping[str, str]) -> CycleRecord:
    """
    Convert one row to a CycleRecord.

    Raises:
        ValueError: If a timestamp, duration or the pan id is unusable
    """
    protein_pan = _field(row, "protein_pan")
    if not protein_pan:
        raise ValueError("missing protein_pan")
    return CycleRecord(
        protein_name=_field(row, "protein_name"),
        protein_pan=protein_pan,
        duration=parse_int(_field(row, "duration") or "0"),
        start_timestamp=parse_timestamp(_field(row, "start_timestamp")),
        stop_timestamp=parse_timestamp(_field(row, "stop_timestamp")),
        is_long_cycle_error=parse_bool(_field(row, "is_long_cycle_error")),
        is_short_cycle_error=parse_bool(_field(row, "is_short_cycle_error")),
        is_missed_checkout_error=parse_bool(_field(row, "is_missed_checkout_error")),
        tzi_target_zone=parse_target_zone(_field(row, "tzi_target_zone")),
        breader_id=_field(row, "breader_id"),
    )


def _is_blank(row: Mapping[str, str]) -> bool:
    return all(v is None or str(v).strip() == "" for v in row.values())


def normalize_rows(rows: Iterable[Mapping[str, str]]) -> Dataset:
    """
    De-duplicate, parse and sort raw rows.

    Args:
        rows: Row mappings keyed by column name

    Returns:
        Dataset with cycles sorted ascending by start_timestamp

    Raises:
        NoDataError: If required columns are missing or no usable row remains
    """
    logger = get_logger(__name__)

    seen: Set[Tuple[str, CycleRecord]] = set()
    records: List[CycleRecord] = []
    location_id: Optional[str] = None
    first_start: Optional[datetime] = None
    duplicates = 0
    rejected = 0
    checked_header = False

    for line_no, row in enumerate(rows, start=2):
        if not checked_header:
            missing = [c for c in REQUIRED_COLUMNS if c not in row]
            if missing:
                raise NoDataError(f"Missing required columns: {', '.join(missing)}")
            checked_header = True

        if _is_blank(row):
            continue

        try:
            record = to_cycle_record(row)
        except ValueError as e:
            rejected += 1
            logger.warning(f"Rejected row {line_no}: {e}")
            continue

        loc = _field(row, "location_id")
        key = (loc, record)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)

        if location_id is None:
            location_id = loc
            first_start = record.start_timestamp
        records.append(record)

    if not records:
        raise NoDataError("No data found: zero usable cycle records")

    records.sort(key=lambda r: r.start_timestamp)

    logger.info(
        f"Loaded {len(records)} cycle records "
        f"({duplicates} duplicates dropped, {rejected} rows rejected)"
    )
    return Dataset(
        location_id=location_id or "",
        date=first_start or records[0].start_timestamp,
        cycles=tuple(records),
        duplicates_dropped=duplicates,
        rows_rejected=rejected,
    )
