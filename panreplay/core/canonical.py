"""
Canonical serialization for snapshot hashing.

Two snapshots of the same reconstructed state must serialize to identical
bytes, whichever path (forward step, seek, rebuild) produced them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert nested snapshot data to canonical form.

    Rules:
    - dict keys sorted alphabetically
    - tuples converted to lists
    - datetimes rendered as ISO-8601 strings
    - enums replaced by their value
    - floats with an integral value collapsed to int
    """
    if isinstance(obj, dict):
        return {str(k): canonicalize(obj[k]) for k in sorted(obj.keys(), key=str)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return canonicalize(obj.value)
    if isinstance(obj, float) and obj.is_integer():
        return int(obj)
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")
