"""
Simulation clock.

Maps timeline positions (seconds since window start) to wall-clock time.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class SimulationClock:
    """
    Deterministic time source for one loaded timeline.

    Fields:
        window_start: Wall time of timeline position 0
    """
    window_start: datetime

    def at(self, second: float) -> datetime:
        return self.window_start + timedelta(seconds=second)

    def offset(self, when: datetime) -> float:
        """Seconds between window start and `when` (may be negative)."""
        return (when - self.window_start).total_seconds()

    def bucket(self, when: datetime) -> int:
        """Whole-second bucket of `when`, rounding half up."""
        return int(math.floor(self.offset(when) + 0.5))


def format_countdown(deadline: datetime, now: datetime, cap_seconds: int = 20 * 60) -> str:
    """
    Render time left until `deadline` as MM:SS.

    The value is capped at `cap_seconds`; past deadlines render with a
    leading minus sign (e.g. "-01:05").
    """
    total = min(math.floor((deadline - now).total_seconds()), cap_seconds)
    sign = "-" if total < 0 else ""
    minutes, seconds = divmod(abs(total), 60)
    return f"{sign}{minutes:02d}:{seconds:02d}"


def clamp_second(second: float, last_second: int) -> int:
    """
    Floor `second` into [0, last_second].

    NaN and -inf map to 0, +inf to last_second.
    """
    if math.isnan(second):
        return 0
    if math.isinf(second):
        return last_second if second > 0 else 0
    return max(0, min(int(second // 1), last_second))
