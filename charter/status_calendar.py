"""Operator status calendar: which reservation shows in each boat/day cell."""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from .availability import as_day, parse_duration, ranges_overlap
from .config import MAX_BLOCK_DAYS
from .models import Reservation

_STATUS_PRIORITY = {
    "BLOCKED": 50,
    "APPROVED": 40,
    "PENDING": 30,
    "DENIED": 20,
    "CANCELLED": 10,
}


def status_priority(status: str) -> int:
    return _STATUS_PRIORITY.get(str(status or "").upper(), 0)


def overlaps_day(start, end, day) -> bool:
    """True if ``[start, end)`` touches ``day``. A missing end means the start day only."""
    s = as_day(start)
    e = as_day(end) if end is not None else s + timedelta(days=1)
    d = as_day(day)
    return ranges_overlap(s, e, d, d + timedelta(days=1))


def build_status_map(
    reservations: Iterable[Reservation], days: List[date]
) -> Dict[Tuple[str, date], Reservation]:
    cells: Dict[Tuple[str, date], Reservation] = {}
    for r in reservations:
        for day in days:
            if not overlaps_day(r.start_date, r.end_exclusive, day):
                continue
            key = (r.boat_id, day)
            current = cells.get(key)
            if current is None or status_priority(r.status) > status_priority(current.status):
                cells[key] = r
    return cells


def clamp_block_days(raw: Optional[str]) -> int:
    """Operator block length; anything unreadable or below 1 blocks one day."""
    return parse_duration(raw, MAX_BLOCK_DAYS)
