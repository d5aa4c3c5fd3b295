import re
from datetime import date, datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Tuple

DateRange = Tuple[date, date]  # (start, end), end exclusive

MAX_REQUEST_DAYS = 30
DEFAULT_WINDOW_DAYS = 14

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")

# leading integer, as typed into a duration box: "3 days" -> 3, "7.5" -> 7
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_date(date_str: str) -> date:
    text = (date_str or "").strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized date: {date_str!r}")


def format_date(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def as_day(value) -> date:
    """Calendar date for a date, datetime (time-of-day dropped) or date string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise TypeError(f"Not a calendar date: {value!r}")


def to_range(entry) -> Optional[DateRange]:
    """Canonical (start, end_exclusive) for one reservation entry.

    Accepts (start, end) / (start,) sequences, mappings keyed by start/end or
    startDate/endExclusive, and anything exposing ``as_range()``. A missing end
    is the legacy single-day form. Returns None for ranges covering no days.
    """
    if hasattr(entry, "as_range"):
        return entry.as_range()
    if isinstance(entry, (str, date)):
        start, end = entry, None
    elif isinstance(entry, Mapping):
        start = entry.get("start", entry.get("startDate"))
        end = entry.get("end", entry.get("endExclusive"))
    else:
        items = tuple(entry)
        start = items[0]
        end = items[1] if len(items) > 1 else None

    start_day = as_day(start)
    end_day = start_day + timedelta(days=1) if end is None else as_day(end)
    if end_day <= start_day:
        return None
    return start_day, end_day


def normalize_ranges(entries: Iterable) -> List[DateRange]:
    ranges: List[DateRange] = []
    for entry in entries or []:
        r = to_range(entry)
        if r is not None:
            ranges.append(r)
    return ranges


def ranges_overlap(request_start: date, request_end: date, booking_start: date, booking_end: date) -> bool:
    return not (request_end <= booking_start or request_start >= booking_end)


def _booked(occupied: List[DateRange], day: date) -> bool:
    return any(start <= day < end for start, end in occupied)


def is_booked(ranges: Iterable, day) -> bool:
    """True if ``day`` falls inside any reserved range."""
    return _booked(normalize_ranges(ranges), as_day(day))


def window_fits(ranges: Iterable, start_day, duration_days: int, schedule_start, schedule_end) -> bool:
    """Check that ``duration_days`` consecutive days from ``start_day`` are free.

    Multi-day blocks must also lie inside the visible schedule window
    (both bounds inclusive). A single day is checked on its own, wherever it is.
    """
    occupied = normalize_ranges(ranges)
    first = as_day(start_day)
    if duration_days <= 1:
        return not _booked(occupied, first)

    lo, hi = as_day(schedule_start), as_day(schedule_end)
    for k in range(duration_days):
        day = first + timedelta(days=k)
        if day < lo or day > hi:
            return False
        if _booked(occupied, day):
            return False
    return True


def clamp_duration(value: int, upper: int = MAX_REQUEST_DAYS) -> int:
    return max(1, min(value, upper))


def parse_duration(raw, upper: int = MAX_REQUEST_DAYS) -> int:
    """Duration from user input: leading positive integer clamped to ``upper``, anything else 1."""
    m = _LEADING_INT_RE.match("" if raw is None else str(raw))
    if not m:
        return 1
    n = int(m.group(1))
    return clamp_duration(n, upper) if n > 0 else 1


def max_duration_from(ranges: Iterable, start_day, desired_days: int, schedule_start, schedule_end) -> int:
    """Longest free run starting at ``start_day``, capped at ``desired_days``.

    Used to shrink a request to what actually fits after a cell is clicked.
    The result is never below 1, even when ``start_day`` itself is booked or
    outside the window: callers always get a usable one-day request.
    """
    occupied = normalize_ranges(ranges)
    first = as_day(start_day)
    lo, hi = as_day(schedule_start), as_day(schedule_end)
    limit = clamp_duration(desired_days)

    actual = 0
    for k in range(limit):
        day = first + timedelta(days=k)
        if day < lo or day > hi:
            break
        if _booked(occupied, day):
            break
        actual += 1

    return max(1, actual)


def has_any_available_window(
    ranges: Iterable,
    schedule_start,
    duration_days: int,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> bool:
    """True if some block of ``duration_days`` free days fits inside the window."""
    if duration_days <= 1:
        return True
    occupied = normalize_ranges(ranges)
    first = as_day(schedule_start)
    # blocks running past the last window day never fit
    for offset in range(window_days - duration_days + 1):
        block = (first + timedelta(days=offset + k) for k in range(duration_days))
        if not any(_booked(occupied, day) for day in block):
            return True
    return False


def schedule_window(start, days: int = DEFAULT_WINDOW_DAYS) -> Tuple[date, date]:
    """(first, last) visible days, both inclusive."""
    first = as_day(start)
    return first, first + timedelta(days=max(1, days) - 1)


def schedule_days(start, days: int = DEFAULT_WINDOW_DAYS) -> List[date]:
    first = as_day(start)
    return [first + timedelta(days=i) for i in range(max(1, days))]


def next_sunday(ref=None) -> date:
    """First Sunday strictly after ``ref`` (today by default)."""
    today = as_day(ref) if ref is not None else date.today()
    delta = (6 - today.weekday()) % 7
    return today + timedelta(days=delta or 7)


def shift_window(start, direction: int, days: int = DEFAULT_WINDOW_DAYS) -> date:
    return as_day(start) + timedelta(days=direction * days)
