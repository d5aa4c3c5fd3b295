from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from .availability import (
    DEFAULT_WINDOW_DAYS,
    has_any_available_window,
    is_booked,
    normalize_ranges,
    schedule_days,
    window_fits,
)
from .models import Boat, BoatRow, DayCell, Reservation


def group_by_boat(reservations: Iterable[Reservation]) -> Dict[str, List[Reservation]]:
    by_boat: Dict[str, List[Reservation]] = {}
    for r in reservations:
        by_boat.setdefault(r.boat_id, []).append(r)
    return by_boat


def filter_boats(
    boats: List[Boat],
    by_boat: Dict[str, List[Reservation]],
    schedule_start: date,
    schedule_end: date,
    duration_days: int,
    request_start: Optional[date] = None,
    selected_ids: Optional[Iterable[str]] = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List[Boat]:
    """Boats that can take the request.

    With a requested start day the boat must be open that day and the whole
    duration must fit from it. Without one, any fitting start in the window
    is enough.
    """
    selected = set(selected_ids or [])
    base = [b for b in boats if b.id in selected] if selected else list(boats)

    kept: List[Boat] = []
    for boat in base:
        ranges = normalize_ranges(by_boat.get(boat.id, []))
        if request_start is not None:
            if is_booked(ranges, request_start):
                continue
            if window_fits(ranges, request_start, duration_days, schedule_start, schedule_end):
                kept.append(boat)
        elif has_any_available_window(ranges, schedule_start, duration_days, window_days):
            kept.append(boat)
    return kept


def build_rows(
    boats: List[Boat],
    by_boat: Dict[str, List[Reservation]],
    schedule_start: date,
    duration_days: int,
    selected_start: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List[BoatRow]:
    days = schedule_days(schedule_start, window_days)
    schedule_end = days[-1]
    selected_end = selected_start + timedelta(days=duration_days)

    rows: List[BoatRow] = []
    for boat in boats:
        ranges = normalize_ranges(by_boat.get(boat.id, []))
        cells = []
        for d in days:
            booked = is_booked(ranges, d)
            fits = not booked and window_fits(ranges, d, duration_days, schedule_start, schedule_end)
            cells.append(DayCell(day=d, booked=booked, fits=fits, in_selection=selected_start <= d < selected_end))
        rows.append(BoatRow(boat=boat, cells=cells))
    return rows
