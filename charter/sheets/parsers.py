from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from ..availability import as_day, next_sunday, parse_date, ranges_overlap, to_range
from ..config import (
    DEMO_BOOKINGS,
    get_reservations_source,
    get_sheet_link,
    get_snapshot_path,
    get_worksheet_title,
)
from ..models import Reservation
from .client import read_worksheet_rows

# Header aliases -> canonical column names
_COLUMN_ALIASES = {
    "id": "id",
    "reservation_id": "id",
    "boat_id": "boat_id",
    "boatid": "boat_id",
    "boat": "boat_id",
    "start_date": "start_date",
    "startdate": "start_date",
    "start": "start_date",
    "end_exclusive": "end_exclusive",
    "endexclusive": "end_exclusive",
    "end": "end_exclusive",
    "status": "status",
    "notes": "notes",
    "note": "notes",
}

Loader = Callable[[], List[Reservation]]

# Global cache for sheet and snapshot sources, cleared by refresh_all()
_reservation_cache: Dict[str, List[Reservation]] = {}


def _header_index(header: List[str]) -> Dict[str, int]:
    index: Dict[str, int] = {}
    for i, label in enumerate(header):
        key = _COLUMN_ALIASES.get((label or "").strip().lower().replace(" ", "_"))
        if key and key not in index:
            index[key] = i
    return index


def _cell(row: List[str], index: Dict[str, int], column: str) -> str:
    i = index.get(column)
    if i is None or i >= len(row):
        return ""
    return (row[i] or "").strip()


def rows_to_reservations(rows: List[List[str]]) -> List[Reservation]:
    """Parse a header row plus data rows into reservations.

    Blank rows and rows with unreadable dates are skipped. A blank end date
    keeps the single-day meaning.
    """
    if not rows:
        return []
    index = _header_index(rows[0])
    if "boat_id" not in index or "start_date" not in index:
        print(f"[PARSER] Header is missing boat_id/start_date columns: {rows[0]}")
        return []

    reservations: List[Reservation] = []
    for n, row in enumerate(rows[1:], start=2):
        if not any((c or "").strip() for c in row):
            continue
        boat_id = _cell(row, index, "boat_id")
        if not boat_id:
            print(f"[PARSER] Skipping row {n}: no boat")
            continue
        try:
            start = parse_date(_cell(row, index, "start_date"))
            end_text = _cell(row, index, "end_exclusive")
            end = parse_date(end_text) if end_text else None
        except ValueError as e:
            print(f"[PARSER] Skipping row {n}: {e}")
            continue
        reservations.append(Reservation(
            id=_cell(row, index, "id") or f"row-{n}",
            boat_id=boat_id,
            start_date=start,
            end_exclusive=end,
            status=(_cell(row, index, "status") or "APPROVED").upper(),
            notes=_cell(row, index, "notes") or None,
        ))
    return reservations


def parse_reservations_from_sheets() -> List[Reservation]:
    sheet_link = get_sheet_link()
    if not sheet_link:
        raise ValueError("RESERVATIONS_SHEET_LINK is not set")
    rows = read_worksheet_rows(sheet_link, get_worksheet_title())
    return rows_to_reservations(rows)


def parse_reservations_from_snapshot() -> List[Reservation]:
    from .sampler import load_snapshot_rows

    return rows_to_reservations(load_snapshot_rows(get_snapshot_path(), get_worksheet_title()))


def demo_reservations(anchor: Optional[date] = None) -> List[Reservation]:
    """Demo fixture laid out around the default schedule start."""
    base = as_day(anchor) if anchor is not None else next_sunday()
    reservations = []
    for res_id, boat_id, offset, days, status in DEMO_BOOKINGS:
        start = base + timedelta(days=offset)
        end = start + timedelta(days=days) if days else None
        reservations.append(Reservation(id=res_id, boat_id=boat_id, start_date=start, end_exclusive=end, status=status))
    return reservations


_LOADERS: Dict[str, Loader] = {
    "demo": demo_reservations,
    "sheets": parse_reservations_from_sheets,
    "snapshot": parse_reservations_from_snapshot,
}


def get_all_reservations() -> List[Reservation]:
    source = get_reservations_source()
    if source == "demo":
        # laid out around the current default window, so never cached
        return _LOADERS[source]()
    if source not in _reservation_cache:
        print(f"[PARSER] Loading reservations from source: {source}")
        _reservation_cache[source] = _LOADERS[source]()
        print(f"[PARSER] Loaded {len(_reservation_cache[source])} reservations")
    return _reservation_cache[source]


def refresh_all():
    _reservation_cache.clear()
    print("[PARSER] Reservation cache cleared")
    return True


def reservations_in_window(
    reservations: List[Reservation], start: date, days: int, statuses: Optional[set] = None
) -> List[Reservation]:
    window_end = start + timedelta(days=days)
    found = []
    for r in reservations:
        if statuses is not None and r.status.upper() not in statuses:
            continue
        rng = to_range(r)
        if rng and ranges_overlap(start, window_end, rng[0], rng[1]):
            found.append(r)
    return found
