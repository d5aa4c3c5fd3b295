from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from .availability import (
    format_date,
    max_duration_from,
    next_sunday,
    parse_date,
    parse_duration,
    schedule_window,
)
from .config import ACTIVE_STATUSES, BOAT_CATALOG, MAX_BLOCK_DAYS, get_boat, get_schedule_days, get_sheet_link
from .grid import build_rows, filter_boats, group_by_boat
from .models import (
    AvailabilityQuery,
    AvailabilityResult,
    BlockPreview,
    Boat,
    CalendarCell,
    CalendarResult,
    CalendarRow,
    MaxDurationResult,
    ScheduleResult,
)
from .sheets.parsers import get_all_reservations, refresh_all, reservations_in_window
from .sheets.sampler import download_snapshot
from .status_calendar import build_status_map, clamp_block_days

router = APIRouter()


def _day_param(value: Optional[str], default: Optional[date] = None) -> Optional[date]:
    if not value:
        return default
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Dates must be YYYY-MM-DD")


def _days_param(days: int) -> int:
    if days < 1 or days > MAX_BLOCK_DAYS:
        raise HTTPException(status_code=400, detail=f"days must be between 1 and {MAX_BLOCK_DAYS}")
    return days


def _load_reservations():
    try:
        return get_all_reservations()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load reservations: {e}")


def _catalog_boats() -> List[Boat]:
    boats = [Boat(**get_boat(boat_id)) for boat_id in BOAT_CATALOG]
    boats = [b for b in boats if b.active]
    # Stable order
    boats.sort(key=lambda b: b.name.lower())
    return boats


def build_availability(query: AvailabilityQuery) -> AvailabilityResult:
    window_days = get_schedule_days()
    request_start = _day_param(query.request_start)
    # the grid opens on the requested day unless a window start is given
    schedule_start = _day_param(query.start, request_start or next_sunday())
    schedule_start, schedule_end = schedule_window(schedule_start, window_days)
    duration_days = parse_duration(query.duration)

    reservations = reservations_in_window(_load_reservations(), schedule_start, window_days, ACTIVE_STATUSES)
    by_boat = group_by_boat(reservations)
    boats = filter_boats(
        _catalog_boats(),
        by_boat,
        schedule_start,
        schedule_end,
        duration_days,
        request_start=request_start,
        selected_ids=query.boats,
        window_days=window_days,
    )
    print(f"[ROUTES] {len(boats)} boats match {duration_days} day(s) from {format_date(schedule_start)}")
    rows = build_rows(boats, by_boat, schedule_start, duration_days, request_start or schedule_start, window_days)
    return AvailabilityResult(
        start=schedule_start,
        end=schedule_end,
        duration_days=duration_days,
        request_start=request_start,
        boats=rows,
    )


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/refresh")
async def refresh():
    refresh_all()
    return {"status": "refreshed"}


@router.post("/snapshot")
async def snapshot(label: str = Query("reservations", description="Folder name under data/samples")):
    sheet_link = get_sheet_link()
    if not sheet_link:
        raise HTTPException(status_code=400, detail="No sheet link configured")
    try:
        saved = download_snapshot(sheet_link, label)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to snapshot: {e}")
    return {"saved": saved}


@router.get("/boats", response_model=List[Boat])
async def list_boats():
    return _catalog_boats()


@router.get("/schedule", response_model=ScheduleResult)
async def schedule(
    start: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to next Sunday"),
    days: int = Query(14, description="Number of days"),
):
    first = _day_param(start, next_sunday())
    days = _days_param(days)
    reservations = reservations_in_window(_load_reservations(), first, days, ACTIVE_STATUSES)
    print(f"[ROUTES] Schedule {format_date(first)} +{days}d: {len(reservations)} reservations")
    return ScheduleResult(start=first, end=first + timedelta(days=days - 1), days=days, reservations=reservations)


@router.get("/availability", response_model=AvailabilityResult)
async def availability(
    start: Optional[str] = Query(None, description="First visible day YYYY-MM-DD"),
    request_start: Optional[str] = Query(None, description="Requested start day YYYY-MM-DD"),
    duration: Optional[str] = Query(None, description="Requested number of days"),
    boat: List[str] = Query([], description="Boat ids to show; all when empty"),
):
    query = AvailabilityQuery(start=start, request_start=request_start, duration=duration, boats=boat)
    return build_availability(query)


@router.post("/availability", response_model=AvailabilityResult)
async def availability_post(body: AvailabilityQuery):
    print(f"[API] POST /availability called with start={body.start}, request_start={body.request_start}, duration={body.duration}")
    return build_availability(body)


@router.get("/availability/max-duration", response_model=MaxDurationResult)
async def max_duration(
    boat: str = Query(..., description="Boat id"),
    day: str = Query(..., description="Clicked day YYYY-MM-DD"),
    duration: Optional[str] = Query(None, description="Desired number of days"),
    start: Optional[str] = Query(None, description="First visible day YYYY-MM-DD"),
):
    if not get_boat(boat):
        raise HTTPException(status_code=404, detail="Boat not found")
    clicked = _day_param(day)
    window_days = get_schedule_days()
    schedule_start, schedule_end = schedule_window(_day_param(start, next_sunday()), window_days)
    desired = parse_duration(duration)

    ranges = [r for r in reservations_in_window(_load_reservations(), schedule_start, window_days, ACTIVE_STATUSES) if r.boat_id == boat]
    adjusted = max_duration_from(ranges, clicked, desired, schedule_start, schedule_end)
    return MaxDurationResult(
        boat_id=boat,
        start=clicked,
        requested_days=desired,
        duration_days=adjusted,
        end_exclusive=clicked + timedelta(days=adjusted),
    )


@router.get("/calendar", response_model=CalendarResult)
async def calendar(
    start: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to next Sunday"),
    days: Optional[str] = Query(None, description="Number of days, 1-60"),
):
    first = _day_param(start, next_sunday())
    n_days = parse_duration(days or "14", MAX_BLOCK_DAYS)
    day_list = [first + timedelta(days=i) for i in range(n_days)]
    reservations = reservations_in_window(_load_reservations(), first, n_days)
    cells = build_status_map(reservations, day_list)

    rows = []
    for boat_id, info in BOAT_CATALOG.items():
        row_cells = []
        for d in day_list:
            r = cells.get((boat_id, d))
            row_cells.append(CalendarCell(day=d, status=r.status if r else None, reservation_id=r.id if r else None))
        rows.append(CalendarRow(boat_id=boat_id, boat_name=info["name"], cells=row_cells))
    return CalendarResult(start=first, days=n_days, rows=rows)


@router.get("/calendar/block-preview", response_model=BlockPreview)
async def block_preview(
    boat: str = Query(..., description="Boat id"),
    day: str = Query(..., description="First blocked day YYYY-MM-DD"),
    days: Optional[str] = Query(None, description="How many days to block"),
):
    if not get_boat(boat):
        raise HTTPException(status_code=404, detail="Boat not found")
    first = _day_param(day)
    n_days = clamp_block_days(days)
    conflicts = [r for r in reservations_in_window(_load_reservations(), first, n_days, ACTIVE_STATUSES) if r.boat_id == boat]
    return BlockPreview(boat_id=boat, start=first, days=n_days, end_exclusive=first + timedelta(days=n_days), conflicts=conflicts)
