from pathlib import Path
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .availability import format_date, schedule_days, shift_window
from .config import get_schedule_days
from .models import AvailabilityQuery
from .routes import build_availability, router as api_router

BASE_DIR = Path(__file__).resolve().parent

app = FastAPI(title="Boat Charter Scheduler")

# Mount static files
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")

# Templates
templates = Jinja2Templates(directory=BASE_DIR / "templates")


def page_query(start, duration_days: int, request_start=None, boats: Optional[List[str]] = None) -> str:
    """Query string for another grid page, keeping the visitor's request and boat selection."""
    params = [("start", format_date(start)), ("duration", str(duration_days))]
    if request_start:
        params.append(("request_start", format_date(request_start)))
    params.extend(("boat", b) for b in boats or [])
    return urlencode(params)


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    start: Optional[str] = Query(None),
    request_start: Optional[str] = Query(None),
    duration: Optional[str] = Query(None),
    boat: List[str] = Query([]),
):
    result = build_availability(
        AvailabilityQuery(start=start, request_start=request_start, duration=duration, boats=boat)
    )
    window_days = get_schedule_days()
    prev_start = shift_window(result.start, -1, window_days)
    next_start = shift_window(result.start, 1, window_days)
    return templates.TemplateResponse(request, "index.html", {
        "result": result,
        "days": schedule_days(result.start, window_days),
        "prev_query": page_query(prev_start, result.duration_days, result.request_start, boat),
        "next_query": page_query(next_start, result.duration_days, result.request_start, boat),
        "format_date": format_date,
    })


# API routes
app.include_router(api_router, prefix="/api")
