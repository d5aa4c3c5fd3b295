import os
from typing import Dict, List, Optional

# Hard-coded catalog of boats
# Structure:
# {
#   "boat-id": {
#       "name": str,
#       "type": str | None,
#       "capacity": int | None,
#       "number_of_beds": int | None,
#       "location": str | None,
#       "boat_link": str | None,
#       "active": bool,
#   },
# }

BOAT_CATALOG: Dict[str, dict] = {
    "sea-breeze": {
        "name": "Sea Breeze",
        "type": "Sailboat",
        "capacity": 8,
        "number_of_beds": 4,
        "location": "North Marina, Dock A",
        "description": "38ft sloop for day sails and weekend trips.",
        "boat_link": "https://charters.example.com/boats/sea-breeze",
        "active": True,
    },
    "blue-horizon": {
        "name": "Blue Horizon",
        "type": "Motor Yacht",
        "capacity": 12,
        "number_of_beds": 6,
        "location": "North Marina, Dock C",
        "description": "Flybridge cruiser with full galley.",
        "boat_link": "https://charters.example.com/boats/blue-horizon",
        "active": True,
    },
    "island-hopper": {
        "name": "Island Hopper",
        "type": "Catamaran",
        "capacity": 10,
        "number_of_beds": 8,
        "location": "South Harbor",
        "description": "Shallow-draft catamaran for reef and island runs.",
        "boat_link": "https://charters.example.com/boats/island-hopper",
        "active": True,
    },
    "gull": {
        "name": "Gull",
        "type": "Center Console",
        "capacity": 6,
        "number_of_beds": None,
        "location": "South Harbor",
        "description": "Fishing boat, day charters only.",
        "boat_link": None,
        "active": True,
    },
    "old-salt": {
        "name": "Old Salt",
        "type": "Trawler",
        "capacity": 6,
        "number_of_beds": 4,
        "location": "Dry dock",
        "description": "Out of service for refit.",
        "boat_link": None,
        "active": False,
    },
}

# Demo bookings: (id, boat id, offset from the default schedule start, days or None, status)
# None days is the legacy single-day form: the booking covers only its start day.
DEMO_BOOKINGS: List[tuple] = [
    ("demo-1", "sea-breeze", 1, 2, "APPROVED"),
    ("demo-2", "sea-breeze", 6, None, "APPROVED"),
    ("demo-3", "blue-horizon", 0, 4, "APPROVED"),
    ("demo-4", "blue-horizon", 9, 3, "PENDING"),
    ("demo-5", "island-hopper", 3, None, "APPROVED"),
    ("demo-6", "island-hopper", 4, None, "APPROVED"),
    ("demo-7", "island-hopper", 10, 2, "BLOCKED"),
    ("demo-8", "gull", 2, 1, "DENIED"),
]

MAX_BLOCK_DAYS = 60

# Statuses that occupy a boat's calendar for visitors
ACTIVE_STATUSES = {"PENDING", "APPROVED", "BLOCKED"}

SOURCES = ("demo", "sheets", "snapshot")


def get_schedule_days() -> int:
    try:
        return max(1, int(os.getenv("SCHEDULE_DAYS", "14")))
    except ValueError:
        return 14


def get_reservations_source() -> str:
    source = os.getenv("RESERVATIONS_SOURCE", "demo").strip().lower()
    if source not in SOURCES:
        raise ValueError(f"Unknown RESERVATIONS_SOURCE: {source}")
    return source


def get_sheet_link() -> str:
    return os.getenv("RESERVATIONS_SHEET_LINK", "").strip()


def get_worksheet_title() -> str:
    return os.getenv("RESERVATIONS_WORKSHEET", "RESERVATIONS")


def get_snapshot_path() -> str:
    return os.getenv("RESERVATIONS_SNAPSHOT", os.path.join("data", "reservations.xlsx"))


def get_boat(boat_id: str) -> Optional[dict]:
    boat = BOAT_CATALOG.get(boat_id)
    return dict(boat, id=boat_id) if boat else None