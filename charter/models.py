from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .availability import DateRange, to_range


class Boat(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    capacity: Optional[int] = None
    number_of_beds: Optional[int] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    active: bool = True
    boat_link: Optional[str] = None


class Reservation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    boat_id: str = Field(..., alias="boatId")
    start_date: date = Field(..., alias="startDate")
    end_exclusive: Optional[date] = Field(None, alias="endExclusive", description="Omitted for a single day")
    status: str = "APPROVED"
    notes: Optional[str] = None

    def as_range(self) -> Optional[DateRange]:
        return to_range((self.start_date, self.end_exclusive))


class ScheduleResult(BaseModel):
    start: date
    end: date
    days: int
    reservations: List[Reservation]


class AvailabilityQuery(BaseModel):
    start: Optional[str] = Field(None, description="First visible day YYYY-MM-DD, defaults to next Sunday")
    request_start: Optional[str] = Field(None, description="Requested start day YYYY-MM-DD")
    duration: Optional[str] = Field(None, description="Requested number of days")
    boats: List[str] = Field(default_factory=list, description="Restrict to these boat ids")


class DayCell(BaseModel):
    day: date
    booked: bool
    fits: bool
    in_selection: bool


class BoatRow(BaseModel):
    boat: Boat
    cells: List[DayCell]


class AvailabilityResult(BaseModel):
    start: date
    end: date
    duration_days: int
    request_start: Optional[date] = None
    boats: List[BoatRow]


class MaxDurationResult(BaseModel):
    boat_id: str
    start: date
    requested_days: int
    duration_days: int
    end_exclusive: date


class CalendarCell(BaseModel):
    day: date
    status: Optional[str] = None
    reservation_id: Optional[str] = None


class CalendarRow(BaseModel):
    boat_id: str
    boat_name: str
    cells: List[CalendarCell]


class CalendarResult(BaseModel):
    start: date
    days: int
    rows: List[CalendarRow]


class BlockPreview(BaseModel):
    boat_id: str
    start: date
    days: int
    end_exclusive: date
    conflicts: List[Reservation]
