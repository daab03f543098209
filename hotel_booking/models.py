from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class Room(BaseModel):
    id: int
    description: str = ""


class Booking(BaseModel):
    id: Optional[int] = None
    room_id: Optional[int] = None
    start_date: date
    end_date: date
    customer_id: int
    is_active: bool = False

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class BookingRequest(BaseModel):
    start: str = Field(..., description="Start date YYYY/MM/DD (inclusive)")
    end: str = Field(..., description="End date YYYY/MM/DD (inclusive)")
    customer_id: int


class AvailabilityResult(BaseModel):
    start: date
    end: date
    room_id: int
    available: bool


class OccupancyResult(BaseModel):
    start: date
    end: date
    dates: List[date]
