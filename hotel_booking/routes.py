import logging
from datetime import date
from functools import lru_cache
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from .availability import NO_ROOM_AVAILABLE, BookingManager, InvalidDateError, parse_date
from .config import Settings, get_settings
from .models import AvailabilityResult, Booking, BookingRequest, OccupancyResult, Room
from .stores.memory import InMemoryBookingStore, InMemoryRoomStore
from .stores.sheets import open_sheet_stores

logger = logging.getLogger(__name__)

router = APIRouter()


def build_booking_manager(settings: Settings) -> BookingManager:
    backend = settings.storage_backend.lower()
    if backend == "memory":
        rooms = [Room(id=room_id, description=desc) for room_id, desc in settings.rooms.items()]
        return BookingManager(InMemoryBookingStore(), InMemoryRoomStore(rooms))
    if backend == "sheets":
        room_store, booking_store = open_sheet_stores(
            settings.sheet_link, settings.rooms_worksheet, settings.bookings_worksheet
        )
        return BookingManager(booking_store, room_store)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


@lru_cache()
def get_booking_manager() -> BookingManager:
    return build_booking_manager(get_settings())


def _parse_query_date(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Dates must be YYYY/MM/DD")


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/rooms", response_model=List[Room])
async def list_rooms(manager: BookingManager = Depends(get_booking_manager)):
    return await manager.room_store.get_all()


@router.get("/bookings", response_model=List[Booking])
async def list_bookings(
    active_only: bool = Query(False, description="Only return active bookings"),
    manager: BookingManager = Depends(get_booking_manager),
):
    bookings = await manager.booking_store.get_all()
    if active_only:
        bookings = [b for b in bookings if b.is_active]
    return bookings


@router.get("/availability", response_model=AvailabilityResult)
async def availability(
    start: str = Query(..., description="YYYY/MM/DD"),
    end: str = Query(..., description="YYYY/MM/DD"),
    manager: BookingManager = Depends(get_booking_manager),
):
    start_date = _parse_query_date(start)
    end_date = _parse_query_date(end)
    try:
        room_id = await manager.find_available_room(start_date, end_date)
    except InvalidDateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("[ROUTES] Availability %s..%s -> room %s", start_date, end_date, room_id)
    return AvailabilityResult(
        start=start_date,
        end=end_date,
        room_id=room_id,
        available=room_id != NO_ROOM_AVAILABLE,
    )


@router.post("/bookings", response_model=Booking, status_code=201)
async def create_booking(body: BookingRequest, manager: BookingManager = Depends(get_booking_manager)):
    start_date = _parse_query_date(body.start)
    end_date = _parse_query_date(body.end)
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="The start date cannot be later than the end date")

    booking = Booking(start_date=start_date, end_date=end_date, customer_id=body.customer_id)
    if not await manager.create_booking(booking):
        raise HTTPException(status_code=409, detail="No room available for the requested dates")
    logger.info("[ROUTES] Created booking %s for customer %s", booking.id, booking.customer_id)
    return booking


@router.get("/occupancy", response_model=OccupancyResult)
async def occupancy(
    start: str = Query(..., description="YYYY/MM/DD"),
    end: str = Query(..., description="YYYY/MM/DD"),
    manager: BookingManager = Depends(get_booking_manager),
):
    start_date = _parse_query_date(start)
    end_date = _parse_query_date(end)
    try:
        dates = await manager.get_fully_occupied_dates(start_date, end_date)
    except InvalidDateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("[ROUTES] %d fully occupied dates in %s..%s", len(dates), start_date, end_date)
    return OccupancyResult(start=start_date, end=end_date, dates=dates)
