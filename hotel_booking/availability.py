import logging
from datetime import date, datetime, timedelta
from typing import Callable, List

from .models import Booking, Room
from .stores.base import BookingStore, RoomStore

logger = logging.getLogger(__name__)

NO_ROOM_AVAILABLE = -1

_DATE_FORMATS = ("%Y/%m/%d", "%Y-%m-%d")


class InvalidDateError(ValueError):
    """Raised when a requested date range is not acceptable."""


def parse_date(date_str: str) -> date:
    """Parse YYYY/MM/DD (or ISO YYYY-MM-DD) into a date"""
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(date_str.strip(), fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date {date_str!r}, expected YYYY/MM/DD")


def ranges_overlap(request_start: date, request_end: date, booking_start: date, booking_end: date) -> bool:
    # Both ranges are inclusive on both ends
    return booking_start <= request_end and booking_end >= request_start


def covers(booking: Booking, day: date) -> bool:
    return booking.start_date <= day <= booking.end_date


def is_free_for_range(room: Room, request_start: date, request_end: date, bookings: List[Booking]) -> bool:
    """Check that no active booking for the room overlaps the requested range"""
    for booking in bookings:
        if booking.room_id != room.id or not booking.is_active:
            continue
        if ranges_overlap(request_start, request_end, booking.start_date, booking.end_date):
            return False
    return True


class BookingManager:
    """
    Availability engine over a room store and a booking store.

    Holds no state of its own: every call fetches fresh snapshots from the
    stores and filters them in memory. ``today`` is read once per call so
    that validation stays consistent within an operation.
    """

    def __init__(self, booking_store: BookingStore, room_store: RoomStore,
                 today: Callable[[], date] = date.today):
        self.booking_store = booking_store
        self.room_store = room_store
        self.today = today

    async def find_available_room(self, start_date: date, end_date: date) -> int:
        """
        Return the id of the first room with no active booking overlapping
        [start_date, end_date], or NO_ROOM_AVAILABLE.

        Raises InvalidDateError if start_date is not after today.
        """
        today = self.today()
        if start_date <= today:
            raise InvalidDateError("The start date cannot be in the past or today")

        rooms = await self.room_store.get_all()
        bookings = await self.booking_store.get_all()

        for room in rooms:
            if is_free_for_range(room, start_date, end_date, bookings):
                logger.debug("[AVAILABILITY] Room %s free for %s..%s", room.id, start_date, end_date)
                return room.id

        logger.info("[AVAILABILITY] No room free for %s..%s (%d rooms checked)", start_date, end_date, len(rooms))
        return NO_ROOM_AVAILABLE

    async def create_booking(self, booking: Booking) -> bool:
        """
        Book the first free room for the booking's dates.

        Returns False when no room is free. A start date that is not in the
        future is also reported as False rather than raised.
        """
        try:
            room_id = await self.find_available_room(booking.start_date, booking.end_date)
        except InvalidDateError as e:
            logger.warning("[AVAILABILITY] Booking rejected for customer %s: %s", booking.customer_id, e)
            return False

        if room_id < 0:
            return False

        booking.room_id = room_id
        booking.is_active = True
        try:
            await self.booking_store.add(booking)
        except Exception:
            booking.room_id = None
            booking.is_active = False
            raise
        logger.info("[AVAILABILITY] Booking %s created: room %s, %s..%s",
                    booking.id, room_id, booking.start_date, booking.end_date)
        return True

    async def get_fully_occupied_dates(self, start_date: date, end_date: date) -> List[date]:
        """Return every day in [start_date, end_date] on which no room is free, ascending."""
        if start_date > end_date:
            raise InvalidDateError("The start date cannot be later than the end date")

        rooms = await self.room_store.get_all()
        bookings = [b for b in await self.booking_store.get_all() if b.is_active]
        room_ids = {room.id for room in rooms}
        room_count = len(room_ids)

        fully_occupied: List[date] = []
        for offset in range((end_date - start_date).days + 1):
            day = start_date + timedelta(days=offset)
            occupied_rooms = {b.room_id for b in bookings if b.room_id in room_ids and covers(b, day)}
            if len(occupied_rooms) >= room_count:
                fully_occupied.append(day)

        logger.debug("[AVAILABILITY] %d fully occupied dates in %s..%s", len(fully_occupied), start_date, end_date)
        return fully_occupied
