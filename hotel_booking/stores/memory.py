from typing import Iterable, List, Optional

from ..models import Booking, Room


class InMemoryRoomStore:
    def __init__(self, rooms: Iterable[Room] = ()):
        self._rooms: List[Room] = list(rooms)

    async def get_all(self) -> List[Room]:
        return list(self._rooms)


class InMemoryBookingStore:
    def __init__(self, bookings: Optional[Iterable[Booking]] = None):
        self._bookings: List[Booking] = list(bookings or [])

    def _next_id(self) -> int:
        return max((b.id or 0 for b in self._bookings), default=0) + 1

    async def get_all(self) -> List[Booking]:
        return [b.model_copy() for b in self._bookings]

    async def add(self, booking: Booking) -> None:
        booking.id = self._next_id()
        self._bookings.append(booking.model_copy())
