from typing import List, Protocol

from ..models import Booking, Room


class RoomStore(Protocol):
    async def get_all(self) -> List[Room]:
        ...


class BookingStore(Protocol):
    async def get_all(self) -> List[Booking]:
        """Return every booking, inactive ones included."""
        ...

    async def add(self, booking: Booking) -> None:
        """Persist the booking and write the assigned id back onto it."""
        ...
