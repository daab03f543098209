from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from hotel_booking.availability import BookingManager
from hotel_booking.models import Booking, Room

TODAY = date(2030, 6, 1)


def day(offset: int) -> date:
    return TODAY + timedelta(days=offset)


@pytest.fixture
def rooms():
    return [Room(id=1, description="Room A"), Room(id=2, description="Room B")]


@pytest.fixture
def bookings():
    # Room 1 is booked +10..+20, room 2 is booked +10..+19
    return [
        Booking(id=1, room_id=1, start_date=day(10), end_date=day(20), is_active=True, customer_id=1),
        Booking(id=2, room_id=2, start_date=day(10), end_date=day(19), is_active=True, customer_id=2),
    ]


@pytest.fixture
def room_store(rooms):
    store = AsyncMock()
    store.get_all.return_value = rooms
    return store


@pytest.fixture
def booking_store(bookings):
    store = AsyncMock()
    store.get_all.return_value = bookings
    return store


@pytest.fixture
def manager(booking_store, room_store):
    return BookingManager(booking_store, room_store, today=lambda: TODAY)
