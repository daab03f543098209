import pytest
from fastapi.testclient import TestClient

from conftest import TODAY, day
from hotel_booking.availability import BookingManager
from hotel_booking.config import Settings
from hotel_booking.main import app
from hotel_booking.models import Booking, Room
from hotel_booking.routes import build_booking_manager, get_booking_manager
from hotel_booking.stores.memory import InMemoryBookingStore, InMemoryRoomStore


def _q(d):
    return d.strftime("%Y/%m/%d")


@pytest.fixture
def memory_manager():
    rooms = [Room(id=1, description="Room A"), Room(id=2, description="Room B")]
    bookings = [
        Booking(id=1, room_id=1, start_date=day(10), end_date=day(20), is_active=True, customer_id=1),
        Booking(id=2, room_id=2, start_date=day(10), end_date=day(19), is_active=True, customer_id=2),
        Booking(id=3, room_id=2, start_date=day(40), end_date=day(41), is_active=False, customer_id=3),
    ]
    return BookingManager(InMemoryBookingStore(bookings), InMemoryRoomStore(rooms), today=lambda: TODAY)


@pytest.fixture
def client(memory_manager):
    app.dependency_overrides[get_booking_manager] = lambda: memory_manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_rooms(client):
    resp = client.get("/rooms")
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == [1, 2]


def test_list_bookings_active_only(client):
    assert len(client.get("/bookings").json()) == 3
    assert [b["id"] for b in client.get("/bookings", params={"active_only": "true"}).json()] == [1, 2]


def test_availability_room_free(client):
    resp = client.get("/availability", params={"start": _q(day(1)), "end": _q(day(2))})
    assert resp.status_code == 200
    assert resp.json() == {
        "start": day(1).isoformat(),
        "end": day(2).isoformat(),
        "room_id": 1,
        "available": True,
    }


def test_availability_no_room(client):
    resp = client.get("/availability", params={"start": _q(day(10)), "end": _q(day(10))})
    assert resp.status_code == 200
    assert resp.json()["room_id"] == -1
    assert resp.json()["available"] is False


def test_availability_start_today_is_bad_request(client):
    resp = client.get("/availability", params={"start": _q(TODAY), "end": _q(TODAY)})
    assert resp.status_code == 400


def test_availability_bad_date_format(client):
    resp = client.get("/availability", params={"start": "tomorrow", "end": _q(day(2))})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Dates must be YYYY/MM/DD"


def test_create_booking(client):
    resp = client.post("/bookings", json={"start": _q(day(1)), "end": _q(day(3)), "customer_id": 7})
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == 4
    assert body["room_id"] == 1
    assert body["is_active"] is True
    assert len(client.get("/bookings").json()) == 4


def test_create_booking_no_room_is_conflict(client):
    resp = client.post("/bookings", json={"start": _q(day(10)), "end": _q(day(20)), "customer_id": 7})
    assert resp.status_code == 409
    assert len(client.get("/bookings").json()) == 3


def test_create_booking_start_today_is_conflict(client):
    resp = client.post("/bookings", json={"start": _q(TODAY), "end": _q(day(1)), "customer_id": 7})
    assert resp.status_code == 409


def test_create_booking_reversed_range_is_bad_request(client):
    resp = client.post("/bookings", json={"start": _q(day(5)), "end": _q(day(1)), "customer_id": 7})
    assert resp.status_code == 400


def test_occupancy(client):
    resp = client.get("/occupancy", params={"start": _q(day(1)), "end": _q(day(30))})
    assert resp.status_code == 200
    assert resp.json()["dates"] == [day(i).isoformat() for i in range(10, 20)]


def test_occupancy_reversed_range_is_bad_request(client):
    resp = client.get("/occupancy", params={"start": _q(day(10)), "end": _q(day(5))})
    assert resp.status_code == 400


def test_occupancy_on_last_representable_day(client):
    resp = client.get("/occupancy", params={"start": "9999/12/31", "end": "9999/12/31"})
    assert resp.status_code == 200
    assert resp.json()["dates"] == []


def test_build_manager_memory_backend():
    manager = build_booking_manager(Settings(_env_file=None, storage_backend="memory", rooms={5: "Suite"}))
    assert isinstance(manager.room_store, InMemoryRoomStore)


def test_build_manager_unknown_backend():
    with pytest.raises(ValueError):
        build_booking_manager(Settings(_env_file=None, storage_backend="postgres"))


def test_build_manager_sheets_without_link():
    with pytest.raises(ValueError):
        build_booking_manager(Settings(_env_file=None, storage_backend="sheets", sheet_link=""))
