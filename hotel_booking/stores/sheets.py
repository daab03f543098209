import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from ..models import Booking, Room
from .client import get_gspread_client

logger = logging.getLogger(__name__)

_SPREADSHEET_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")

ROOM_COLUMNS = ["id", "description"]
BOOKING_COLUMNS = ["id", "room_id", "start_date", "end_date", "customer_id", "is_active"]

_TRUE_VALUES = {"TRUE", "1", "YES", "Y"}


def extract_spreadsheet_id(sheet_link: str) -> str:
    m = _SPREADSHEET_ID_RE.search(sheet_link)
    if not m:
        raise ValueError("Invalid Google Sheets link")
    return m.group(1)


def _data_rows(rows: List[List[str]]) -> List[Tuple[int, List[str]]]:
    """Skip the header row and blank rows, keeping the 1-based sheet row number"""
    result = []
    for i, row in enumerate(rows[1:], start=2):
        cells = [(c or "").strip() for c in row]
        if not any(cells):
            continue
        result.append((i, cells))
    return result


def _cell(cells: List[str], idx: int) -> str:
    return cells[idx] if idx < len(cells) else ""


def parse_room_row(row_number: int, cells: List[str]) -> Room:
    try:
        return Room(id=int(_cell(cells, 0)), description=_cell(cells, 1))
    except ValueError as e:
        raise ValueError(f"Malformed room row {row_number}: {cells}") from e


def parse_booking_row(row_number: int, cells: List[str]) -> Booking:
    try:
        room_id = _cell(cells, 1)
        return Booking(
            id=int(_cell(cells, 0)),
            room_id=int(room_id) if room_id else None,
            start_date=date.fromisoformat(_cell(cells, 2)),
            end_date=date.fromisoformat(_cell(cells, 3)),
            customer_id=int(_cell(cells, 4)),
            is_active=_cell(cells, 5).upper() in _TRUE_VALUES,
        )
    except ValueError as e:
        raise ValueError(f"Malformed booking row {row_number}: {cells}") from e


def booking_to_row(booking: Booking) -> List[str]:
    return [
        str(booking.id),
        str(booking.room_id) if booking.room_id is not None else "",
        booking.start_date.isoformat(),
        booking.end_date.isoformat(),
        str(booking.customer_id),
        "TRUE" if booking.is_active else "FALSE",
    ]


class SheetsRoomStore:
    """Rooms read from a worksheet with columns: id, description"""

    def __init__(self, worksheet):
        self.worksheet = worksheet

    def _read(self) -> List[Room]:
        rows = self.worksheet.get_all_values()
        return [parse_room_row(n, cells) for n, cells in _data_rows(rows)]

    async def get_all(self) -> List[Room]:
        return await run_in_threadpool(self._read)


class SheetsBookingStore:
    """Bookings kept in a worksheet with columns: id, room_id, start_date, end_date, customer_id, is_active"""

    def __init__(self, worksheet):
        self.worksheet = worksheet

    def _read(self) -> List[Booking]:
        rows = self.worksheet.get_all_values()
        return [parse_booking_row(n, cells) for n, cells in _data_rows(rows)]

    def _append(self, booking: Booking) -> None:
        existing = self._read()
        booking.id = max((b.id or 0 for b in existing), default=0) + 1
        # RAW keeps ISO dates as text so they read back unchanged
        self.worksheet.append_row(booking_to_row(booking), value_input_option="RAW")
        logger.info("[SHEETS] Appended booking %s to %s", booking.id, self.worksheet.title)

    async def get_all(self) -> List[Booking]:
        return await run_in_threadpool(self._read)

    async def add(self, booking: Booking) -> None:
        await run_in_threadpool(self._append, booking)


def open_sheet_stores(sheet_link: str, rooms_worksheet: str, bookings_worksheet: str,
                      client: Optional[object] = None) -> Tuple[SheetsRoomStore, SheetsBookingStore]:
    if not sheet_link:
        raise ValueError("sheet_link is required for the sheets storage backend")
    gc = client or get_gspread_client()
    sh = gc.open_by_key(extract_spreadsheet_id(sheet_link))
    logger.info("[SHEETS] Opened spreadsheet %s", sh.id)
    return SheetsRoomStore(sh.worksheet(rooms_worksheet)), SheetsBookingStore(sh.worksheet(bookings_worksheet))
