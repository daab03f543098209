from functools import lru_cache
from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict

# Default room catalog used by the in-memory backend.
# Structure:
# {
#   room_id: "Description",
# }

ROOM_CATALOG: Dict[int, str] = {
    1: "Room A",
    2: "Room B",
    3: "Room C",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Hotel Booking Availability"
    log_level: str = "INFO"

    # "memory" or "sheets"
    storage_backend: str = "memory"

    # Google Sheets backend
    sheet_link: str = ""
    rooms_worksheet: str = "Rooms"
    bookings_worksheet: str = "Bookings"
    google_application_credentials: str = "api_key.json"

    rooms: Dict[int, str] = dict(ROOM_CATALOG)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
