import gspread
from google.oauth2.service_account import Credentials

from ..config import get_settings

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
]


def _credentials():
    creds_path = get_settings().google_application_credentials
    return Credentials.from_service_account_file(creds_path, scopes=SCOPES)


def get_gspread_client():
    """Authorised gspread client; the scope is read-write because bookings are appended to the sheet"""
    credentials = _credentials()
    return gspread.authorize(credentials)
