import os
import re

import gspread
from google.oauth2.service_account import Credentials

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
]

_SPREADSHEET_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")


def _credentials():
    creds_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "api_key.json")
    return Credentials.from_service_account_file(creds_path, scopes=SCOPES)


def get_gspread_client():
    return gspread.authorize(_credentials())


def extract_spreadsheet_id(sheet_link: str) -> str:
    m = _SPREADSHEET_ID_RE.search(sheet_link or "")
    if not m:
        raise ValueError("Invalid Google Sheets link")
    return m.group(1)


def open_spreadsheet(sheet_link: str) -> gspread.Spreadsheet:
    client = get_gspread_client()
    return client.open_by_key(extract_spreadsheet_id(sheet_link))


def read_worksheet_rows(sheet_link: str, worksheet_title: str) -> list[list[str]]:
    """All cell values of one worksheet, as displayed strings."""
    ws = open_spreadsheet(sheet_link).worksheet(worksheet_title)
    rows = ws.get_all_values()
    print(f"[SHEETS] Read {len(rows)} rows from '{worksheet_title}'")
    return rows
