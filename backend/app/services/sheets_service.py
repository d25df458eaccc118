"""
FitLog Backend - Google Sheets Service
========================================

What:  Appends rows to, and reads rows from, tabs of a single spreadsheet.
How:   Google API discovery client (sheets v4) authorized with a service
       account key file, or Application Default Credentials when no file
       is configured.
Who:   Called by LogService for /submit, /analyze-image, /data and
       /seed-schedule.

Range Convention:
    Every tab is treated as a table spanning columns A:Z. Appends land on
    the first empty row after the table; reads return the whole range.

Session Model:
    A fresh authorized client is built for every call. Calls are blocking
    and are made from FastAPI's worker threads, so no client object is
    shared between threads.
"""

import logging
from typing import Any, List, Optional, Sequence

import google.auth
from google.oauth2 import service_account
from googleapiclient.discovery import build

from app.exceptions import SheetsServiceError

logger = logging.getLogger(__name__)

DEFAULT_SHEET = "Logs"
SHEET_COLUMNS = "A:Z"

# Sheets parses the values as if typed into the UI ("5.2" → number, "=SUM(...)" → formula)
VALUE_INPUT_OPTION = "USER_ENTERED"


def sheet_range(sheet: str) -> str:
    """A1 range covering the whole table of a tab, e.g. 'Logs!A:Z'."""
    return f"{sheet or DEFAULT_SHEET}!{SHEET_COLUMNS}"


class SheetsService:
    """
    Thin wrapper over the Sheets `spreadsheets.values` API.

    Both operations raise SheetsServiceError chained to the underlying
    google-auth / googleapiclient exception; its message is kept in
    `detail` for logging.
    """

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

    def __init__(self, spreadsheet_id: str, credentials_file: Optional[str] = None):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_file = credentials_file or ""

    def _build_service(self):
        """Create an authorized Sheets API service object."""
        try:
            if self.credentials_file:
                creds = service_account.Credentials.from_service_account_file(
                    self.credentials_file, scopes=self.SCOPES
                )
            else:
                creds, _ = google.auth.default(scopes=self.SCOPES)
            return build("sheets", "v4", credentials=creds, cache_discovery=False)
        except Exception as e:
            logger.error("Failed to build sheets service: %s", e)
            raise SheetsServiceError(
                message="Could not authenticate with Google Sheets",
                detail=f"auth error: {e}",
                context={"credentials_file": self.credentials_file},
            ) from e

    def append_row(self, sheet: str, values: Sequence[str]) -> None:
        """
        Append one row at the end of `sheet`'s A:Z table.

        Args:
            sheet:  Tab name. Empty means "Logs".
            values: Cell values in column order, sent unchanged.
        """
        range_name = sheet_range(sheet)
        service = self._build_service()
        body = {"values": [list(values)]}
        try:
            (
                service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self.spreadsheet_id,
                    range=range_name,
                    valueInputOption=VALUE_INPUT_OPTION,
                    body=body,
                )
                .execute()
            )
        except Exception as e:
            raise SheetsServiceError(
                message="Failed to append row",
                detail=str(e),
                context={"range": range_name},
            ) from e

        logger.debug("Appended %d cells to %s", len(body["values"][0]), range_name)

    def read_rows(self, sheet: str) -> List[List[Any]]:
        """
        Return every row of `sheet`'s A:Z range.

        Rows are returned as the API sends them: trailing empty cells are
        omitted, so rows can differ in length. A tab with no values yields [].
        """
        range_name = sheet_range(sheet)
        service = self._build_service()
        try:
            result = (
                service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=range_name)
                .execute()
            )
        except Exception as e:
            raise SheetsServiceError(
                message="Failed to read range",
                detail=str(e),
                context={"range": range_name},
            ) from e

        return result.get("values", [])
