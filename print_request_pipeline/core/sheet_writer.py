"""
Google Sheets writer for analyzed emails.

Each run overwrites the target range with a header row plus one row
per email. Nothing is appended or merged with earlier runs.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from pydantic import BaseModel

from ..errors import ConfigurationError
from .models import EmailRecord

logger = logging.getLogger(__name__)

Row = Union[BaseModel, Mapping[str, Any]]


def _as_dict(record: Row) -> Dict[str, Any]:
    if isinstance(record, EmailRecord):
        return record.to_row_dict()
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True)
    return dict(record)


def build_grid(records: Sequence[Row]) -> List[List[Any]]:
    """
    Flatten records into a header row plus one row per record.

    Columns follow the first record's keys; None or missing values become "".
    """
    if not records:
        return []

    rows = [_as_dict(record) for record in records]
    headers = list(rows[0].keys())
    values: List[List[Any]] = [headers]
    for row in rows:
        values.append([
            "" if row.get(key) is None else row.get(key)
            for key in headers
        ])
    return values


class SheetWriter:
    """Overwrites a fixed range of a Google Sheet with email rows."""

    SCOPES = ['https://www.googleapis.com/auth/spreadsheets']

    def __init__(
        self,
        spreadsheet_id: Optional[str],
        credentials_file: Optional[str] = None,
        range_name: str = "Sheet1!A1",
        scopes: Optional[List[str]] = None,
        service: Any = None
    ):
        """
        Initialize Sheets writer.

        Args:
            spreadsheet_id: Target spreadsheet ID
            credentials_file: Service account key file
            range_name: Range overwritten on each write
            scopes: OAuth scopes for the service account (default: SCOPES)
            service: Pre-built Sheets service (skips credential loading)

        Raises:
            ConfigurationError: if the spreadsheet ID or credentials file is missing
        """
        if not spreadsheet_id:
            raise ConfigurationError("SPREADSHEET_ID is not defined, please define it and try again")

        self.spreadsheet_id = spreadsheet_id
        self.range_name = range_name
        self.scopes = list(scopes) if scopes else list(self.SCOPES)
        self.service = service if service is not None else self._build_service(credentials_file)

    def _build_service(self, credentials_file: Optional[str]):
        """Build authenticated Sheets API service."""
        if not credentials_file or not Path(credentials_file).exists():
            raise ConfigurationError(f"credentials file not found at: {credentials_file}")

        credentials = service_account.Credentials.from_service_account_file(
            credentials_file,
            scopes=self.scopes
        )

        service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)
        logger.info("Sheets client initialized")
        return service

    def write(self, records: Sequence[Row]) -> None:
        """
        Overwrite the target range with ``records``.

        Empty input is a no-op. API errors are logged, not raised.
        """
        if not records:
            logger.warning("No emails to write.")
            return

        values = build_grid(records)

        try:
            response = self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=self.range_name,
                valueInputOption="RAW",
                body={"values": values}
            ).execute()
            logger.info(
                f"Wrote {len(values) - 1} rows to {self.range_name} "
                f"({response.get('updatedCells', 0)} cells updated)"
            )
        except HttpError as e:
            logger.error(f"Sheets API error updating {self.range_name}: {e}")
        except Exception as e:
            logger.error(f"Error updating sheet: {e}")
