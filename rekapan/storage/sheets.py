"""
Google Sheets Manager
Handles authentication and value operations for the shared spreadsheet
"""

import os
import json
import base64
import binascii
import logging
from typing import Any, Dict, List, Optional, Sequence

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)

from rekapan.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

def load_service_account_info(key_data: str) -> Dict[str, Any]:
    """
    Decode an inline service account key

    Args:
        key_data: Key JSON, either raw or base64 encoded

    Returns:
        Parsed service account info

    Raises:
        ConfigurationError: If the key is neither valid JSON nor base64 JSON
    """
    data = (key_data or '').strip()
    if not data.startswith('{'):
        try:
            data = base64.b64decode(data, validate=True).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError):
            logger.info("Service account key is not base64 encoded, using as is")

    try:
        info = json.loads(data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid GOOGLE_SERVICE_ACCOUNT_KEY: {e}")

    logger.info("Google Service Account parsed successfully")
    return info

class GoogleSheetsManager:
    """
    Manages Google Sheets value operations with service account authentication
    """

    # OAuth2 scopes for Google Sheets
    SCOPES = ['https://www.googleapis.com/auth/spreadsheets']

    # Rows are written as if typed by a user so dates and numbers keep their sheet formatting
    VALUE_INPUT_OPTION = 'USER_ENTERED'

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        service_account_key: Optional[str] = None,
        credentials_path: Optional[str] = None,
        service: Any = None
    ):
        """
        Initialize Google Sheets manager

        Args:
            spreadsheet_id: Spreadsheet ID
            service_account_key: Inline service account JSON (raw or base64)
            credentials_path: Path to service account JSON file
            service: Pre-built Sheets service (skips authentication)
        """
        self.spreadsheet_id = spreadsheet_id or os.getenv('SHEET_ID')
        self.service_account_key = service_account_key or os.getenv('GOOGLE_SERVICE_ACCOUNT_KEY')
        self.credentials_path = credentials_path or os.getenv('GOOGLE_CREDENTIALS_PATH')

        if not self.spreadsheet_id:
            raise ConfigurationError("Spreadsheet ID is required")

        self.credentials = None
        self.service = service
        if self.service is None:
            self._initialize_service()

        logger.info("GoogleSheetsManager initialized")

    def _load_credentials(self):
        if self.service_account_key:
            info = load_service_account_info(self.service_account_key)
            return service_account.Credentials.from_service_account_info(info, scopes=self.SCOPES)

        if self.credentials_path:
            if not os.path.exists(self.credentials_path):
                raise FileNotFoundError(f"Credentials file not found: {self.credentials_path}")
            return service_account.Credentials.from_service_account_file(
                self.credentials_path,
                scopes=self.SCOPES
            )

        raise ConfigurationError("Service account key or credentials path is required")

    def _initialize_service(self):
        """
        Initialize Google Sheets service with service account
        """
        try:
            self.credentials = self._load_credentials()
            self.service = build('sheets', 'v4', credentials=self.credentials, cache_discovery=False)
            logger.info("Google Sheets service initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Google Sheets service: {e}")
            raise

    @property
    def _values(self):
        return self.service.spreadsheets().values()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(HttpError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def get_values(self, range_name: str) -> List[List[str]]:
        """
        Read all values of a range or worksheet

        Args:
            range_name: A1 range or worksheet name

        Returns:
            Rows as lists of cell strings (empty list for an empty sheet)
        """
        try:
            result = self._values.get(
                spreadsheetId=self.spreadsheet_id,
                range=range_name
            ).execute()
        except HttpError as e:
            logger.error(f"Error getting {range_name}: {e}")
            raise

        return result.get('values', [])

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(HttpError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def append_row(self, sheet_name: str, row: Sequence[Any]) -> Dict[str, Any]:
        """
        Append one row after the last row of a worksheet

        Args:
            sheet_name: Worksheet name
            row: Cell values

        Returns:
            API response
        """
        try:
            result = self._values.append(
                spreadsheetId=self.spreadsheet_id,
                range=sheet_name,
                valueInputOption=self.VALUE_INPUT_OPTION,
                body={'values': [list(row)]}
            ).execute()
        except HttpError as e:
            logger.error(f"Error appending to {sheet_name}: {e}")
            raise

        return result

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(HttpError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def update_values(self, sheet_name: str, a1_range: str, rows: Sequence[Sequence[Any]]) -> Dict[str, Any]:
        """
        Overwrite a range of a worksheet

        Args:
            sheet_name: Worksheet name
            a1_range: Range inside the worksheet, e.g. "A2:R2"
            rows: Row values
        """
        try:
            return self._values.update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{sheet_name}!{a1_range}",
                valueInputOption=self.VALUE_INPUT_OPTION,
                body={'values': [list(r) for r in rows]}
            ).execute()
        except HttpError as e:
            logger.error(f"Error updating {sheet_name}: {e}")
            raise
