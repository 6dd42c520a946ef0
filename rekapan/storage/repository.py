"""
Sheet-backed repositories for activation records and the technician roster
"""

import logging
from typing import List, Optional

from rekapan.exceptions import DuplicateRecordError, MissingBusinessKeyError
from rekapan.models import (
    SHEET_HEADERS,
    ActivationRecord,
    RosterEntry,
    normalize_identity,
    normalize_key
)
from rekapan.storage.sheets import GoogleSheetsManager

logger = logging.getLogger(__name__)


def _column_letter(index: int) -> str:
    letters = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


class ActivationRepository:
    """
    Activation records stored one per row in the REKAPAN worksheet

    The duplicate check and the append are two separate API calls, so AO
    uniqueness only holds while a single bot instance writes to the sheet.
    """

    def __init__(self, sheets: GoogleSheetsManager, sheet_name: str = 'REKAPAN QUALITY'):
        self.sheets = sheets
        self.sheet_name = sheet_name

    def list_rows(self) -> List[List[str]]:
        """Data rows without the header row."""
        return self.sheets.get_values(self.sheet_name)[1:]

    def list_records(self) -> List[ActivationRecord]:
        return [ActivationRecord.from_row(row) for row in self.list_rows()]

    def find_by_ao(self, ao: str) -> Optional[ActivationRecord]:
        """Find a stored record by AO, trimmed and case-insensitive"""
        key = normalize_key(ao)
        if not key:
            return None

        for record in self.list_records():
            if record.business_key == key:
                return record
        return None

    def add(self, record: ActivationRecord) -> ActivationRecord:
        """
        Validate and append a record

        Raises:
            MissingBusinessKeyError: If AO is empty
            DuplicateRecordError: If the AO already exists; nothing is written
        """
        if not record.business_key:
            raise MissingBusinessKeyError(
                "AO is empty",
                user_message='❌ Field AO wajib diisi.'
            )

        if self.find_by_ao(record.ao) is not None:
            logger.info(f"Rejected duplicate AO {record.ao}")
            raise DuplicateRecordError(
                f"AO {record.ao} already exists",
                ao=record.ao,
                user_message='❌ Data duplikat. AO sudah diinput sebelumnya.'
            )

        self.sheets.append_row(self.sheet_name, record.to_row())
        logger.info(f"Appended AO {record.ao} for {record.teknisi} to {self.sheet_name}")
        return record

    def ensure_header(self) -> bool:
        """
        Write the column header into row 1 if the worksheet is empty

        Returns:
            True if the header was written
        """
        if self.sheets.get_values(self.sheet_name):
            return False

        last_column = _column_letter(len(SHEET_HEADERS) - 1)
        self.sheets.update_values(self.sheet_name, f"A1:{last_column}1", [SHEET_HEADERS])
        logger.info(f"Wrote header row to {self.sheet_name}")
        return True


class RosterRepository:
    """
    Registered technicians and admins from the MASTER worksheet
    """

    def __init__(self, sheets: GoogleSheetsManager, sheet_name: str = 'MASTER'):
        self.sheets = sheets
        self.sheet_name = sheet_name

    def get_entry(self, identity: str) -> Optional[RosterEntry]:
        """
        Look up an active roster entry

        Args:
            identity: Telegram username, with or without '@'

        Returns:
            The first active entry with a matching handle, or None
        """
        wanted = normalize_identity(identity)
        if not wanted:
            return None

        rows = self.sheets.get_values(self.sheet_name)
        logger.debug(f"Roster check for @{wanted} against {max(len(rows) - 1, 0)} users")

        for row in rows[1:]:
            entry = RosterEntry.from_row(row)
            if entry.identity == wanted and entry.is_active:
                logger.debug(f"@{wanted} found and active")
                return entry

        logger.info(f"@{wanted} not found or not active in {self.sheet_name}")
        return None

    def is_admin(self, identity: str) -> bool:
        entry = self.get_entry(identity)
        return bool(entry and entry.is_admin)
