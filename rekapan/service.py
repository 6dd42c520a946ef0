"""
Activation service

Business flows behind each bot command: submitting an activation,
personal statistics and export, and the admin reports.
"""

import os
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from rekapan.exceptions import (
    AccessDeniedError,
    EmptySubmissionError,
    MissingUsernameError
)
from rekapan.export import render_csv, render_pdf
from rekapan.extraction import FieldExtractor
from rekapan.models import SHEET_HEADERS, ActivationRecord, RosterEntry, normalize_identity
from rekapan.reporting import formatter
from rekapan.reporting.aggregator import aggregate
from rekapan.reporting.periods import (
    DEFAULT_TIMEZONE,
    DateWindow,
    Period,
    format_long_date,
    now_in,
    resolve_period
)
from rekapan.storage import ActivationRepository, RosterRepository

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('pdf', 'csv')


@dataclass
class ExportFile:
    path: str
    filename: str
    row_count: int


class ActivationService:
    """
    Composes extraction, storage and reporting for the bot commands
    """

    def __init__(
        self,
        records: ActivationRepository,
        roster: RosterRepository,
        extractor: Optional[FieldExtractor] = None,
        tz_name: str = DEFAULT_TIMEZONE,
        export_dir: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the service

        Args:
            records: Activation record repository
            roster: Roster repository
            extractor: Field extractor (default: standard profile)
            tz_name: Home timezone
            export_dir: Directory for generated export files
            clock: Returns the current time (default: now in tz_name)
        """
        self.records = records
        self.roster = roster
        self.tz_name = tz_name
        self.clock = clock or (lambda: now_in(self.tz_name))
        self.extractor = extractor or FieldExtractor(tz_name=tz_name, clock=self.clock)
        self.export_dir = export_dir or os.getcwd()

    # =========================================================================
    # ACCESS
    # =========================================================================

    def require_member(self, username: str) -> RosterEntry:
        entry = self.roster.get_entry(username)
        if entry is None:
            raise AccessDeniedError(
                f"@{username} is not an active roster member",
                identity=username,
                user_message='❌ Anda tidak terdaftar sebagai user aktif.'
            )
        return entry

    def require_admin(self, username: str) -> RosterEntry:
        entry = self.roster.get_entry(username)
        if entry is None or not entry.is_admin:
            raise AccessDeniedError(
                f"@{username} is not an admin",
                identity=username,
                user_message='❌ Hanya admin yang bisa menggunakan command ini.'
            )
        return entry

    def is_admin(self, username: str) -> bool:
        return bool(username) and self.roster.is_admin(username)

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    def submit_activation(self, body: str, username: str) -> ActivationRecord:
        """
        Extract, validate and store an activation report

        Args:
            body: Message text after the /aktivasi command
            username: Sender's Telegram username

        Returns:
            The stored record

        Raises:
            MissingUsernameError: Sender has no username
            AccessDeniedError: Sender is not an active roster member
            EmptySubmissionError: No data after the command
            MissingBusinessKeyError: No AO could be extracted
            DuplicateRecordError: AO already stored
        """
        if not username:
            raise MissingUsernameError(
                "Sender has no Telegram username",
                user_message=(
                    '❌ Anda harus memiliki username Telegram.\n'
                    'Silakan atur username di pengaturan Telegram Anda.'
                )
            )

        entry = self.roster.get_entry(username)
        if entry is None:
            raise AccessDeniedError(
                f"@{username} is not in the roster",
                identity=username,
                user_message=f"❌ @{username} tidak terdaftar di MASTER sheet.\nSilakan hubungi admin."
            )

        body = (body or '').strip()
        if not body:
            raise EmptySubmissionError(
                "Empty activation submission",
                user_message='Silakan kirim data aktivasi setelah /aktivasi'
            )

        record = self.extractor.extract(body, username, roster_entry=entry, now=self.clock())
        return self.records.add(record)

    # =========================================================================
    # PERSONAL
    # =========================================================================

    def _member_identity(self, entry: RosterEntry, username: str) -> str:
        return normalize_identity(entry.handle or username)

    def user_statistics(self, username: str) -> str:
        """Statistics message for the sender's own activations"""
        entry = self.require_member(username)
        result = aggregate(self.records.list_records(), identity_filter=self._member_identity(entry, username))
        return formatter.build_user_statistics(entry.handle or username, result, self.clock())

    def user_records(self, username: str) -> Tuple[str, List[ActivationRecord]]:
        entry = self.require_member(username)
        identity = self._member_identity(entry, username)
        result = aggregate(self.records.list_records(), identity_filter=identity)
        return identity, result.records

    def export_user_records(self, username: str, fmt: str = 'pdf') -> Optional[ExportFile]:
        """
        Write the sender's activations to a PDF or CSV file

        Returns:
            ExportFile, or None when the sender has no activations
        """
        fmt = fmt if fmt in EXPORT_FORMATS else 'pdf'
        identity, records = self.user_records(username)
        if not records:
            return None

        rows = [r.to_row() for r in records]
        now = self.clock()
        filename = f"aktivasi_{identity}_{now.strftime('%Y-%m-%d')}.{fmt}"
        path = os.path.join(self.export_dir, filename)

        try:
            if fmt == 'csv':
                with open(path, 'w', encoding='utf-8', newline='') as f:
                    f.write(render_csv(SHEET_HEADERS, rows))
            else:
                render_pdf(SHEET_HEADERS, rows, path, generated_at=now)
        except Exception:
            logger.error(f"Export for @{identity} failed, removing {path}")
            if os.path.exists(path):
                os.remove(path)
            raise

        logger.info(f"Exported {len(rows)} records for @{identity} to {path}")
        return ExportFile(path=path, filename=filename, row_count=len(rows))

    # =========================================================================
    # ADMIN REPORTS
    # =========================================================================

    def resolve_window(self, period: Period, explicit_date: Optional[str] = None) -> Tuple[Optional[DateWindow], bool]:
        """
        Resolve a report window, degrading to the current period on a bad date

        Returns:
            (window, used_explicit_date); window is None for Period.ALL
        """
        today = self.clock().date()
        window = resolve_period(period, explicit_date, today=today, tz_name=self.tz_name)

        if window is None and explicit_date and period != Period.ALL:
            logger.warning(f"Malformed date {explicit_date!r}, falling back to the current {period.value} period")
            return resolve_period(period, today=today, tz_name=self.tz_name), False

        return window, bool(explicit_date) and window is not None

    def daily_report(self, username: str, explicit_date: Optional[str] = None) -> str:
        self.require_admin(username)

        window, explicit = self.resolve_window(Period.DAILY, explicit_date)
        result = aggregate(self.records.list_records(), window=window)
        label = explicit_date if explicit else format_long_date(self.clock())
        return formatter.build_daily_report(label, result, self.clock())

    def technician_ranking(
        self,
        username: Optional[str],
        period_arg: Optional[str] = None,
        explicit_date: Optional[str] = None,
        check_access: bool = True
    ) -> str:
        if check_access:
            self.require_admin(username)

        period = Period.parse(period_arg)
        window, explicit = self.resolve_window(period, explicit_date)
        result = aggregate(self.records.list_records(), window=window)
        return formatter.build_technician_ranking(
            period,
            result,
            self.clock(),
            custom_date=explicit_date if explicit else None
        )

    def overall_summary(self, username: str) -> str:
        self.require_admin(username)
        result = aggregate(self.records.list_records())
        return formatter.build_overall_summary(result, self.clock())

    def help_text(self, username: str) -> str:
        return formatter.build_help(self.is_admin(username))
