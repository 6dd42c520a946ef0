"""
Period resolution and Indonesian long-date handling

Stored records carry their creation date as an Indonesian long date
("Senin, 5 Mei 2025"). Reports filter them by a daily, weekly or monthly
window anchored on today or on an explicit D/M/YYYY date.
"""

import re
import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Optional, Union
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'Asia/Jakarta'

# Monday first, matching date.weekday()
DAY_NAMES = ('Senin', 'Selasa', 'Rabu', 'Kamis', 'Jumat', 'Sabtu', 'Minggu')

MONTH_NAMES = (
    'Januari', 'Februari', 'Maret', 'April', 'Mei', 'Juni',
    'Juli', 'Agustus', 'September', 'Oktober', 'November', 'Desember'
)

MONTH_NUMBERS = MappingProxyType({name.lower(): i for i, name in enumerate(MONTH_NAMES, start=1)})

EXPLICIT_DATE_PATTERN = re.compile(r'(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})')
LONG_DATE_PATTERN = re.compile(r'(\d{1,2})\s+([A-Za-z]+)\s+(\d{4})')


class Period(str, Enum):
    """
    Reporting periods
    """
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALL = "all"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'Period':
        """Map a user-supplied keyword to a period, unknown keywords mean ALL."""
        try:
            return cls((value or '').strip().lower())
        except ValueError:
            return cls.ALL


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-day window, 00:00:00 on start through 23:59:59 on end."""
    start: datetime
    end: datetime

    @classmethod
    def between(cls, first_day: date, last_day: date) -> 'DateWindow':
        return cls(
            start=datetime.combine(first_day, time(0, 0, 0)),
            end=datetime.combine(last_day, time(23, 59, 59))
        )

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, day: Union[date, datetime]) -> bool:
        if isinstance(day, datetime):
            moment = day.replace(tzinfo=None)
        else:
            moment = datetime.combine(day, time(0, 0, 0))
        return self.start <= moment <= self.end


def now_in(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def today_in(tz_name: str = DEFAULT_TIMEZONE) -> date:
    return now_in(tz_name).date()


def format_long_date(day: Union[date, datetime]) -> str:
    """
    Format a date the way records store it

    Args:
        day: Date (or datetime already in the home timezone)

    Returns:
        Long date such as "Senin, 5 Mei 2025"
    """
    return f"{DAY_NAMES[day.weekday()]}, {day.day} {MONTH_NAMES[day.month - 1]} {day.year}"


def format_timestamp(moment: datetime) -> str:
    """Report footer timestamp, e.g. 05/05/2025 14.30.00"""
    return moment.strftime('%d/%m/%Y %H.%M.%S')


def parse_long_date(text: Optional[str]) -> Optional[date]:
    """
    Parse a stored long date back into a calendar date

    The day-of-week name is ignored. Month names must come from the
    Indonesian month table.

    Args:
        text: Stored date string

    Returns:
        Parsed date, or None when the text is not a long date
    """
    if not text:
        return None

    match = LONG_DATE_PATTERN.search(text)
    if not match:
        return None

    month = MONTH_NUMBERS.get(match.group(2).lower())
    if not month:
        return None

    try:
        return date(int(match.group(3)), month, int(match.group(1)))
    except ValueError:
        return None


def parse_explicit_date(text: Optional[str]) -> Optional[date]:
    """
    Parse a D/M/YYYY or D-M-YYYY date typed by a user

    Returns:
        Parsed date, or None for malformed or impossible dates
    """
    if not text:
        return None

    match = EXPLICIT_DATE_PATTERN.search(text)
    if not match:
        return None

    try:
        return date(int(match.group(3)), int(match.group(2)), int(match.group(1)))
    except ValueError:
        return None


def resolve_period(
    period: Union[Period, str],
    explicit_date: Optional[str] = None,
    today: Optional[date] = None,
    tz_name: str = DEFAULT_TIMEZONE
) -> Optional[DateWindow]:
    """
    Convert a period keyword into a concrete date window

    Args:
        period: daily, weekly or monthly
        explicit_date: Optional D/M/YYYY anchor date
        today: Anchor used when no explicit date is given (default: today in tz_name)
        tz_name: Home timezone

    Returns:
        DateWindow, or None when the period is ALL or explicit_date is malformed
    """
    if not isinstance(period, Period):
        period = Period.parse(period)

    if period == Period.ALL:
        return None

    if explicit_date:
        anchor = parse_explicit_date(explicit_date)
        if anchor is None:
            logger.debug(f"Unresolved window for malformed date: {explicit_date!r}")
            return None
    else:
        anchor = today or today_in(tz_name)

    if period == Period.DAILY:
        return DateWindow.between(anchor, anchor)

    if period == Period.WEEKLY:
        # Sunday belongs to the week that started six days earlier
        monday = anchor - timedelta(days=anchor.weekday())
        return DateWindow.between(monday, monday + timedelta(days=6))

    last_day = calendar.monthrange(anchor.year, anchor.month)[1]
    return DateWindow.between(anchor.replace(day=1), anchor.replace(day=last_day))
