"""
Field extractor for activation messages

Converts a free-text block of `LABEL : value` lines into an
ActivationRecord, inferring the ONT serial number, SC order number, AO
and workorder when their labels are missing.
"""

import re
import logging
from dataclasses import fields
from datetime import datetime
from typing import Callable, Optional, Union

from rekapan.models import ActivationRecord, RosterEntry, normalize_identity
from rekapan.reporting.periods import DEFAULT_TIMEZONE, format_long_date, now_in
from rekapan.extraction.profiles import DATE_FIELD, STANDARD, ExtractionProfile, get_profile

logger = logging.getLogger(__name__)

# ONT vendor serial prefixes, tried in this order
VENDOR_PREFIXES = ('ZTEG', 'HWTC', 'HUAW', 'FHTT', 'FIBR')

SERIAL_PATTERNS = tuple(
    re.compile(rf'({prefix}[A-Z0-9]+)', re.IGNORECASE) for prefix in VENDOR_PREFIXES
)

SC_ORDER_PATTERN = re.compile(r'\b(SC\d{6,})\b', re.IGNORECASE)

RECORD_FIELDS = frozenset(f.name for f in fields(ActivationRecord)) - {'extras'}


def find_serial_number(text: str) -> str:
    """First vendor-prefixed ONT serial found anywhere in the text."""
    for pattern in SERIAL_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return ''


def find_sc_order(text: str) -> str:
    match = SC_ORDER_PATTERN.search(text)
    return match.group(1).strip() if match else ''


class FieldExtractor:
    """
    Extracts activation records according to an extraction profile
    """

    def __init__(
        self,
        profile: Union[ExtractionProfile, str] = STANDARD,
        tz_name: str = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the extractor

        Args:
            profile: Profile instance or name (standard, extended, progress)
            tz_name: Home timezone for the default creation date
            clock: Returns the current time, defaults to now in tz_name
        """
        self.profile = get_profile(profile) if isinstance(profile, str) else profile
        self.tz_name = tz_name
        self.clock = clock or (lambda: now_in(self.tz_name))

    def _technician(self, identity: str, roster_entry: Optional[RosterEntry]) -> str:
        if self.profile.use_roster_handle and roster_entry and roster_entry.technician_handle:
            return roster_entry.technician_handle
        return normalize_identity(identity)

    def extract(
        self,
        raw_text: str,
        identity: str,
        roster_entry: Optional[RosterEntry] = None,
        now: Optional[datetime] = None
    ) -> ActivationRecord:
        """
        Extract a record from a message

        Missing labels leave empty fields; nothing here raises on malformed
        input. Callers must reject records with an empty AO.

        Args:
            raw_text: Message body without the command
            identity: Sender's Telegram username
            roster_entry: Sender's MASTER row, if registered
            now: Overrides the clock for the default creation date

        Returns:
            ActivationRecord with every field set (possibly empty)
        """
        text = raw_text or ''
        values = {rule.field: '' for rule in self.profile.rules}

        for rule in self.profile.rules:
            if values.get(rule.field):
                continue
            match = rule.pattern.search(text)
            if match and match.group(1):
                values[rule.field] = match.group(1).strip()

        if self.profile.fallbacks:
            if not values.get('sn_ont'):
                values['sn_ont'] = find_serial_number(text)

            if not values.get('sc_order_no'):
                values['sc_order_no'] = find_sc_order(text)

            if not values.get('ao') and values.get('sc_order_no'):
                values['ao'] = values['sc_order_no']

            if not values.get('workorder') and values.get('ao'):
                values['workorder'] = values['ao']

        if not values.get(DATE_FIELD):
            values[DATE_FIELD] = format_long_date(now or self.clock())

        record = ActivationRecord(
            **{k: v for k, v in values.items() if k in RECORD_FIELDS},
            extras={k: v for k, v in values.items() if k not in RECORD_FIELDS}
        )
        record.teknisi = self._technician(identity, roster_entry)

        logger.debug(f"Extracted record AO={record.ao!r} with profile {self.profile.name}")
        return record


def extract(
    raw_text: str,
    fallback_identity: str,
    roster_entry: Optional[RosterEntry] = None,
    profile: Union[ExtractionProfile, str] = STANDARD,
    now: Optional[datetime] = None,
    tz_name: str = DEFAULT_TIMEZONE
) -> ActivationRecord:
    """Convenience wrapper around FieldExtractor.extract"""
    return FieldExtractor(profile, tz_name=tz_name).extract(
        raw_text, fallback_identity, roster_entry=roster_entry, now=now
    )
