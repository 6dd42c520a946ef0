"""
Record aggregation for reports

Filters stored activation records by date window and technician and
counts them per channel, workzone and technician.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from rekapan.models import ActivationRecord, normalize_identity
from rekapan.reporting.periods import DateWindow, parse_long_date

logger = logging.getLogger(__name__)

EMPTY_GROUP = '-'


def group_key(value: Optional[str]) -> str:
    """Bucket key for a channel, workzone or technician value."""
    key = (value or '').strip().upper()
    return key or EMPTY_GROUP


@dataclass
class AggregateResult:
    """Counts for one report query. Counters keep first-seen key order."""
    total: int = 0
    by_channel: Counter = field(default_factory=Counter)
    by_workzone: Counter = field(default_factory=Counter)
    by_technician: Counter = field(default_factory=Counter)
    records: List[ActivationRecord] = field(default_factory=list)

    def add(self, record: ActivationRecord):
        self.total += 1
        self.by_channel[group_key(record.channel)] += 1
        self.by_workzone[group_key(record.workzone)] += 1
        self.by_technician[group_key(record.technician_identity)] += 1
        self.records.append(record)


def filter_by_window(records: Iterable[ActivationRecord], window: DateWindow) -> List[ActivationRecord]:
    """
    Keep records whose stored date falls inside the window

    Records with an unparsable date are dropped.
    """
    kept = []
    skipped = 0
    for record in records:
        day = parse_long_date(record.tanggal)
        if day is None:
            skipped += 1
            continue
        if window.contains(day):
            kept.append(record)

    if skipped:
        logger.debug(f"Skipped {skipped} records with unparsable dates")
    return kept


def filter_by_identity(records: Iterable[ActivationRecord], identity: str) -> List[ActivationRecord]:
    wanted = normalize_identity(identity)
    return [r for r in records if r.technician_identity == wanted]


def aggregate(
    records: Iterable[ActivationRecord],
    window: Optional[DateWindow] = None,
    identity_filter: Optional[str] = None
) -> AggregateResult:
    """
    Filter records and count them per group

    Args:
        records: Stored records, header row already removed
        window: Optional date window
        identity_filter: Optional technician handle

    Returns:
        AggregateResult with the retained-record total and the three buckets
    """
    selected = list(records)
    if window is not None:
        selected = filter_by_window(selected, window)
    if identity_filter is not None:
        selected = filter_by_identity(selected, identity_filter)

    result = AggregateResult()
    for record in selected:
        result.add(record)
    return result
