"""
Shared fixtures: an in-memory spreadsheet and a service wired to it.
"""
import copy
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from rekapan.models import SHEET_HEADERS
from rekapan.service import ActivationService
from rekapan.storage import ActivationRepository, RosterRepository

JAKARTA = ZoneInfo('Asia/Jakarta')

# Wednesday
FIXED_NOW = datetime(2024, 6, 12, 9, 30, 0, tzinfo=JAKARTA)

REKAPAN = 'REKAPAN QUALITY'
MASTER = 'MASTER'

MASTER_HEADER = ['NO', 'NAMA', 'UNIT', 'SEKTOR', 'HP', 'EMAIL', 'MITRA', 'ID', 'USERNAME', 'ROLE', 'STATUS']


def roster_row(handle, role='TEKNISI', status='AKTIF', member_id='1'):
    return ['1', 'Nama', 'UNIT', 'SEKTOR', '08', 'a@b.c', 'MITRA', member_id, handle, role, status]


def record_row(tanggal, channel='', workzone='', teknisi='', ao=''):
    row = [''] * len(SHEET_HEADERS)
    row[0] = tanggal
    row[1] = channel
    row[3] = ao
    row[7] = workzone
    row[17] = teknisi
    return row


class FakeSheets:
    """In-memory stand-in for GoogleSheetsManager."""

    def __init__(self, data=None):
        self.data = copy.deepcopy(data or {})
        self.appended = []
        self.updated = []

    def get_values(self, range_name):
        return copy.deepcopy(self.data.get(range_name, []))

    def append_row(self, sheet_name, row):
        self.data.setdefault(sheet_name, []).append(list(row))
        self.appended.append((sheet_name, list(row)))
        return {'updates': {'updatedRows': 1}}

    def update_values(self, sheet_name, a1_range, rows):
        self.updated.append((sheet_name, a1_range, [list(r) for r in rows]))
        self.data[sheet_name] = [list(r) for r in rows] + self.data.get(sheet_name, [])[len(rows):]
        return {'updatedRange': f"{sheet_name}!{a1_range}"}


@pytest.fixture
def roster_rows():
    return [
        MASTER_HEADER,
        roster_row('@boss', role='ADMIN', member_id='100'),
        roster_row('tekno1', member_id='101'),
        roster_row('Tekno2', member_id='102'),
        roster_row('olduser', status='NONAKTIF', member_id='103'),
    ]


@pytest.fixture
def record_rows():
    return [
        SHEET_HEADERS,
        record_row('Rabu, 12 Juni 2024', 'MYIH', 'KBU', 'tekno1', 'AO-1'),
        record_row('Rabu, 12 Juni 2024', 'MYIH', 'KBU', 'Tekno2', 'AO-2'),
        record_row('Senin, 10 Juni 2024', 'SALES', 'BDG', 'tekno1', 'AO-3'),
        record_row('Sabtu, 1 Juni 2024', 'myih', 'BDG', 'Tekno2', 'AO-4'),
        record_row('2024-06-12', 'MYIH', 'KBU', 'tekno1', 'AO-5'),
    ]


@pytest.fixture
def sheets(roster_rows, record_rows):
    return FakeSheets({MASTER: roster_rows, REKAPAN: record_rows})


@pytest.fixture
def service(sheets, tmp_path):
    return ActivationService(
        records=ActivationRepository(sheets, REKAPAN),
        roster=RosterRepository(sheets, MASTER),
        tz_name='Asia/Jakarta',
        export_dir=str(tmp_path),
        clock=lambda: FIXED_NOW
    )
